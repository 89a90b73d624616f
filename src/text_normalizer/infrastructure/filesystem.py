"""File discovery and atomic in-place replacement."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def _is_regular_file(path: Path) -> bool:
    return path.is_file() and not path.is_symlink()


def _walk_regular_files(root: Path) -> list[Path]:
    found: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        found.extend(
            base / name for name in filenames if _is_regular_file(base / name)
        )
    return found


def iter_target_files(path: Path, *, recursive: bool) -> Iterator[Path]:
    """Yield the files an input path refers to.

    Parameters
    ----------
    path : Path
        File or directory given on the command line.
    recursive : bool
        Walk directories to any depth instead of only their direct children.

    Yields
    ------
    Path
        Candidate files, sorted lexicographically per input path. A path that
        is not a directory is yielded unchanged; callers decide whether it is
        a regular file.

    Notes
    -----
    - Symbolic links found inside directories are not followed.
    """
    if not path.is_dir():
        yield path
        return

    if recursive:
        candidates = _walk_regular_files(path)
    else:
        candidates = [child for child in path.iterdir() if _is_regular_file(child)]
    logger.debug("found %d file(s) under %s", len(candidates), path)
    yield from sorted(candidates)


class AtomicFileWriter:
    """Replace file content via a temporary sibling and ``os.replace``."""

    def replace(self, path: Path, data: bytes) -> None:
        """Write ``data`` over ``path`` atomically.

        The temporary file lives in the same directory so the final rename
        stays on one filesystem. The original file's permission bits are
        carried over. On any failure the temporary file is removed and the
        original is left untouched.

        Raises
        ------
        OSError
            If the temporary file cannot be written or the rename fails.
        """
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        tmp_path = Path(tmp_name)
        logger.debug("staging %s in %s", path, tmp_path)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            shutil.copymode(path, tmp_path)
            os.replace(tmp_path, path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
