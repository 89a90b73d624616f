"""Filesystem infrastructure for the normalizer."""
