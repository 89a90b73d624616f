"""Default implementations of application ports."""
