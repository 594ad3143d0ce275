"""Tarball cache directory and its filename scheme."""
