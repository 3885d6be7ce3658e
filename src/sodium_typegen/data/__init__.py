"""Packaged declaration tables."""
