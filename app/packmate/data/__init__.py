"""Bundled data files for packmate."""
