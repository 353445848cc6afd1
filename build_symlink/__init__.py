"""Permalink and legacy symlink maintenance for numbered build records."""
