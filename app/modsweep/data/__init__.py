"""Bundled data files (default rule source, theme)."""
