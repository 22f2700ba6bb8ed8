"""Command-line tools for adventure data files."""
