"""Command line interface for notecell."""
