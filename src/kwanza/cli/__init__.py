"""Command-line interface for kwanza."""
