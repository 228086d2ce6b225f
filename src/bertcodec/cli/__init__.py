"""Command line interface for bertcodec."""
