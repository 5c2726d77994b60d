"""Command-line interface for bencodec."""
