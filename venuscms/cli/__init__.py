"""Command line tools for VenusCMS."""
