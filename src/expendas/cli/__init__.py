"""Command line interface for expendas."""
