"""Command line interface for methodcheck."""
