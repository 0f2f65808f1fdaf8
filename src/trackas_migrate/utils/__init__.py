"""Shared helpers: logging and SQL execution."""
