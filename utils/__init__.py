"""Parsing, export and monitoring helpers."""
