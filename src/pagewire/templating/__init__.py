"""Kida integration for the root HTML document."""
