"""Adapters for network, parsing and output."""
