"""Helpers shared across the academy's student tools."""
