"""Glue around the tree: instrument, dates, display and population."""
