"""Countertop project configurator: piece model, reducer and spatial layout."""

__version__ = "0.1.0"
