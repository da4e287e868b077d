"""Randonneurs club backend: brevet control times, event lifecycle, result collection."""

__version__ = "0.1.0"
