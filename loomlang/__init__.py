"""Syntax tree, built-in catalogue, formatter and editor-support helpers for the Loom language."""

__version__ = "0.1.0"