"""Photograph an object, find similar items through an image-search provider."""

__version__ = "0.1.0"
