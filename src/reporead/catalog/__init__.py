"""Catalog features — search, trending, favorites, screenshots, preferences."""
