"""Scribz notes backend: auth, note lifecycle store and HTTP API."""
