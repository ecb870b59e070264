"""View API for the presentation layer."""
