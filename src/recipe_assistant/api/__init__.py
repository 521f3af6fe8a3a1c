"""REST API for the Recipe Assistant."""
