"""Data models and the recipe store."""
