"""Recipe Assistant: parse, store, price and generate recipes."""

__version__ = "0.1.0"
