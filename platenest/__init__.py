"""platenest - 2-D part nesting on rectangular plates."""

__version__ = "0.1.0"
