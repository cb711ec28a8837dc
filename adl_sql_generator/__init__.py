"""Generate SQL table definitions from ADL declarations."""

__version__ = "0.1.0"
