"""Result output for arrival computations."""
from .writer import format_arrivals, should_write, write_arrivals

__all__ = ["format_arrivals", "should_write", "write_arrivals"]
