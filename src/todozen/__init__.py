"""todozen: a date-organized to-do list with local JSON persistence."""

__version__ = "0.1.0"
