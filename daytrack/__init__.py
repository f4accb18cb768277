"""DayTrack - journal, exercise, habit and expense tracking with AI extraction."""

__version__ = "0.1.0"
