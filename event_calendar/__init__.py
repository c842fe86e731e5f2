"""Event Calendar: calendar scheduling back end with recurring-event generation."""

__version__ = "0.1.0"
