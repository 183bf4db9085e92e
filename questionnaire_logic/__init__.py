"""Rule and configuration interpreters for questionnaire JSON columns."""

__version__ = "1.0.0"
