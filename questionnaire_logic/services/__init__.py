"""Service modules for questionnaire logic."""
