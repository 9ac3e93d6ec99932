"""Shared helpers: responses, validation, errors, dates."""
