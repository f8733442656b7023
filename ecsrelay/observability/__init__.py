"""Logging and metrics for the relay."""
