"""Persistence infrastructure: engine setup and repositories."""
