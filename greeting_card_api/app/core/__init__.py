"""Core infrastructure: configuration, logging, errors and the database."""
