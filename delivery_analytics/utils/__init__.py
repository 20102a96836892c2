"""Shared utilities: errors, logging, configuration and numeric helpers."""
