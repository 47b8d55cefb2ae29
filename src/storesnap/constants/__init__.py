"""Shared constants for storesnap."""
