"""Command-line interface for storesnap."""
