"""Command line interface for pr-bumper."""
