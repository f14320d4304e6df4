"""Command-line interface for Conveyor."""
