"""BZP CLI commands."""
