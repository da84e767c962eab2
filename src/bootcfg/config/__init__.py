"""Settings resolution and logging setup."""
