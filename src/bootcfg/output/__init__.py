"""Terminal output for startup results."""
