"""Session context."""
