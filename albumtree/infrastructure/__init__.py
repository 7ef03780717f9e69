"""Infrastructure layer - database access."""
