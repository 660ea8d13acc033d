"""Domain models shared across services."""
