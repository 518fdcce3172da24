"""Infrastructure adapters for VinBoard."""
