"""Repository layer - data access abstractions."""
