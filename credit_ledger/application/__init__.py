"""Application layer: use-case services and DTOs."""
