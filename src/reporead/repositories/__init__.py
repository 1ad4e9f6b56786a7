"""Repository layer — protocol interfaces, SQL implementations, fakes."""
