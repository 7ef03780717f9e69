"""Application layer - services composed from the hierarchy components."""
