"""Physarum agent-based model: PRNG, food fields, engine and trail renderer."""
