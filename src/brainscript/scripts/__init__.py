"""Operational scripts (seeding, maintenance)."""
