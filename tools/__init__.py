"""Deterministic pitch tools and their auto-discovering registry."""
