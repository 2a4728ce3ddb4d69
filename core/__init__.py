"""Pitch fitting core: pure, dependency-light music theory."""
