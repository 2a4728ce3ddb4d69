"""Pitch tools. Every concrete MusicalTool here is picked up by ToolRegistry.discover()."""
