"""Capture data models: pages, regions, tokens and the owning document."""
