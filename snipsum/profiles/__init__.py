"""Capture profiles (YAML) for overlay and recognizer behavior."""
