"""Rendering and writing of generated slices."""
