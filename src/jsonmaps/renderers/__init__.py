"""Renderer implementations."""

from jsonmaps.renderers.memory import InMemoryRenderer

__all__ = ["InMemoryRenderer"]
