"""Streaming JSON-Patch engine."""

from jsonmaps.patch.pointer import apply_patch, parse_pointer
from jsonmaps.patch.stream import PatchStream, apply_stream, fold_patches, parse_line

__all__ = ["PatchStream", "apply_patch", "apply_stream", "fold_patches", "parse_line", "parse_pointer"]
