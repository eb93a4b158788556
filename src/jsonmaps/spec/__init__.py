"""Spec validation, loading and palettes."""

from jsonmaps.spec.palettes import PALETTES, get_palette
from jsonmaps.spec.validator import format_spec_issues, load_spec, read_spec_document, validate

__all__ = ["PALETTES", "format_spec_issues", "get_palette", "load_spec", "read_spec_document", "validate"]
