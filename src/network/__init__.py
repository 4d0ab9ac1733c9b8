"""Qualitative regulatory network models and their loader."""

from __future__ import annotations

from .errors import ModelError, ModelFileError, ModelValidationError, Severity, ValidationIssue, ValidationReport
from .loader import get_profile, obtain_model, parse_model, validate
from .species import Model, Rule, Species, build_model

__all__ = [
    "Model",
    "ModelError",
    "ModelFileError",
    "ModelValidationError",
    "Rule",
    "Severity",
    "Species",
    "ValidationIssue",
    "ValidationReport",
    "build_model",
    "get_profile",
    "obtain_model",
    "parse_model",
    "validate",
]
