"""Validation exceptions for caller input."""

from .base import CTGovRAGError


class ValidationError(CTGovRAGError):
    """Input validation failed."""

    error_code = "RAG_VAL_001"


class MissingDrugNameError(ValidationError):
    """A safety profile was requested without a drug name."""

    error_code = "RAG_VAL_002"


class InvalidControlTypeError(ValidationError):
    """An adverse-event comparison was requested with an unknown control type."""

    error_code = "RAG_VAL_003"
