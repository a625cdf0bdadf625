"""Ports implemented by outbound adapters."""

from .document_provider_port import DocumentProviderPort

__all__ = ["DocumentProviderPort"]
