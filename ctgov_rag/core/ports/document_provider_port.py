"""Document Provider Port Interface."""

from abc import ABC, abstractmethod

from ..domain import Document, DocumentRequest


class DocumentProviderPort(ABC):
    """Abstract source of the documents analysed in one pipeline call.

    Implementations own all transport and record-format concerns. Failures
    must surface as ``DocumentProviderError`` (or propagate untouched); the
    engine never reinterprets them.
    """

    @abstractmethod
    def get_documents(self, request: DocumentRequest) -> list[Document]:
        """Return documents for the request, in arrival order."""
        ...
