"""Document provider implementations."""

import logging
from typing import Any

from ...core.domain import Document, DocumentRequest
from ...core.ports.document_provider_port import DocumentProviderPort
from .data_sources.clinicaltrials_adapter import ClinicalTrialsGovAdapter
from .data_sources.study_assembler import assemble_study_document, assemble_study_documents

logger = logging.getLogger(__name__)


class StaticDocumentProvider(DocumentProviderPort):
    """Serves a fixed batch of documents, e.g. inline API input or test fixtures."""

    def __init__(self, documents: list[Document]) -> None:
        self.documents = list(documents)

    def get_documents(self, request: DocumentRequest) -> list[Document]:
        """Return the configured documents; the request is ignored."""
        return list(self.documents)


class ClinicalTrialsGovDocumentProvider(DocumentProviderPort):
    """Searches ClinicalTrials.gov and assembles one document per study."""

    def __init__(self, client: ClinicalTrialsGovAdapter) -> None:
        self.client = client

    def get_documents(self, request: DocumentRequest) -> list[Document]:
        """Search by drug (intervention), condition and free-text query.

        Raises:
            UpstreamAPIError: If the API call fails.
            DocumentAssemblyError: If a returned record cannot be assembled.
        """
        data = self.client.search_studies(
            intervention=request.drug,
            condition=request.condition,
            term=request.query,
            status="COMPLETED" if request.completed_only else None,
            page_size=request.limit,
        )
        studies = data.get("studies") or []
        logger.info(f"Assembling {len(studies)} studies into documents")
        return assemble_study_documents(studies)

    def get_study_document(self, nct_id: str) -> tuple[Document, dict[str, Any]]:
        """Fetch one study and assemble it.

        Returns:
            The assembled document and the raw study record.

        Raises:
            StudyNotFoundError: If no study has ``nct_id``.
            UpstreamAPIError: If the API call fails.
            DocumentAssemblyError: If the record cannot be assembled.
        """
        study = self.client.get_study(nct_id)
        logger.info(f"Assembling study {nct_id} into a document")
        return assemble_study_document(study), study
