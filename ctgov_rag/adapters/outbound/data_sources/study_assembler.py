"""Turns ClinicalTrials.gov study records into engine documents."""

import logging
from typing import Any

from ....core.domain import Document, DocumentMetadata
from ....core.domain.exceptions import DocumentAssemblyError
from ....core.domain.utils import normalize_text

logger = logging.getLogger(__name__)

CONTENT_TYPE = "clinical_trial"


def _join(values: list[Any]) -> str:
    return ", ".join(normalize_text(str(v)) for v in values if v)


def _event_terms(events: list[dict[str, Any]]) -> str:
    terms = dict.fromkeys(normalize_text(e.get("term")) for e in events if e.get("term"))
    return ", ".join(terms)


def assemble_study_document(study: dict[str, Any]) -> Document:
    """Build a plain-text document from one study record.

    The text is a sequence of labelled sections (title, conditions,
    interventions, summary, description, eligibility, primary outcomes and
    adverse-event terms); sections without content are omitted.

    Args:
        study: A ``studies[]`` entry or a single-study response.

    Returns:
        Document keyed by the study's NCT ID.

    Raises:
        DocumentAssemblyError: If the record has no NCT ID.
    """
    protocol = study.get("protocolSection") or {}
    identification = protocol.get("identificationModule") or {}
    nct_id = identification.get("nctId")
    if not nct_id:
        raise DocumentAssemblyError(
            "Study record has no NCT ID", context={"keys": sorted(study.keys())}
        )

    description = protocol.get("descriptionModule") or {}
    status = protocol.get("statusModule") or {}
    design = protocol.get("designModule") or {}
    eligibility = protocol.get("eligibilityModule") or {}
    conditions = protocol.get("conditionsModule") or {}
    arms = protocol.get("armsInterventionsModule") or {}
    outcomes = protocol.get("outcomesModule") or {}

    results = study.get("resultsSection") or {}
    adverse_events = results.get("adverseEventsModule") or {}

    title = normalize_text(identification.get("briefTitle") or identification.get("officialTitle"))

    sections = [
        ("Title", title),
        ("Status", normalize_text(status.get("overallStatus"))),
        ("Phase", _join(design.get("phases") or [])),
        ("Conditions", _join(conditions.get("conditions") or [])),
        ("Interventions", _join([i.get("name") for i in arms.get("interventions") or []])),
        ("Brief summary", normalize_text(description.get("briefSummary"))),
        ("Detailed description", normalize_text(description.get("detailedDescription"))),
        ("Eligibility criteria", normalize_text(eligibility.get("eligibilityCriteria"))),
        (
            "Primary outcomes",
            _join([o.get("measure") for o in outcomes.get("primaryOutcomes") or []]),
        ),
        ("Serious adverse events", _event_terms(adverse_events.get("seriousEvents") or [])),
        ("Other adverse events", _event_terms(adverse_events.get("otherEvents") or [])),
    ]
    text = "\n\n".join(f"{label}: {value}" for label, value in sections if value)

    return Document(
        source_id=nct_id,
        text=text,
        metadata=DocumentMetadata(
            title=title or None,
            content_type=CONTENT_TYPE,
            has_results=bool(results),
            has_adverse_events=bool(adverse_events),
        ),
    )


def assemble_study_documents(studies: list[dict[str, Any]]) -> list[Document]:
    """Assemble documents for a batch of studies, preserving their order."""
    documents = [assemble_study_document(study) for study in studies]
    logger.debug(f"Assembled {len(documents)} documents")
    return documents
