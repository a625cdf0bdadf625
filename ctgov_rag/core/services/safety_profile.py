"""Adverse-event safety profile across clinical-trial records.

Works on ClinicalTrials.gov v2 study records: collects serious and other
adverse events from each study's results section, aggregates them by
term, and grades the overall risk from the share of serious events. Also
compares adverse-event data of a drug against a control type.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..domain.exceptions import InvalidControlTypeError, MissingDrugNameError

logger = logging.getLogger(__name__)

HIGH_RISK_SERIOUS_SHARE = 0.10
MODERATE_RISK_SERIOUS_SHARE = 0.05
MOST_COMMON_LIMIT = 10

CONTROL_TYPES = ("placebo", "active_control", "dose_comparison")
NO_COMPARISON_MESSAGE = "No studies with adverse event data found for comparison"


class StudySearchClient(Protocol):
    """The part of the ClinicalTrials.gov client this service needs."""

    def search_studies(
        self,
        *,
        condition: str | None = None,
        intervention: str | None = None,
        term: str | None = None,
        status: str | None = None,
        page_size: int = 10,
        count_total: bool = False,
    ) -> dict[str, Any]: ...


@dataclass
class AdverseEventRecord:
    """One adverse-event term reported by one study."""

    nct_id: str | None
    type: str  # "serious" | "other"
    term: str | None
    assessment: str | None = None
    stats: list[dict[str, Any]] = field(default_factory=list)


def _nct_id(study: dict[str, Any]) -> str | None:
    return study.get("protocolSection", {}).get("identificationModule", {}).get("nctId")


def extract_study_adverse_events(study: dict[str, Any]) -> list[AdverseEventRecord]:
    """Collect serious and other adverse events of one study record."""
    module = (study.get("resultsSection") or {}).get("adverseEventsModule")
    if not module:
        return []

    nct_id = _nct_id(study)
    events: list[AdverseEventRecord] = []
    for event_type, key in (("serious", "seriousEvents"), ("other", "otherEvents")):
        for event in module.get(key) or []:
            events.append(
                AdverseEventRecord(
                    nct_id=nct_id,
                    type=event_type,
                    term=event.get("term"),
                    assessment=event.get("assessment"),
                    stats=event.get("stats") or [],
                )
            )
    return events


def extract_adverse_event_comparison(
    study: dict[str, Any], control_type: str
) -> dict[str, Any] | None:
    """Collect one study's adverse-event groups and events for a comparison.

    Returns None when the study has no adverse-event module.
    """
    module = (study.get("resultsSection") or {}).get("adverseEventsModule")
    if not module:
        return None

    identification = study.get("protocolSection", {}).get("identificationModule", {})
    return {
        "nct_id": identification.get("nctId"),
        "title": identification.get("briefTitle"),
        "control_type": control_type,
        "event_groups": module.get("eventGroups") or [],
        "serious_events": module.get("seriousEvents") or [],
        "other_events": module.get("otherEvents") or [],
    }


def summarize_comparisons(comparisons: list[dict[str, Any]], control_type: str) -> dict[str, Any]:
    """Summary block of a comparison; explicit when no study had adverse-event data."""
    if not comparisons:
        return {
            "message": NO_COMPARISON_MESSAGE,
            "recommendation": "Consider searching with broader criteria or different control type",
        }
    return {
        "studies_analyzed": len(comparisons),
        "control_type": control_type,
        "key_findings": "Adverse event comparison data extracted from clinical trials",
        "recommendation": "Review individual study comparisons for detailed safety assessment",
    }


def extract_dose_information(study: dict[str, Any], drug_name: str) -> dict[str, Any] | None:
    """Find the first intervention of ``study`` whose name mentions ``drug_name``."""
    protocol = study.get("protocolSection", {})
    interventions = protocol.get("armsInterventionsModule", {}).get("interventions") or []
    for intervention in interventions:
        if drug_name.lower() in (intervention.get("name") or "").lower():
            return {
                "nct_id": _nct_id(study),
                "intervention_name": intervention.get("name"),
                "description": intervention.get("description"),
                "arm_group_labels": intervention.get("armGroupLabels") or [],
            }
    return None


def aggregate_adverse_events(events: list[AdverseEventRecord]) -> dict[str, Any]:
    """Count events overall and per term.

    Returns:
        Dictionary with ``total_events``, ``serious_events``,
        ``other_events`` and ``by_term`` (count, serious count, studies,
        study count per term).
    """
    by_term: dict[str, dict[str, Any]] = {}
    for event in events:
        entry = by_term.setdefault(
            str(event.term), {"count": 0, "serious_count": 0, "studies": []}
        )
        entry["count"] += 1
        if event.type == "serious":
            entry["serious_count"] += 1
        if event.nct_id not in entry["studies"]:
            entry["studies"].append(event.nct_id)

    for entry in by_term.values():
        entry["study_count"] = len(entry["studies"])

    return {
        "total_events": len(events),
        "serious_events": sum(1 for e in events if e.type == "serious"),
        "other_events": sum(1 for e in events if e.type == "other"),
        "by_term": by_term,
    }


def assess_risk(summary: dict[str, Any]) -> dict[str, Any]:
    """Grade risk from the share of serious events.

    HIGH above 10% serious, MODERATE above 5%, LOW otherwise.
    """
    total = summary["total_events"]
    serious = summary["serious_events"]

    if serious > total * HIGH_RISK_SERIOUS_SHARE:
        level = "HIGH"
    elif serious > total * MODERATE_RISK_SERIOUS_SHARE:
        level = "MODERATE"
    else:
        level = "LOW"

    most_common = sorted(summary["by_term"].items(), key=lambda item: -item[1]["count"])
    return {
        "overall_risk_level": level,
        "serious_event_rate": f"{serious / total * 100:.2f}%" if total > 0 else "0%",
        "most_common_events": [
            {"term": term, "count": data["count"], "study_count": data["study_count"]}
            for term, data in most_common[:MOST_COMMON_LIMIT]
        ],
    }


class SafetyProfileService:
    """Builds a drug's safety profile from ClinicalTrials.gov results."""

    def __init__(self, client: StudySearchClient) -> None:
        self.client = client

    def analyze(
        self,
        drug_name: str,
        condition: str | None = None,
        completed_only: bool = True,
        limit: int = 20,
    ) -> dict[str, Any]:
        """Aggregate adverse events of studies testing ``drug_name``.

        Args:
            drug_name: Intervention to search for.
            condition: Optional condition to narrow the search.
            completed_only: Restrict to completed studies.
            limit: Maximum number of studies to analyse.

        Returns:
            Safety analysis with study counts, aggregated events, per-study
            dose information and a risk assessment.

        Raises:
            MissingDrugNameError: If ``drug_name`` is blank.
        """
        if not drug_name or not drug_name.strip():
            raise MissingDrugNameError("drug_name is required for a safety profile")

        data = self.client.search_studies(
            intervention=drug_name,
            condition=condition,
            status="COMPLETED" if completed_only else None,
            page_size=limit,
            count_total=True,
        )

        analyzed = 0
        events: list[AdverseEventRecord] = []
        dose_groups: list[dict[str, Any]] = []
        for study in data.get("studies") or []:
            if not study.get("resultsSection"):
                continue
            analyzed += 1
            events.extend(extract_study_adverse_events(study))
            dose_info = extract_dose_information(study, drug_name)
            if dose_info:
                dose_groups.append(dose_info)

        logger.info(
            f"Safety profile for {drug_name}: {analyzed} studies, {len(events)} events",
            extra={"drug": drug_name, "condition": condition},
        )

        summary = aggregate_adverse_events(events)
        return {
            "drug_name": drug_name,
            "condition": condition,
            "total_studies": data.get("totalCount") or 0,
            "analyzed_studies": analyzed,
            "adverse_events_summary": summary,
            "dose_response_analysis": [
                {
                    **dose,
                    "associated_events": sum(1 for e in events if e.nct_id == dose["nct_id"]),
                }
                for dose in dose_groups
            ],
            "risk_assessment": assess_risk(summary),
        }

    def compare_adverse_events(
        self,
        drug_name: str,
        control_type: str = "placebo",
        condition: str | None = None,
        limit: int = 10,
    ) -> dict[str, Any]:
        """Collect adverse-event data of studies testing ``drug_name`` against a control.

        Placebo comparisons are restricted to completed studies. Only
        studies whose results carry an adverse-event module are compared.

        Args:
            drug_name: Intervention to search for.
            control_type: One of ``CONTROL_TYPES``.
            condition: Optional condition to narrow the search.
            limit: Maximum number of studies to fetch.

        Returns:
            Per-study event groups and events plus a summary block, which
            carries ``NO_COMPARISON_MESSAGE`` when nothing was comparable.

        Raises:
            MissingDrugNameError: If ``drug_name`` is blank.
            InvalidControlTypeError: If ``control_type`` is unknown.
        """
        if not drug_name or not drug_name.strip():
            raise MissingDrugNameError("drug_name is required for an adverse-event comparison")
        if control_type not in CONTROL_TYPES:
            raise InvalidControlTypeError(
                f"control_type must be one of {', '.join(CONTROL_TYPES)}",
                context={"control_type": control_type},
            )

        data = self.client.search_studies(
            intervention=drug_name,
            condition=condition,
            status="COMPLETED" if control_type == "placebo" else None,
            page_size=limit,
            count_total=True,
        )

        comparisons = []
        for study in data.get("studies") or []:
            comparison = extract_adverse_event_comparison(study, control_type)
            if comparison:
                comparisons.append(comparison)

        logger.info(
            f"Adverse-event comparison for {drug_name} ({control_type}): "
            f"{len(comparisons)} studies with data",
            extra={"drug": drug_name, "condition": condition},
        )

        return {
            "drug_name": drug_name,
            "control_type": control_type,
            "condition": condition,
            "total_studies_found": data.get("totalCount") or 0,
            "studies_with_results": len(comparisons),
            "adverse_event_comparisons": comparisons,
            "summary": summarize_comparisons(comparisons, control_type),
        }
