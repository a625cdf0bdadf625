"""
Pytest configuration and shared fixtures.
"""

import pytest

from ctgov_rag.core.domain import Document, DocumentMetadata


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (API surface, mocked upstream)")


@pytest.fixture
def safety_metadata():
    """Metadata of a study that has results with adverse-event data."""
    return DocumentMetadata(
        title="Aspirin for Secondary Prevention",
        content_type="clinical_trial",
        has_results=True,
        has_adverse_events=True,
    )


@pytest.fixture
def sample_documents(safety_metadata):
    """Two small trial documents: one with safety data, one without."""
    return [
        Document(
            source_id="NCT00000001",
            text=(
                "Patients receiving aspirin showed a higher rate of gastrointestinal "
                "bleeding than placebo. Serious adverse events were reported in 4% of "
                "participants."
            ),
            metadata=safety_metadata,
        ),
        Document(
            source_id="NCT00000002",
            text="The dosing schedule was 100 mg once daily for twelve weeks.",
            metadata=DocumentMetadata(title="Dosing Study", content_type="clinical_trial"),
        ),
    ]


@pytest.fixture
def study_record():
    """A ClinicalTrials.gov v2 study record with results and adverse events."""
    return {
        "protocolSection": {
            "identificationModule": {
                "nctId": "NCT04267848",
                "briefTitle": "Aspirin  in   Atrial Fibrillation",
            },
            "statusModule": {"overallStatus": "COMPLETED"},
            "designModule": {"phases": ["PHASE3"]},
            "conditionsModule": {"conditions": ["Atrial Fibrillation", "Stroke"]},
            "armsInterventionsModule": {
                "interventions": [
                    {
                        "name": "Aspirin 100 mg",
                        "description": "Once daily",
                        "armGroupLabels": ["Aspirin"],
                    },
                    {"name": "Placebo", "armGroupLabels": ["Placebo"]},
                ]
            },
            "descriptionModule": {
                "briefSummary": "\ufeffA randomized trial of aspirin.\r\n",
                "detailedDescription": "Participants were followed for bleeding risk.",
            },
            "eligibilityModule": {"eligibilityCriteria": "Adults over 18"},
            "outcomesModule": {"primaryOutcomes": [{"measure": "Major bleeding"}]},
        },
        "resultsSection": {
            "adverseEventsModule": {
                "seriousEvents": [
                    {"term": "Gastrointestinal haemorrhage", "assessment": "SYSTEMATIC_ASSESSMENT"},
                    {"term": "Stroke", "assessment": "SYSTEMATIC_ASSESSMENT"},
                ],
                "otherEvents": [
                    {"term": "Headache", "assessment": "NON_SYSTEMATIC_ASSESSMENT"},
                    {"term": "Headache", "assessment": "NON_SYSTEMATIC_ASSESSMENT"},
                    {"term": "Nausea"},
                ],
            }
        },
    }
