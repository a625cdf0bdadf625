"""Integration tests for FastAPI endpoints."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from ctgov_rag.adapters.outbound.document_providers import StaticDocumentProvider
from ctgov_rag.config.settings import settings
from ctgov_rag.core.domain import Document, DocumentMetadata, DocumentRequest
from ctgov_rag.core.domain.exceptions import (
    InvalidControlTypeError,
    MissingDrugNameError,
    StudyNotFoundError,
    UpstreamAPIError,
)
from ctgov_rag.core.services import NO_MATCH_MESSAGE, TRUNCATION_MARKER, RAGPipelineService

pytestmark = pytest.mark.integration

INLINE_DOCUMENTS = [
    {
        "source_id": "NCT00000001",
        "text": "Aspirin increased gastrointestinal bleeding. Serious adverse events were rare.",
        "metadata": {"title": "Aspirin", "has_results": True, "has_adverse_events": True},
    },
    {
        "source_id": "NCT00000002",
        "text": "The dosing schedule was 100 mg once daily.",
    },
]


@pytest.fixture
def mock_safety_service():
    """Mock the safety profile service."""
    mock = MagicMock()
    mock.analyze.return_value = {
        "drug_name": "aspirin",
        "condition": None,
        "total_studies": 3,
        "analyzed_studies": 2,
        "adverse_events_summary": {
            "total_events": 4,
            "serious_events": 1,
            "other_events": 3,
            "by_term": {},
        },
        "dose_response_analysis": [],
        "risk_assessment": {
            "overall_risk_level": "HIGH",
            "serious_event_rate": "25.00%",
            "most_common_events": [],
        },
    }
    mock.compare_adverse_events.return_value = {
        "drug_name": "aspirin",
        "control_type": "placebo",
        "condition": None,
        "total_studies_found": 2,
        "studies_with_results": 1,
        "adverse_event_comparisons": [
            {
                "nct_id": "NCT04267848",
                "title": "Aspirin in Atrial Fibrillation",
                "control_type": "placebo",
                "event_groups": [],
                "serious_events": [{"term": "Stroke"}],
                "other_events": [],
            }
        ],
        "summary": {"studies_analyzed": 1, "control_type": "placebo"},
    }
    return mock


@pytest.fixture
def mock_pipeline_service():
    """Pipeline service over fixed documents instead of ClinicalTrials.gov."""
    documents = [
        Document(
            "NCT04267848",
            "Participants were followed for bleeding risk.",
            DocumentMetadata(has_results=True),
        )
    ]
    return RAGPipelineService(StaticDocumentProvider(documents), source="clinicaltrials.gov")


@pytest.fixture
def mock_study_provider(study_record):
    """Mock the single-study document provider."""
    mock = MagicMock()
    mock.get_study_document.return_value = (
        Document(
            "NCT04267848",
            "Title: Aspirin in Atrial Fibrillation",
            DocumentMetadata(title="Aspirin in Atrial Fibrillation", has_results=True),
        ),
        study_record,
    )
    return mock


@pytest.fixture
def client(mock_pipeline_service, mock_safety_service, mock_study_provider):
    """Create test client with mocked dependencies."""
    with (
        patch(
            "ctgov_rag.adapters.inbound.api.routers.analysis.get_pipeline_service"
        ) as mock_get_pipeline,
        patch(
            "ctgov_rag.adapters.inbound.api.routers.analysis.get_safety_service"
        ) as mock_get_safety,
        patch(
            "ctgov_rag.adapters.inbound.api.routers.studies.get_study_provider"
        ) as mock_get_study_provider,
    ):
        mock_get_pipeline.return_value = mock_pipeline_service
        mock_get_safety.return_value = mock_safety_service
        mock_get_study_provider.return_value = mock_study_provider

        from ctgov_rag.adapters.inbound.api.main import app

        yield TestClient(app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "1.0.0"}


class TestAnalyzeEndpoint:
    """Tests for the pipeline endpoint."""

    def test_inline_documents(self, client):
        response = client.post(
            "/api/v1/analyze",
            json={"query": "bleeding risk", "documents": INLINE_DOCUMENTS, "top_k": 1},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "bleeding risk"
        assert len(data["topChunks"]) == 1
        assert data["topChunks"][0]["sourceId"] == "NCT00000001"
        assert data["topChunks"][0]["metadata"]["hasAdverseEvents"] is True
        assert data["summary"].startswith("[Source: NCT00000001] ")
        assert data["citations"] == [{"sourceId": "NCT00000001", "ranges": [[0, 78]]}]

    def test_fetched_documents(self, client):
        response = client.post("/api/v1/analyze", json={"drug": "aspirin", "query": "bleeding"})

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "clinicaltrials.gov"
        assert data["drug"] == "aspirin"
        assert data["topChunks"][0]["sourceId"] == "NCT04267848"

    def test_no_match_is_not_an_error(self, client):
        documents = [{"source_id": "NCT9", "text": "Dosing was weekly."}]
        response = client.post(
            "/api/v1/analyze", json={"query": "haemoglobin", "documents": documents}
        )

        assert response.status_code == 200
        assert response.json()["topChunks"] == []
        assert response.json()["citations"] == []
        assert response.json()["summary"] == NO_MATCH_MESSAGE

    def test_invalid_overlap_returns_400(self, client):
        response = client.post(
            "/api/v1/analyze",
            json={"query": "x", "documents": INLINE_DOCUMENTS, "chunk_size": 50, "overlap": 50},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "RAG_CFG_002"

    def test_top_k_out_of_range_returns_400(self, client):
        response = client.post(
            "/api/v1/analyze", json={"query": "x", "documents": INLINE_DOCUMENTS, "top_k": 11}
        )

        assert response.status_code == 400
        assert response.json()["error"]["type"] == "InvalidConfigurationError"

    def test_upstream_failure_returns_502(self, client, mock_pipeline_service):
        with patch.object(
            mock_pipeline_service.provider,
            "get_documents",
            side_effect=UpstreamAPIError("ClinicalTrials.gov request failed"),
        ):
            response = client.post("/api/v1/analyze", json={"drug": "aspirin"})

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "RAG_PRV_002"

    def test_request_validation(self, client):
        response = client.post("/api/v1/analyze", json={"query": "x", "limit": 0})
        assert response.status_code == 422

    def test_top_chunk_text_is_capped_to_summary_length(self, client):
        text = "Serious bleeding was reported in the aspirin arm during follow-up. " * 4
        documents = [{"source_id": "NCT00000003", "text": text}]

        response = client.post(
            "/api/v1/analyze",
            json={
                "query": "bleeding",
                "documents": documents,
                "chunk_size": 300,
                "overlap": 0,
                "summary_max_length": 50,
            },
        )

        assert response.status_code == 200
        top = response.json()["topChunks"][0]
        assert top["text"].endswith(TRUNCATION_MARKER)
        assert top["text"] == text[:50] + TRUNCATION_MARKER
        assert top["endOffset"] - top["startOffset"] == len(text)

    def test_caller_keywords_keep_configured_keywords(self, client, monkeypatch):
        monkeypatch.setattr(settings, "extra_keywords", ["liver enzyme"])
        documents = [
            {"source_id": "NCT1", "text": "Liver enzyme elevation was observed."},
            {"source_id": "NCT2", "text": "Creatinine rose in week four."},
            {"source_id": "NCT3", "text": "Dosing was weekly."},
        ]

        response = client.post(
            "/api/v1/analyze",
            json={"documents": documents, "keyword_boosts": ["creatinine"], "top_k": 3},
        )

        assert response.status_code == 200
        assert {c["sourceId"] for c in response.json()["topChunks"]} == {"NCT1", "NCT2"}

    def test_limit_defaults_to_study_limit_setting(
        self, client, mock_pipeline_service, monkeypatch
    ):
        monkeypatch.setattr(settings, "study_limit", 25)
        with patch.object(
            mock_pipeline_service.provider, "get_documents", return_value=[]
        ) as mock_get:
            response = client.post("/api/v1/analyze", json={"drug": "aspirin"})

        assert response.status_code == 200
        request = mock_get.call_args.args[0]
        assert isinstance(request, DocumentRequest)
        assert request.limit == 25

    def test_explicit_limit_wins_over_setting(self, client, mock_pipeline_service, monkeypatch):
        monkeypatch.setattr(settings, "study_limit", 25)
        with patch.object(
            mock_pipeline_service.provider, "get_documents", return_value=[]
        ) as mock_get:
            client.post("/api/v1/analyze", json={"drug": "aspirin", "limit": 3})

        assert mock_get.call_args.args[0].limit == 3


class TestSafetyProfileEndpoint:
    """Tests for the safety profile endpoint."""

    def test_safety_profile(self, client, mock_safety_service):
        response = client.get("/api/v1/safety-profile", params={"drug": "aspirin", "limit": 5})

        assert response.status_code == 200
        assert response.json()["risk_assessment"]["overall_risk_level"] == "HIGH"
        mock_safety_service.analyze.assert_called_once_with(
            "aspirin", condition=None, completed_only=True, limit=5
        )

    def test_missing_drug_returns_422(self, client):
        assert client.get("/api/v1/safety-profile").status_code == 422

    def test_blank_drug_returns_400(self, client, mock_safety_service):
        mock_safety_service.analyze.side_effect = MissingDrugNameError("drug_name is required")

        response = client.get("/api/v1/safety-profile", params={"drug": " "})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "RAG_VAL_002"


class TestAdverseEventCompareEndpoint:
    """Tests for the adverse-event comparison endpoint."""

    def test_compare(self, client, mock_safety_service):
        response = client.get(
            "/api/v1/adverse-events/compare",
            params={"drug": "aspirin", "control_type": "placebo", "limit": 5},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["studies_with_results"] == 1
        assert data["adverse_event_comparisons"][0]["nct_id"] == "NCT04267848"
        mock_safety_service.compare_adverse_events.assert_called_once_with(
            "aspirin", control_type="placebo", condition=None, limit=5
        )

    def test_defaults(self, client, mock_safety_service):
        client.get("/api/v1/adverse-events/compare", params={"drug": "aspirin"})

        mock_safety_service.compare_adverse_events.assert_called_once_with(
            "aspirin", control_type="placebo", condition=None, limit=10
        )

    def test_limit_above_maximum_returns_422(self, client):
        response = client.get(
            "/api/v1/adverse-events/compare", params={"drug": "aspirin", "limit": 51}
        )
        assert response.status_code == 422

    def test_unknown_control_type_returns_400(self, client, mock_safety_service):
        mock_safety_service.compare_adverse_events.side_effect = InvalidControlTypeError(
            "control_type must be one of placebo, active_control, dose_comparison"
        )

        response = client.get(
            "/api/v1/adverse-events/compare", params={"drug": "aspirin", "control_type": "sham"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "RAG_VAL_003"


class TestStudyEndpoint:
    """Tests for the single-study endpoint."""

    def test_get_study(self, client, mock_study_provider):
        response = client.get("/api/v1/studies/NCT04267848")

        assert response.status_code == 200
        data = response.json()
        assert data["nct_id"] == "NCT04267848"
        assert data["document"]["sourceId"] == "NCT04267848"
        assert data["document"]["metadata"]["hasResults"] is True
        assert data["study"]["protocolSection"]["identificationModule"]["nctId"] == "NCT04267848"
        mock_study_provider.get_study_document.assert_called_once_with("NCT04267848")

    def test_unknown_study_returns_404(self, client, mock_study_provider):
        mock_study_provider.get_study_document.side_effect = StudyNotFoundError(
            "No study found with NCT ID NCT99999999"
        )

        response = client.get("/api/v1/studies/NCT99999999")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RAG_PRV_004"

    def test_malformed_nct_id_returns_422(self, client, mock_study_provider):
        assert client.get("/api/v1/studies/aspirin").status_code == 422
        mock_study_provider.get_study_document.assert_not_called()
