"""ClinicalTrials.gov API v2 client."""

import logging
from typing import Any

import requests

from ....core.domain.exceptions import StudyNotFoundError, UpstreamAPIError

logger = logging.getLogger(__name__)

# Constants
REQUEST_TIMEOUT = 30
MAX_PAGE_SIZE = 1000


class ClinicalTrialsGovAdapter:
    """Client for the ClinicalTrials.gov ``/api/v2/studies`` endpoint."""

    BASE_URL = "https://clinicaltrials.gov/api/v2/studies"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: int = REQUEST_TIMEOUT,
        user_agent: str = "ctgov-rag/1.0",
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Studies endpoint; defaults to the public API.
            timeout: Per-request timeout in seconds.
            user_agent: User-Agent header sent with every request.
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

    def __enter__(self) -> "ClinicalTrialsGovAdapter":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close session."""
        self.close()

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            self.session.close()

    def _get(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """GET ``url`` and decode the JSON body.

        Raises:
            UpstreamAPIError: On transport errors, non-2xx status or a body
                that is not JSON.
        """
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamAPIError(
                "ClinicalTrials.gov request failed", cause=e, context={"url": url}
            ) from e

        if not response.ok:
            raise UpstreamAPIError(
                f"ClinicalTrials.gov API error ({response.status_code}): {response.text[:500]}",
                context={"url": url, "status_code": response.status_code},
            )

        try:
            return response.json()  # type: ignore[no-any-return]
        except ValueError as e:
            raise UpstreamAPIError(
                "ClinicalTrials.gov returned a non-JSON body", cause=e, context={"url": url}
            ) from e

    def search_studies(
        self,
        *,
        condition: str | None = None,
        intervention: str | None = None,
        term: str | None = None,
        outcome: str | None = None,
        sponsor: str | None = None,
        location: str | None = None,
        nct_id: str | None = None,
        status: str | None = None,
        page_token: str | None = None,
        page_size: int = 50,
        count_total: bool = False,
    ) -> dict[str, Any]:
        """Search studies.

        Args:
            condition: ``query.cond``, e.g. "lung cancer".
            intervention: ``query.intr``, e.g. "Vemurafenib".
            term: ``query.term`` free-text search.
            outcome: ``query.outc``.
            sponsor: ``query.spons``.
            location: ``query.locn``.
            nct_id: ``query.id``.
            status: ``filter.overallStatus``, e.g. "COMPLETED".
            page_token: Token of the page to fetch.
            page_size: Studies per page, clamped to ``[1, 1000]``.
            count_total: Ask the API to include ``totalCount``.

        Returns:
            Raw response with ``studies`` and optional ``totalCount`` /
            ``nextPageToken``.
        """
        query_params = {
            "query.cond": condition,
            "query.intr": intervention,
            "query.term": term,
            "query.outc": outcome,
            "query.spons": sponsor,
            "query.locn": location,
            "query.id": nct_id,
            "filter.overallStatus": status,
            "pageToken": page_token,
        }
        params = {key: value for key, value in query_params.items() if value}
        params["pageSize"] = str(max(1, min(page_size, MAX_PAGE_SIZE)))
        if count_total:
            params["countTotal"] = "true"

        logger.debug(f"Searching ClinicalTrials.gov with {params}")
        data = self._get(self.base_url, params)
        logger.info(f"ClinicalTrials.gov returned {len(data.get('studies') or [])} studies")
        return data

    def get_study(self, nct_id: str) -> dict[str, Any]:
        """Fetch one study record by NCT ID.

        Raises:
            StudyNotFoundError: If the API answers 404 for ``nct_id``.
            UpstreamAPIError: On any other failure.
        """
        try:
            return self._get(f"{self.base_url}/{nct_id}")
        except UpstreamAPIError as e:
            if e.extra_context.get("status_code") == 404:
                raise StudyNotFoundError(
                    f"No study found with NCT ID {nct_id}", cause=e, context={"nct_id": nct_id}
                ) from e
            raise
