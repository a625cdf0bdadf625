"""CLI interface for the ClinicalTrials.gov RAG engine."""

import json
import os
from contextlib import ExitStack
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ....config.logging import configure_logging
from ....config.settings import settings
from ....core.domain import Document, DocumentMetadata, RAGResult
from ....core.domain.exceptions import CTGovRAGError
from ....core.services.pipeline_service import RAGPipelineService
from ....core.services.safety_profile import SafetyProfileService
from ....core.services.summarizer import TRUNCATION_MARKER
from ...common.exception_handler import format_exception_json
from ...outbound.data_sources.clinicaltrials_adapter import ClinicalTrialsGovAdapter
from ...outbound.document_providers import (
    ClinicalTrialsGovDocumentProvider,
    StaticDocumentProvider,
)

app = typer.Typer(
    name="ctgov-rag",
    help="Retrieve, summarize and cite clinical-trial content from ClinicalTrials.gov",
    add_completion=False,
)

console = Console()

# Determine if we're in debug mode (shows full error details)
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"


def handle_cli_error(exc: Exception) -> None:
    """Display an error with its code and location.

    In debug mode the full structured JSON is printed instead.

    Args:
        exc: The exception to handle.
    """
    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    if DEBUG_MODE:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, ensure_ascii=False),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
        return

    error_code = error_data["error"].get("code", "UNKNOWN")
    console.print(f"\n[red]Error [{error_code}]:[/] {error_data['error']['message']}")
    console.print(f"[dim]Type: {error_data['error']['type']}[/]")

    location = error_data.get("location", {})
    if location:
        loc_str = f"{location.get('file', '?')}:{location.get('line', '?')} in {location.get('method', '?')}"
        console.print(f"[dim]Location: {loc_str}[/]")

    console.print("[dim]Set DEBUG=true for full details[/]")


def load_documents(path: Path) -> list[Document]:
    """Read documents from a JSON file.

    The file holds a list of objects with ``source_id`` (or ``sourceId``),
    ``text`` and an optional ``metadata`` object.

    Raises:
        typer.BadParameter: If the file is not a list of such objects.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise typer.BadParameter(f"Cannot read documents from {path}: {e}") from e

    if not isinstance(raw, list):
        raise typer.BadParameter(f"{path} must contain a JSON list of documents")

    documents = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise typer.BadParameter(f"Document #{index} in {path} is not an object")
        source_id = item.get("source_id") or item.get("sourceId")
        if not source_id:
            raise typer.BadParameter(f"Document #{index} in {path} has no source_id")
        try:
            metadata = DocumentMetadata.from_dict(item.get("metadata"))
        except ValueError as e:
            raise typer.BadParameter(f"Document #{index} in {path}: {e}") from e
        documents.append(
            Document(source_id=str(source_id), text=str(item.get("text") or ""), metadata=metadata)
        )
    return documents


def _make_client() -> ClinicalTrialsGovAdapter:
    return ClinicalTrialsGovAdapter(
        base_url=settings.ctgov_base_url,
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
    )


def render_result(result: RAGResult) -> None:
    """Print a pipeline result as a summary panel and a chunk table."""
    if result.is_empty:
        console.print(f"[yellow]{result.summary}[/]")
        return

    console.print(Panel(result.summary, title="[bold cyan]Summary[/]", border_style="cyan"))

    table = Table(title="Top chunks")
    table.add_column("#", justify="right")
    table.add_column("Source")
    table.add_column("Offsets")
    table.add_column("Score", justify="right")
    table.add_column("Excerpt")
    for rank, chunk in enumerate(result.top_chunks, start=1):
        excerpt = " ".join(chunk.text.split())
        table.add_row(
            str(rank),
            chunk.source_id,
            f"{chunk.start_offset}-{chunk.end_offset}",
            f"{chunk.score:.1f}",
            excerpt[:80] + ("…" if len(excerpt) > 80 else ""),
        )
    console.print(table)

    console.print("[dim]Citations:[/]")
    for citation in result.citations:
        ranges = ", ".join(f"{start}-{end}" for start, end in citation.ranges)
        console.print(f"  [dim]{citation.source_id}: {ranges}[/]")


@app.command()
def analyze(
    query: str | None = typer.Option(None, "--query", "-q", help="Free-text query"),
    drug: str | None = typer.Option(None, "--drug", "-d", help="Drug or intervention name"),
    condition: str | None = typer.Option(None, "--condition", "-c", help="Medical condition"),
    documents_file: Path | None = typer.Option(
        None, "--documents", help="JSON file of documents to analyse instead of fetching"
    ),
    top_k: int | None = typer.Option(None, "--top-k", "-k", help="Chunks to select (1-10)"),
    chunk_size: int | None = typer.Option(None, help="Window width in characters"),
    overlap: int | None = typer.Option(None, help="Overlap between windows"),
    keywords: list[str] = typer.Option([], "--keyword", help="Extra boost keyword (repeatable)"),
    summary_max_length: int | None = typer.Option(None, help="Summary character budget"),
    limit: int | None = typer.Option(
        None, help="Maximum studies to fetch (default: STUDY_LIMIT setting)"
    ),
    completed_only: bool = typer.Option(False, help="Fetch completed studies only"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result record"),
) -> None:
    """Retrieve and summarize matching content from trial documents."""
    configure_logging(settings)

    try:
        options = settings.pipeline_options(
            keywords,
            top_k=top_k,
            chunk_size=chunk_size,
            overlap=overlap,
            summary_max_length=summary_max_length,
        )
        with ExitStack() as stack:
            if documents_file is not None:
                provider: Any = StaticDocumentProvider(load_documents(documents_file))
            else:
                client = stack.enter_context(_make_client())
                provider = ClinicalTrialsGovDocumentProvider(client)

            service = RAGPipelineService(provider, source=settings.result_source_tag)
            with console.status("[bold green]Analyzing...[/]"):
                result = service.analyze(
                    query=query,
                    drug=drug,
                    condition=condition,
                    options=options,
                    limit=limit or settings.study_limit,
                    completed_only=completed_only,
                )
    except CTGovRAGError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    if as_json:
        record = result.to_dict(options.summary_max_length, TRUNCATION_MARKER)
        console.print_json(json.dumps(record, ensure_ascii=False))
    else:
        render_result(result)


@app.command()
def safety(
    drug: str = typer.Argument(..., help="Drug to analyse"),
    condition: str | None = typer.Option(None, "--condition", "-c", help="Medical condition"),
    limit: int = typer.Option(20, help="Maximum studies to analyse"),
    all_statuses: bool = typer.Option(False, help="Include studies that are not completed"),
) -> None:
    """Aggregate adverse events for a drug across clinical trials."""
    configure_logging(settings)

    try:
        with _make_client() as client, console.status("[bold green]Fetching studies...[/]"):
            profile = SafetyProfileService(client).analyze(
                drug, condition=condition, completed_only=not all_statuses, limit=limit
            )
    except CTGovRAGError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    risk = profile["risk_assessment"]
    summary = profile["adverse_events_summary"]
    console.print(
        f"[bold]{drug}[/]: {profile['analyzed_studies']} of {profile['total_studies']} studies "
        f"analysed, {summary['total_events']} events "
        f"({summary['serious_events']} serious, {risk['serious_event_rate']})"
    )
    console.print(f"Risk level: [bold]{risk['overall_risk_level']}[/]")

    table = Table(title="Most common adverse events")
    table.add_column("Term")
    table.add_column("Count", justify="right")
    table.add_column("Studies", justify="right")
    for event in risk["most_common_events"]:
        table.add_row(event["term"], str(event["count"]), str(event["study_count"]))
    console.print(table)


@app.command()
def compare(
    drug: str = typer.Argument(..., help="Drug to compare"),
    control_type: str = typer.Option(
        "placebo", help="Comparator: placebo, active_control or dose_comparison"
    ),
    condition: str | None = typer.Option(None, "--condition", "-c", help="Medical condition"),
    limit: int = typer.Option(10, help="Maximum studies to fetch"),
) -> None:
    """Compare a drug's adverse events against a control type."""
    configure_logging(settings)

    try:
        with _make_client() as client, console.status("[bold green]Fetching studies...[/]"):
            comparison = SafetyProfileService(client).compare_adverse_events(
                drug, control_type=control_type, condition=condition, limit=limit
            )
    except CTGovRAGError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    summary = comparison["summary"]
    if not comparison["adverse_event_comparisons"]:
        console.print(f"[yellow]{summary['message']}[/]")
        console.print(f"[dim]{summary['recommendation']}[/]")
        return

    console.print(
        f"[bold]{drug}[/] vs {control_type}: {comparison['studies_with_results']} of "
        f"{comparison['total_studies_found']} studies have adverse-event data"
    )
    table = Table(title="Adverse-event comparison")
    table.add_column("Study")
    table.add_column("Title")
    table.add_column("Groups", justify="right")
    table.add_column("Serious", justify="right")
    table.add_column("Other", justify="right")
    for study in comparison["adverse_event_comparisons"]:
        table.add_row(
            study["nct_id"] or "?",
            study["title"] or "",
            str(len(study["event_groups"])),
            str(len(study["serious_events"])),
            str(len(study["other_events"])),
        )
    console.print(table)
    console.print(f"[dim]{summary['recommendation']}[/]")


@app.command()
def study(
    nct_id: str = typer.Argument(..., help="ClinicalTrials.gov NCT ID"),
    raw: bool = typer.Option(False, "--raw", help="Print the raw study record as JSON"),
) -> None:
    """Show one study as the document the engine analyses."""
    configure_logging(settings)

    try:
        with _make_client() as client, console.status(f"[bold green]Fetching {nct_id}...[/]"):
            document, record = ClinicalTrialsGovDocumentProvider(client).get_study_document(
                nct_id
            )
    except CTGovRAGError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    if raw:
        console.print_json(json.dumps(record, ensure_ascii=False))
        return

    title = document.metadata.title or document.source_id
    console.print(Panel(Text(document.text), title=f"[bold cyan]{title}[/]", border_style="cyan"))
    console.print(
        f"[dim]{document.source_id}: results={document.metadata.has_results}, "
        f"adverse events={document.metadata.has_adverse_events}[/]"
    )


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("ctgov_rag.adapters.inbound.api.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
