"""Ingestion and enrichment pipeline."""

from .enrichment import EnrichmentCoordinator
from .models import ArticleState, EnrichmentOutcome, RunReport, SourceReport, TableReport
from .orchestrator import PipelineOrchestrator, build_llm_provider, print_run_summary

__all__ = [
    "ArticleState",
    "EnrichmentCoordinator",
    "EnrichmentOutcome",
    "PipelineOrchestrator",
    "RunReport",
    "SourceReport",
    "TableReport",
    "build_llm_provider",
    "print_run_summary",
]
