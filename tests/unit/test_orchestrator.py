"""Tests for newsfound.pipeline.orchestrator."""

from io import StringIO
from unittest.mock import Mock, patch

import pytest
from rich.console import Console

from newsfound.config import Config
from newsfound.errors import FetchError, StorageError
from newsfound.ingestion import Feed
from newsfound.models import Source
from newsfound.normalization import OllamaProvider, PassthroughProvider
from newsfound.scrapers import MEDIA_CONTENT
from newsfound.pipeline import (
    PipelineOrchestrator,
    SourceReport,
    TableReport,
    build_llm_provider,
    print_run_summary,
)

TNC = "https://tnc.news/feed/"
CBC = "https://www.cbc.ca/cmlink/rss-topstories"


@pytest.fixture
def orchestrator(feed_item):
    fetcher = Mock()
    fetcher.fetch.side_effect = lambda url: Feed(
        url=url,
        channel_title="True North",
        items=[feed_item(link="https://tnc.news/a"), feed_item(link="https://tnc.news/b")],
    )
    sources = Mock()
    sources.resolve.return_value = Source(
        id=1, url=TNC, display_name="True North", table_identifier="articles_true_north"
    )
    store = Mock()
    store.upsert_articles.return_value = 2
    coordinator = Mock()
    coordinator.process_all.return_value = [TableReport(table="articles_true_north", pending=2, normalized=2)]
    return PipelineOrchestrator(fetcher, sources, store, coordinator)


class TestIngestFeed:
    def test_registers_source_and_stores_items(self, orchestrator) -> None:
        report, items = orchestrator.ingest_feed(TNC)

        assert report.success
        assert report.items == 2
        assert report.table == "articles_true_north"
        assert len(items) == 2
        orchestrator.sources.resolve.assert_called_once_with(TNC, "True North")
        orchestrator.store.ensure_table.assert_called_once_with("articles_true_north")

    def test_fetch_failure_is_reported(self, orchestrator) -> None:
        orchestrator.fetcher.fetch.side_effect = FetchError(TNC, "HTTP 500")
        report, items = orchestrator.ingest_feed(TNC)

        assert not report.success
        assert "HTTP 500" in report.error
        assert items == []
        orchestrator.store.upsert_articles.assert_not_called()

    def test_media_items_stored_at_ingest(self, orchestrator, feed_item) -> None:
        items = [feed_item(link=f"https://tnc.news/{i}") for i in range(6)]
        items.append(feed_item(link="https://tnc.news/clip", categories=["Videos"], summary="teaser"))
        orchestrator.fetcher.fetch.side_effect = lambda url: Feed(url=url, channel_title="True North", items=items)
        orchestrator.store.upsert_articles.return_value = 7
        orchestrator.store.fill_content.return_value = 1

        report, _ = orchestrator.ingest_feed(TNC)

        orchestrator.store.fill_content.assert_called_once_with(
            "articles_true_north", ["https://tnc.news/clip"], MEDIA_CONTENT
        )
        assert report.media == 1

    def test_no_media_items(self, orchestrator) -> None:
        orchestrator.ingest_feed(TNC)
        orchestrator.store.fill_content.assert_not_called()

    def test_untitled_feed_reports_registered_name(self, orchestrator) -> None:
        orchestrator.fetcher.fetch.side_effect = lambda url: Feed(url=url, channel_title="")
        orchestrator.sources.resolve.return_value = Source(
            id=3, url=TNC, display_name="Untitled source 0123456789", table_identifier="articles_source_0123456789"
        )

        report, _ = orchestrator.ingest_feed(TNC)

        orchestrator.sources.resolve.assert_called_once_with(TNC, "")
        assert report.channel_name == "Untitled source 0123456789"

    def test_storage_failure_is_reported(self, orchestrator) -> None:
        orchestrator.sources.resolve.side_effect = StorageError("duplicate channel name")
        report, _ = orchestrator.ingest_feed(TNC)
        assert report.error == "duplicate channel name"


class TestRun:
    def test_failed_feed_does_not_stop_run(self, orchestrator, feed_item) -> None:
        good = orchestrator.fetcher.fetch.side_effect

        def fetch(url):
            if url == CBC:
                raise FetchError(url, "HTTP 503")
            return good(url)

        orchestrator.fetcher.fetch.side_effect = fetch
        report = orchestrator.run([CBC, TNC])

        assert [s.success for s in report.sources] == [False, True]
        assert [s.feed_url for s in report.failed_sources] == [CBC]
        assert report.stored == 2
        assert report.finished_at is not None
        assert report.duration >= 0

    def test_feed_metadata_passed_to_enrichment(self, orchestrator) -> None:
        orchestrator.run([TNC])
        metadata = orchestrator.coordinator.process_all.call_args.args[0]
        assert set(metadata) == {"https://tnc.news/a", "https://tnc.news/b"}

    def test_enrichment_runs_after_all_ingestion(self, orchestrator) -> None:
        calls = []
        orchestrator.store.upsert_articles.side_effect = lambda *args: calls.append("upsert") or 2
        orchestrator.coordinator.process_all.side_effect = lambda metadata: calls.append("enrich") or []

        orchestrator.run([TNC, CBC])
        assert calls == ["upsert", "upsert", "enrich"]


class TestBuildLLMProvider:
    def test_passthrough_without_host(self, tmp_path, monkeypatch) -> None:
        monkeypatch.delenv("OLLAMA_HOST", raising=False)
        monkeypatch.delenv("OLLAMA_HTML_READER", raising=False)
        assert isinstance(build_llm_provider(Config(tmp_path / "config.yaml")), PassthroughProvider)

    def test_ollama_from_environment(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("OLLAMA_HOST", "http://ollama:11434")
        monkeypatch.setenv("OLLAMA_HTML_READER", "reader")
        monkeypatch.setenv("OLLAMA_HTML_READER_NUM_CTX", "16384")

        provider = build_llm_provider(Config(tmp_path / "config.yaml"))

        assert isinstance(provider, OllamaProvider)
        assert provider.endpoint == "http://ollama:11434/api/chat"
        assert provider.num_ctx == 16384


class TestFromConfig:
    @patch("newsfound.pipeline.orchestrator.build_llm_provider")
    def test_wires_batch_size(self, mock_build, tmp_path) -> None:
        mock_build.return_value = PassthroughProvider()
        config = Config(tmp_path / "config.yaml")
        config.config.enrichment.batch_size = 9

        orchestrator = PipelineOrchestrator.from_config(config, Mock())

        assert orchestrator.coordinator.batch_size == 9
        assert orchestrator.coordinator.scrapers.domains == ["tnc.news", "cbc.ca"]


def test_print_run_summary(orchestrator) -> None:
    report = orchestrator.run([TNC])
    report.sources.append(SourceReport(feed_url=CBC, error="HTTP 503"))
    output = StringIO()

    print_run_summary(report, Console(file=output, width=200))

    text = output.getvalue()
    assert "True North" in text
    assert "HTTP 503" in text
    assert "Feeds: 1/2 ingested" in text
    assert "Articles enriched: 2" in text
