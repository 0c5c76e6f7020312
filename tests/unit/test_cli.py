"""Tests for the newsfound CLI."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from newsfound.cli import app
from newsfound.config import DEFAULT_FEEDS, FeedConfig, load_config, load_feeds, save_feeds
from newsfound.pipeline import RunReport

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.yaml"


def invoke(config_path, *args):
    return runner.invoke(app, ["--config", str(config_path), *args])


class TestInit:
    def test_writes_files_and_requires_database(self, config_path, monkeypatch) -> None:
        monkeypatch.delenv("NEWSFOUND_TEST_DB", raising=False)

        result = invoke(config_path, "init", "--db-url-env", "NEWSFOUND_TEST_DB", "-e", "production")

        assert result.exit_code == 1
        assert "Database URL is not configured" in result.output
        assert load_config(config_path).environment == "production"
        assert load_feeds(config_path.parent / "feeds.yaml") == DEFAULT_FEEDS

    def test_keeps_existing_files(self, config_path, monkeypatch) -> None:
        monkeypatch.delenv("NEWSFOUND_TEST_DB", raising=False)
        save_feeds([FeedConfig(url="https://mine.example/rss")], config_path.parent / "feeds.yaml")

        invoke(config_path, "init", "--db-url-env", "NEWSFOUND_TEST_DB")

        assert [f.url for f in load_feeds(config_path.parent / "feeds.yaml")] == ["https://mine.example/rss"]

    @patch("newsfound.cli.init.init_database")
    @patch("newsfound.cli.init.validate_connection", return_value=True)
    @patch("newsfound.cli.init.create_connection_pool")
    def test_initializes_schema(self, mock_pool, mock_validate, mock_init, config_path) -> None:
        result = invoke(config_path, "init", "--no-seed-feeds")

        assert result.exit_code == 0, result.output
        mock_init.assert_called_once_with(mock_pool.return_value)
        mock_pool.return_value.close.assert_called_once()
        assert load_feeds(config_path.parent / "feeds.yaml") == []


class TestFeeds:
    def test_add_list_remove(self, config_path) -> None:
        url = "https://www.cbc.ca/cmlink/rss-world"

        assert invoke(config_path, "feeds", "add", url).exit_code == 0
        assert invoke(config_path, "feeds", "add", url).exit_code == 1

        listed = invoke(config_path, "feeds", "list")
        assert url in listed.output

        assert invoke(config_path, "feeds", "remove", url).exit_code == 0
        assert invoke(config_path, "feeds", "remove", url).exit_code == 1
        assert load_feeds(config_path.parent / "feeds.yaml") == []

    def test_add_rejects_non_http(self, config_path) -> None:
        result = invoke(config_path, "feeds", "add", "file:///etc/passwd")
        assert result.exit_code == 1

    def test_list_without_file(self, config_path) -> None:
        assert invoke(config_path, "feeds", "list").exit_code == 1


class TestRun:
    @patch("newsfound.cli.run.run_once")
    def test_runs_given_feeds(self, mock_run_once, config_path) -> None:
        mock_run_once.return_value = RunReport(started_at="2024-01-01T00:00:00Z")

        result = invoke(config_path, "run", "--feed", "https://tnc.news/feed/", "--batch-size", "2")

        assert result.exit_code == 0, result.output
        config, feed_urls = mock_run_once.call_args.args
        assert feed_urls == ["https://tnc.news/feed/"]
        assert config.config.enrichment.batch_size == 2

    def test_missing_feeds_file(self, config_path) -> None:
        assert invoke(config_path, "run").exit_code == 1

    @patch("newsfound.cli.run.run_once")
    def test_database_error_exits(self, mock_run_once, config_path) -> None:
        mock_run_once.side_effect = ValueError("Database URL is not configured")
        result = invoke(config_path, "run", "--feed", "https://tnc.news/feed/")
        assert result.exit_code == 1
        assert "Run failed" in result.output


class TestWorker:
    @patch("newsfound.cli.run.time.sleep", side_effect=KeyboardInterrupt)
    @patch("newsfound.cli.run.run_once")
    def test_failed_run_keeps_worker_alive(self, mock_run_once, mock_sleep, config_path) -> None:
        save_feeds(DEFAULT_FEEDS, config_path.parent / "feeds.yaml")
        mock_run_once.side_effect = ValueError("Database URL is not configured")

        result = invoke(config_path, "worker", "--interval", "5")

        assert result.exit_code == 0
        mock_run_once.assert_called_once()
        mock_sleep.assert_called_once_with(300)

    @patch("newsfound.cli.run.time.sleep", side_effect=[None, KeyboardInterrupt])
    @patch("newsfound.cli.run.run_once")
    def test_missing_feeds_file_keeps_worker_alive(self, mock_run_once, mock_sleep, config_path) -> None:
        result = invoke(config_path, "worker")

        assert result.exit_code == 0
        mock_run_once.assert_not_called()
        assert mock_sleep.call_count == 2


class TestFeedsTest:
    @patch("newsfound.cli.feeds.FeedFetcher")
    def test_uses_configured_timeout(self, mock_fetcher, config_path) -> None:
        mock_fetcher.return_value.fetch.return_value.channel_title = ""
        mock_fetcher.return_value.fetch.return_value.items = []

        result = invoke(config_path, "feeds", "test", "https://tnc.news/feed/")

        assert result.exit_code == 0, result.output
        assert mock_fetcher.call_args.kwargs["timeout"] is None
        assert "https://tnc.news/feed/: OK (0 items)" in result.output
