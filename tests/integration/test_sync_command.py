"""Tests for the jjstack sync command."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from conftest import FakeBackend, make_pr
from jjstack.cli import app
from jjstack.config import StackConfig
from jjstack.core.nav_block import STACK_FOOTER, STACK_HEADER
from jjstack.core.vcs import BookmarkListing
from jjstack.errors import CommandError, ConfigError, HostingError

STALE = f"Old text\n\n{STACK_HEADER}\nStack of changes:\n1. PR #5 (branch: f5)\n{STACK_FOOTER}\n"


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def environment(tmp_path):
    """Patch repository discovery and config so commands run against a fake backend."""
    def _setup(backend, bookmarks=("f1", "f2", "f3"), warnings=(), config=None):
        listing = BookmarkListing(bookmarks=list(bookmarks), warnings=list(warnings))
        patches = [
            patch("jjstack.cli.helpers.find_repo_root", return_value=tmp_path),
            patch("jjstack.cli.helpers.load_config", return_value=config or StackConfig()),
            patch("jjstack.cli.helpers.get_backend", return_value=backend),
            patch("jjstack.cli.commands.sync.list_bookmarks", return_value=listing),
        ]
        for p in patches:
            p.start()
        return listing

    yield _setup
    patch.stopall()


class TestSyncPreview:
    def test_preview_prints_blocks_without_writing(self, runner, environment, linear_stack):
        backend = FakeBackend(linear_stack)
        environment(backend)

        result = runner.invoke(app, ["sync"])

        assert result.exit_code == 0
        assert "repo: octo/widgets" in result.stdout
        assert 'PR #2 "Use parser": updates with' in result.stdout
        assert "2. PR #2 (branch: f2) ◁" in result.stdout
        assert STACK_HEADER in result.stdout
        assert backend.writes == []

    def test_preview_reports_removal(self, runner, environment):
        backend = FakeBackend([make_pr(5, "f5", body=STALE, title="Orphan")])
        environment(backend, bookmarks=["f5"])

        result = runner.invoke(app, ["sync"])

        assert result.exit_code == 0
        assert 'PR #5 "Orphan": removed' in result.stdout
        assert backend.writes == []

    def test_no_bookmarks(self, runner, environment, linear_stack):
        environment(FakeBackend(linear_stack), bookmarks=[])

        result = runner.invoke(app, ["sync"])

        assert result.exit_code == 0
        assert "no bookmarks found." in result.stdout

    def test_no_matching_pull_requests(self, runner, environment, linear_stack):
        environment(FakeBackend(linear_stack), bookmarks=["unrelated"])

        result = runner.invoke(app, ["sync"])

        assert result.exit_code == 0
        assert "no matching PRs found for bookmarks." in result.stdout

    def test_repo_option_skips_resolution(self, runner, environment, linear_stack):
        backend = FakeBackend(linear_stack, repo="should/not-be-used")
        environment(backend)

        result = runner.invoke(app, ["sync", "--repo", "octo/other"])

        assert result.exit_code == 0
        assert "repo: octo/other" in result.stdout


class TestSyncApply:
    def test_apply_writes_every_member(self, runner, environment, linear_stack):
        backend = FakeBackend(linear_stack)
        environment(backend)

        result = runner.invoke(app, ["sync", "--apply"])

        assert result.exit_code == 0
        assert [number for _, number, _ in backend.writes] == [1, 2, 3]
        assert 'PR #1 "Add parser": updated' in result.stdout
        assert backend.bodies[3].endswith(f"{STACK_FOOTER}\n")

    def test_second_apply_is_unchanged(self, runner, environment, linear_stack):
        backend = FakeBackend(linear_stack)
        environment(backend)
        runner.invoke(app, ["sync", "--apply"])
        writes = len(backend.writes)

        result = runner.invoke(app, ["sync", "--apply"])

        assert result.exit_code == 0
        assert len(backend.writes) == writes
        assert result.stdout.count("unchanged") == 3

    def test_failed_write_is_reported_and_others_continue(self, runner, environment, linear_stack):
        backend = FakeBackend(linear_stack, fail_write={2})
        environment(backend)

        result = runner.invoke(app, ["sync", "--apply"])

        assert result.exit_code == 0
        assert "#2: cannot update PR:" in result.output
        assert [number for _, number, _ in backend.writes] == [1, 3]

    def test_json_report(self, runner, environment, linear_stack, tmp_path):
        environment(FakeBackend(linear_stack))
        report_path = tmp_path / "report.json"

        result = runner.invoke(app, ["sync", "--apply", "--json", str(report_path)])

        assert result.exit_code == 0
        report = json.loads(report_path.read_text(encoding="utf-8"))
        assert report["repo"] == "octo/widgets"
        assert report["mode"] == "apply"
        assert [o["status"] for o in report["outcomes"]] == ["updated"] * 3


class TestSyncErrors:
    def test_bookmark_listing_failure_exits_1(self, runner, environment, linear_stack):
        environment(FakeBackend(linear_stack))
        error = CommandError(["jj", "bookmark", "list"], None)
        with patch("jjstack.cli.commands.sync.list_bookmarks", side_effect=error):
            result = runner.invoke(app, ["sync"])

        assert result.exit_code == 1
        assert "command not found" in result.output

    def test_listing_failure_exits_1(self, runner, environment):
        backend = FakeBackend([])
        environment(backend)
        with patch.object(backend, "list_open_pull_requests", side_effect=HostingError("HTTP 401")):
            result = runner.invoke(app, ["sync"])

        assert result.exit_code == 1
        assert "HTTP 401" in result.output

    def test_config_error_exits_1(self, runner, environment, linear_stack):
        environment(FakeBackend(linear_stack))
        with patch("jjstack.cli.helpers.get_backend", side_effect=ConfigError("Unknown backend: x")):
            result = runner.invoke(app, ["sync", "--backend", "x"])

        assert result.exit_code == 1
        assert "Unknown backend: x" in result.output

    def test_bookmark_warnings_are_shown(self, runner, environment, linear_stack):
        environment(FakeBackend(linear_stack), warnings=["skipping malformed bookmark line: 'x'"])

        result = runner.invoke(app, ["sync"])

        assert result.exit_code == 0
        assert "skipping malformed bookmark line" in result.output


def test_version(runner):
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "jjstack 0.3.0" in result.stdout
