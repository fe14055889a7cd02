"""Tests for the jjstack stacks command."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from conftest import FakeBackend, make_pr
from jjstack.cli import app
from jjstack.config import StackConfig
from jjstack.core.vcs import BookmarkListing


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


def _invoke(runner, backend, bookmarks, tmp_path):
    listing = BookmarkListing(bookmarks=list(bookmarks))
    with patch("jjstack.cli.helpers.find_repo_root", return_value=tmp_path), patch(
        "jjstack.cli.helpers.load_config", return_value=StackConfig()
    ), patch("jjstack.cli.helpers.get_backend", return_value=backend), patch(
        "jjstack.cli.commands.stacks.list_bookmarks", return_value=listing
    ):
        return runner.invoke(app, ["stacks"])


def test_lists_stack_members(runner, linear_stack, tmp_path):
    backend = FakeBackend(linear_stack)

    result = _invoke(runner, backend, ["f1", "f2", "f3"], tmp_path)

    assert result.exit_code == 0
    assert "Stacks in octo/widgets" in result.stdout
    for number in (1, 2, 3):
        assert f"#{number}" in result.stdout
    assert backend.writes == []


def test_no_tracked_pull_requests(runner, linear_stack, tmp_path):
    result = _invoke(runner, FakeBackend(linear_stack), ["other"], tmp_path)

    assert result.exit_code == 0
    assert "No tracked pull requests found." in result.stdout


def test_cycle_is_warned(runner, tmp_path):
    prs = [make_pr(1, "a", "b"), make_pr(2, "b", "a")]

    result = _invoke(runner, FakeBackend(prs), ["a", "b"], tmp_path)

    assert result.exit_code == 0
    assert "cycle" in result.output
