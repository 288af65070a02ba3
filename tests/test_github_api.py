"""
Tests for github_api.py - mirroring the outcome on the issue (with mocked requests).
"""

from unittest.mock import Mock, patch

import requests
from mm.adapters.github_api import report_outcome, build_comment, can_report
from mm.core.config import DEFAULTS
from mm.core.models import Outcome

CFG = dict(DEFAULTS, report_to_github=True, github_token="t0ken", repository="octo/markers")
ISSUE_URL = "https://api.github.com/repos/octo/markers/issues/5"


def response(status=200):
    r = Mock()
    r.status_code = status
    r.text = ""
    return r


class TestReportOutcome:
    """Tests for label/comment/close calls."""

    @patch("mm.adapters.github_api.requests.patch")
    @patch("mm.adapters.github_api.requests.post")
    def test_success_labels_comments_and_closes(self, mock_post, mock_patch):
        mock_post.return_value = response(201)
        mock_patch.return_value = response(200)

        assert report_outcome(CFG, 5, Outcome.success('Added marker "m-1".')) is True

        label_call, comment_call = mock_post.call_args_list
        assert label_call.args[0] == f"{ISSUE_URL}/labels"
        assert label_call.kwargs["json"] == {"labels": ["marker-done"]}
        assert comment_call.args[0] == f"{ISSUE_URL}/comments"
        assert 'Added marker "m-1".' in comment_call.kwargs["json"]["body"]
        assert label_call.kwargs["headers"]["Authorization"] == "Bearer t0ken"

        mock_patch.assert_called_once()
        assert mock_patch.call_args.args[0] == ISSUE_URL
        assert mock_patch.call_args.kwargs["json"]["state"] == "closed"

    @patch("mm.adapters.github_api.requests.patch")
    @patch("mm.adapters.github_api.requests.post")
    def test_failure_labels_and_leaves_open(self, mock_post, mock_patch):
        mock_post.return_value = response(201)

        assert report_outcome(CFG, 5, Outcome.fail("Title is required.")) is True

        assert mock_post.call_args_list[0].kwargs["json"] == {"labels": ["marker-error"]}
        assert "Title is required." in mock_post.call_args_list[1].kwargs["json"]["body"]
        mock_patch.assert_not_called()

    @patch("mm.adapters.github_api.requests.post")
    def test_disabled_makes_no_calls(self, mock_post):
        cfg = dict(CFG, report_to_github=False)
        assert report_outcome(cfg, 5, Outcome.success("ok")) is False
        assert report_outcome(CFG, None, Outcome.success("ok")) is False
        mock_post.assert_not_called()

    @patch("mm.adapters.github_api.requests.patch")
    @patch("mm.adapters.github_api.requests.post")
    def test_http_errors_do_not_raise(self, mock_post, mock_patch):
        mock_post.side_effect = requests.ConnectionError("down")
        mock_patch.return_value = response(403)

        assert report_outcome(CFG, 5, Outcome.success("ok")) is False
        assert mock_post.call_count == 2
        mock_patch.assert_called_once()


class TestHelpers:

    def test_can_report_needs_token_and_repo(self):
        assert can_report(CFG)
        assert not can_report(dict(CFG, github_token=None))
        assert not can_report(dict(CFG, repository=""))

    def test_build_comment(self):
        assert build_comment(Outcome.success("Done.")).startswith("✅ Done.")
        assert build_comment(Outcome.fail("Nope.")).startswith("⚠️ Nope.")
