"""Tests for parsing the review table and publishing it to the pull request."""

from unittest.mock import MagicMock

import requests

from adolens_core.ado.client import ChangeEntry
from adolens_core.http import HttpError
from adolens_core.review import (
    ReviewIssue,
    find_file_info,
    format_issue_comment,
    parse_review_issues,
    publish_review,
)

REVIEW = """
## Code Review
| Severity | Category | File | Line | Issue | Fix |
|----------|----------|------|------|-------|-----|
| 🔴 CRITICAL | Bugs | Query.cs | 45 | null check missing | add null check |
| 🟡 IMPORTANT | Performance | Service.cs | 120 | N+1 query | use Include |
"""


class TestParseReviewIssues:
    def test_parses_rows_in_order(self):
        issues = parse_review_issues(REVIEW)
        assert issues == [
            ReviewIssue("🔴 CRITICAL", "Bugs", "Query.cs", 45, "null check missing", "add null check"),
            ReviewIssue("🟡 IMPORTANT", "Performance", "Service.cs", 120, "N+1 query", "use Include"),
        ]

    def test_severity_without_emoji(self):
        issues = parse_review_issues("| MINOR | CleanCode | Utils.ts | 10 | unused var | remove it |")
        assert len(issues) == 1
        assert issues[0].severity == "MINOR"
        assert issues[0].file_name == "Utils.ts"

    def test_all_supported_extensions(self):
        names = ["A.cs", "b.js", "c.ts", "D.tsx", "E.jsx", "f.py", "G.java", "h.go"]
        text = "\n".join(f"| 🔴 CRITICAL | Bugs | {n} | {i + 1} | issue | fix |" for i, n in enumerate(names))
        assert [i.file_name for i in parse_review_issues(text)] == names

    def test_unknown_extension_skipped(self):
        assert parse_review_issues("| 🔴 CRITICAL | Bugs | notes.md | 3 | issue | fix |") == []

    def test_header_and_separator_rows_ignored(self):
        text = "| Severity | Category | File | Line | Issue | Fix |\n|----|----|----|----|----|----|"
        assert parse_review_issues(text) == []

    def test_line_zero_skipped(self):
        assert parse_review_issues("| MINOR | Style | A.cs | 0 | issue | fix |") == []

    def test_non_numeric_line_skipped(self):
        assert parse_review_issues("| MINOR | Style | A.cs | n/a | issue | fix |") == []

    def test_line_parsed_as_int(self):
        issue = parse_review_issues("| 🔴 CRITICAL | Bugs | File.cs | 999 | issue | fix |")[0]
        assert issue.line == 999
        assert isinstance(issue.line, int)

    def test_no_table(self):
        text = "## Code Review\n### Good\n- Nice code!\n\n### Issues\n(none)\n\n### Verdict\n**APPROVE**"
        assert parse_review_issues(text) == []

    def test_empty(self):
        assert parse_review_issues("") == []
        assert parse_review_issues(None) == []

    def test_cells_do_not_span_lines(self):
        text = "| CRITICAL | Bugs | A.cs | 1 | first half\nsecond half | fix |"
        assert parse_review_issues(text) == []

    def test_file_path_with_directories(self):
        issue = parse_review_issues("| IMPORTANT | Performance | src/Api/Query.cs | 7 | slow | cache |")[0]
        assert issue.file_name == "src/Api/Query.cs"


CHANGES = [
    ChangeEntry("/src/services/UserService.cs", "edit", 1),
    ChangeEntry("/src/components/Modal.tsx", "edit", 2),
    ChangeEntry("/tests/UserService.test.cs", "add", 3),
]


class TestFindFileInfo:
    def test_by_file_name(self):
        change = find_file_info(CHANGES, "UserService.cs")
        assert change.path == "/src/services/UserService.cs"
        assert change.change_tracking_id == 1

    def test_by_partial_path(self):
        assert find_file_info(CHANGES, "components/Modal.tsx").change_tracking_id == 2

    def test_first_match_wins(self):
        assert find_file_info(CHANGES, "UserService").path == "/src/services/UserService.cs"

    def test_not_found(self):
        assert find_file_info(CHANGES, "NotFound.cs") is None
        assert find_file_info([], "File.cs") is None

    def test_entries_without_path_skipped(self):
        changes = [ChangeEntry("", "edit", 1), ChangeEntry("/src/File.cs", "edit", 2)]
        assert find_file_info(changes, "File.cs").change_tracking_id == 2


def test_issue_comment_format():
    issue = ReviewIssue("🔴 CRITICAL", "Bugs", "Query.cs", 45, "null check missing", "add null check")
    body = format_issue_comment(issue)
    assert body.startswith("**🔴 CRITICAL** - Bugs")
    assert "**Issue:** null check missing" in body
    assert "**Fix:** add null check" in body


class TestPublishReview:
    def test_general_thread_then_one_per_issue(self):
        client = MagicMock()
        result = publish_review(client, "repo-1", 7, REVIEW, CHANGES, iteration_id=3)

        client.post_general_comment.assert_called_once_with("repo-1", 7, REVIEW)
        assert client.post_line_comment.call_count == 1  # Query.cs is not among the changes
        args = client.post_line_comment.call_args.args
        assert args[:4] == ("repo-1", 7, "/src/services/UserService.cs", 120)
        assert args[5:] == (3, 1)
        assert result.general_posted is True
        assert result.posted == 1
        assert result.skipped == 1

    def test_rejected_line_comment_counted_as_skipped(self):
        client = MagicMock()
        client.post_line_comment.side_effect = HttpError(400, "line not in diff")
        text = "| MINOR | CleanCode | Modal.tsx | 10 | unused | remove |"

        result = publish_review(client, "repo-1", 7, text, CHANGES, iteration_id=1)

        assert result.posted == 0
        assert result.skipped == 1

    def test_review_without_table_posts_only_general_thread(self):
        client = MagicMock()
        result = publish_review(client, "repo-1", 7, "## Code Review\nLooks good", CHANGES, iteration_id=1)
        client.post_line_comment.assert_not_called()
        assert (result.general_posted, result.posted, result.skipped) == (True, 0, 0)

    def test_transport_failure_does_not_stop_publishing(self):
        client = MagicMock()
        client.post_line_comment.side_effect = [requests.Timeout("timed out"), {"id": 2}]
        text = (
            "| MINOR | CleanCode | Modal.tsx | 10 | unused | remove |\n"
            "| IMPORTANT | Performance | UserService.cs | 20 | N+1 | use Include |"
        )

        result = publish_review(client, "repo-1", 7, text, CHANGES, iteration_id=1)

        assert client.post_line_comment.call_count == 2
        assert (result.general_posted, result.posted, result.skipped) == (True, 1, 1)
