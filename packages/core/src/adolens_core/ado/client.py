"""Azure DevOps REST adapter.

One instance per command run. Every call goes through the timeout-bounded
helpers in ``adolens_core.http`` and authenticates with a PAT sent as Basic
auth with an empty user name, which is what DevOps expects for PATs.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from urllib.parse import quote

from adolens_core.http import DEFAULT_TIMEOUT, HttpError, http_get, http_get_text, http_post

logger = logging.getLogger(__name__)

API_VERSION = "7.0"
PARENT_RELATION = "System.LinkTypes.Hierarchy-Reverse"


class NotFoundError(LookupError):
    """A work item, repository or pull request does not exist (or is not visible to the PAT)."""

    def __init__(self, message: str, available: list[str] | None = None):
        super().__init__(message)
        self.available = list(available or [])


@dataclass(frozen=True)
class ChangeEntry:
    path: str
    change_type: str  # "add" | "edit" | "delete" | "rename"
    change_tracking_id: int | None = None

    @classmethod
    def from_api(cls, raw: dict) -> ChangeEntry:
        return cls(
            path=(raw.get("item") or {}).get("path") or "",
            change_type=raw.get("changeType") or "",
            change_tracking_id=raw.get("changeTrackingId"),
        )


def create_auth_header(pat: str) -> dict[str, str]:
    token = base64.b64encode(f":{pat}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


def build_base_url(org: str, project: str) -> str:
    return f"https://dev.azure.com/{org}/{quote(project, safe='')}/_apis"


def _unwrap(data: dict | None, key: str = "value") -> list:
    return (data or {}).get(key) or []


def format_description_as_html(description: str) -> str:
    """Render ``- item`` lines as an HTML bullet list for the DevOps editor."""
    items = []
    for line in description.split("\n"):
        if not line.strip():
            continue
        text = line.strip()
        if text.startswith("-"):
            text = text[1:].strip()
        items.append(f"<li>{text}</li>")
    return "<ul>\n" + "\n".join(items) + "\n</ul>"


class AzureDevOpsClient:
    def __init__(self, org: str, project: str, pat: str, timeout: float = DEFAULT_TIMEOUT):
        self.org = org
        self.project = project
        self.base_url = build_base_url(org, project)
        self.headers = create_auth_header(pat)
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> AzureDevOpsClient:
        return cls(config.azure_org, config.azure_project, config.azure_pat)

    def _repo_url(self, repo_id: str, suffix: str = "") -> str:
        return f"{self.base_url}/git/repositories/{repo_id}{suffix}"

    def _get(self, url: str):
        return http_get(url, self.headers, self.timeout)

    def _post(self, url: str, body, content_type: str = "application/json"):
        return http_post(url, self.headers, body, self.timeout, content_type=content_type)

    # ------------------------------------------------------------------ #
    # Work items                                                           #
    # ------------------------------------------------------------------ #

    def get_work_item(self, work_item_id: int | str) -> dict:
        try:
            return self._get(f"{self.base_url}/wit/workitems/{work_item_id}?api-version={API_VERSION}")
        except HttpError as e:
            if e.status_code == 404:
                raise NotFoundError(f"Work item #{work_item_id} not found")
            raise

    def get_work_item_with_relations(self, work_item_id: int | str) -> dict | None:
        """Fetch a work item with its relation list, or None if it cannot be read."""
        url = f"{self.base_url}/wit/workitems/{work_item_id}?$expand=relations&api-version={API_VERSION}"
        try:
            return self._get(url)
        except HttpError as e:
            logger.debug("Could not fetch work item %s with relations: %s", work_item_id, e)
            return None

    def create_task(self, title: str, description: str, parent_id: int, assigned_to: str | None = None) -> dict:
        """Create a Task under ``parent_id``. DevOps requires a JSON-patch document here."""
        operations = [
            {"op": "add", "path": "/fields/System.Title", "value": title},
            {"op": "add", "path": "/fields/System.Description", "value": format_description_as_html(description)},
            {
                "op": "add",
                "path": "/relations/-",
                "value": {
                    "rel": PARENT_RELATION,
                    "url": f"{self.base_url}/wit/workitems/{parent_id}",
                    "attributes": {"comment": "Parent User Story"},
                },
            },
        ]
        if assigned_to:
            operations.append({"op": "add", "path": "/fields/System.AssignedTo", "value": assigned_to})

        return self._post(
            f"{self.base_url}/wit/workitems/$Task?api-version={API_VERSION}",
            operations,
            content_type="application/json-patch+json",
        )

    def get_current_user(self) -> str | None:
        """Return the e-mail (or display name) of the PAT owner, or None."""
        url = f"https://dev.azure.com/{self.org}/_apis/connectionData?api-version={API_VERSION}"
        try:
            data = self._get(url)
        except HttpError as e:
            logger.debug("connectionData lookup failed: %s", e)
            return None

        user = data.get("authenticatedUser")
        if not user:
            return None
        account = ((user.get("properties") or {}).get("Account") or {}).get("$value")
        return account or user.get("providerDisplayName") or user.get("customDisplayName") or None

    # ------------------------------------------------------------------ #
    # Repositories and pull requests                                       #
    # ------------------------------------------------------------------ #

    def get_repositories(self) -> list[dict]:
        return _unwrap(self._get(f"{self.base_url}/git/repositories?api-version={API_VERSION}"))

    def find_repository(self, name: str | None) -> tuple[dict | None, list[dict]]:
        """Return ``(repo, all_repos)``; ``repo`` is the first one when no name is given."""
        repos = self.get_repositories()
        if not name:
            return (repos[0] if repos else None), repos
        wanted = name.lower()
        for repo in repos:
            if (repo.get("name") or "").lower() == wanted:
                return repo, repos
        return None, repos

    def require_repository(self, name: str | None) -> dict:
        """Like :meth:`find_repository`, but raise NotFoundError listing what exists."""
        repo, repos = self.find_repository(name)
        if repo is None:
            available = [r.get("name") or "" for r in repos]
            label = f'Repository "{name}"' if name else "Repository"
            raise NotFoundError(f"{label} not found", available)
        return repo

    def get_pull_request(self, repo_id: str, pr_id: int) -> dict:
        return self._get(self._repo_url(repo_id, f"/pullrequests/{pr_id}?api-version={API_VERSION}"))

    def get_pull_request_work_items(self, repo_id: str, pr_id: int) -> list[dict]:
        url = self._repo_url(repo_id, f"/pullrequests/{pr_id}/workitems?api-version={API_VERSION}")
        try:
            return _unwrap(self._get(url))
        except HttpError as e:
            logger.debug("Could not list work items linked to PR %s: %s", pr_id, e)
            return []

    def get_threads(self, repo_id: str, pr_id: int) -> list[dict]:
        return _unwrap(self._get(self._repo_url(repo_id, f"/pullrequests/{pr_id}/threads?api-version={API_VERSION}")))

    def get_iterations(self, repo_id: str, pr_id: int) -> list[dict]:
        return _unwrap(
            self._get(self._repo_url(repo_id, f"/pullrequests/{pr_id}/iterations?api-version={API_VERSION}"))
        )

    def get_changes(self, repo_id: str, pr_id: int, iteration_id: int) -> list[ChangeEntry]:
        url = self._repo_url(
            repo_id, f"/pullrequests/{pr_id}/iterations/{iteration_id}/changes?api-version={API_VERSION}"
        )
        return [ChangeEntry.from_api(raw) for raw in _unwrap(self._get(url), "changeEntries")]

    def get_file_at_commit(self, repo_id: str, commit_id: str, path: str) -> str | None:
        url = self._repo_url(
            repo_id,
            f"/items?path={quote(path, safe='')}&versionType=Commit&version={commit_id}&api-version={API_VERSION}",
        )
        return http_get_text(url, self.headers, self.timeout)

    # ------------------------------------------------------------------ #
    # Comment threads                                                      #
    # ------------------------------------------------------------------ #

    def post_general_comment(self, repo_id: str, pr_id: int, content: str) -> dict:
        return self._post(
            self._repo_url(repo_id, f"/pullrequests/{pr_id}/threads?api-version={API_VERSION}"),
            {"comments": [{"parentCommentId": 0, "content": content, "commentType": 1}], "status": 1},
        )

    def post_line_comment(
        self,
        repo_id: str,
        pr_id: int,
        file_path: str,
        line: int,
        content: str,
        iteration_id: int,
        change_tracking_id: int | None,
    ) -> dict:
        """Open a thread anchored to ``line`` on the right-hand side of ``file_path``."""
        body = {
            "comments": [{"parentCommentId": 0, "content": content, "commentType": 1}],
            "status": 1,
            "threadContext": {
                "filePath": file_path,
                "rightFileStart": {"line": line, "offset": 1},
                "rightFileEnd": {"line": line, "offset": 1},
            },
            "pullRequestThreadContext": {
                "iterationContext": {
                    "firstComparingIteration": iteration_id,
                    "secondComparingIteration": iteration_id,
                },
                "changeTrackingId": change_tracking_id,
            },
        }
        return self._post(self._repo_url(repo_id, f"/pullrequests/{pr_id}/threads?api-version={API_VERSION}"), body)

    # ------------------------------------------------------------------ #
    # Links                                                                #
    # ------------------------------------------------------------------ #

    def pull_request_url(self, repo_name: str, pr_id: int) -> str:
        return f"https://dev.azure.com/{self.org}/{quote(self.project, safe='')}/_git/{repo_name}/pullrequest/{pr_id}"

    def work_item_url(self, work_item_id: int) -> str:
        return f"https://dev.azure.com/{self.org}/{quote(self.project, safe='')}/_workitems/edit/{work_item_id}"
