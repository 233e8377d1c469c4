"""GitHub REST API adapter."""

from typing import Any, Dict, List

import requests

from gitact.adapters.base import GitPlatformAdapter
from gitact.errors import RemoteRejectedError
from gitact.models import PR, Comment, Issue, RepoRef


def _issue_from_api(data: Dict[str, Any]) -> Issue:
    user = data.get("user") or {}
    labels = [lb["name"] for lb in (data.get("labels") or []) if isinstance(lb, dict) and "name" in lb]
    return Issue(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        author=user.get("login", ""),
        labels=labels,
        state=data.get("state", "open"),
        html_url=data.get("html_url"),
    )


def _comment_from_api(data: Dict[str, Any]) -> Comment:
    user = data.get("user") or {}
    return Comment(
        id=data["id"],
        body=data.get("body") or "",
        author=user.get("login", ""),
        html_url=data.get("html_url"),
    )


def _pr_from_api(data: Dict[str, Any]) -> PR:
    head = data.get("head") or {}
    base = data.get("base") or {}
    return PR(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        head_branch=head.get("ref", ""),
        base_branch=base.get("ref", ""),
        state=data.get("state", "open"),
        html_url=data.get("html_url"),
    )


def _error_payload(resp: requests.Response) -> tuple[str, Dict[str, Any]]:
    """Remote message and structured details from an error response."""
    msg = resp.text or resp.reason or str(resp.status_code)
    details: Dict[str, Any] = {}
    try:
        data = resp.json()
    except ValueError:
        return msg, details
    if isinstance(data, dict):
        details = data
        msg = data.get("message") or msg
    return msg, details


class GitHubAdapter(GitPlatformAdapter):
    """GitHub API implementation."""

    def __init__(self, token: str, api_url: str = "https://api.github.com", timeout: float = 30) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"Bearer {token}"
        self._session.headers["Accept"] = "application/vnd.github+json"
        self._session.headers["X-GitHub-Api-Version"] = "2022-11-28"

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        ref: RepoRef,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._session.request(method, url, json=json, timeout=self._timeout)
        except requests.RequestException as e:
            raise RemoteRejectedError(
                f"{type(e).__name__}: {e}",
                status_code=None,
                operation=operation,
                repo=ref.full_name,
            ) from e
        if resp.status_code < 200 or resp.status_code >= 300:
            msg, details = _error_payload(resp)
            raise RemoteRejectedError(
                msg,
                status_code=resp.status_code,
                operation=operation,
                repo=ref.full_name,
                details=details,
            )
        return resp

    def create_issue(
        self,
        ref: RepoRef,
        title: str,
        body: str,
        labels: List[str] | None = None,
    ) -> Issue:
        payload: Dict[str, Any] = {"title": title, "body": body}
        if labels:
            payload["labels"] = labels
        resp = self._request("POST", f"/repos/{ref.full_name}/issues", "create_issue", ref, json=payload)
        return _issue_from_api(resp.json())

    def update_issue(
        self,
        ref: RepoRef,
        issue_number: int,
        title: str | None = None,
        body: str | None = None,
        labels: List[str] | None = None,
        state: str | None = None,
    ) -> Issue:
        payload: Dict[str, Any] = {}
        if title is not None:
            payload["title"] = title
        if body is not None:
            payload["body"] = body
        if labels is not None:
            payload["labels"] = labels
        if state is not None:
            payload["state"] = state
        resp = self._request(
            "PATCH",
            f"/repos/{ref.full_name}/issues/{issue_number}",
            "update_issue",
            ref,
            json=payload,
        )
        return _issue_from_api(resp.json())

    def create_comment(self, ref: RepoRef, issue_number: int, body: str) -> Comment:
        resp = self._request(
            "POST",
            f"/repos/{ref.full_name}/issues/{issue_number}/comments",
            "create_comment",
            ref,
            json={"body": body},
        )
        return _comment_from_api(resp.json())

    def create_pr(
        self,
        ref: RepoRef,
        title: str,
        body: str,
        head: str,
        base: str,
    ) -> PR:
        resp = self._request(
            "POST",
            f"/repos/{ref.full_name}/pulls",
            "create_pull_request",
            ref,
            json={"title": title, "body": body, "head": head, "base": base},
        )
        return _pr_from_api(resp.json())
