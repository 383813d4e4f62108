"""
GitHub data source for Maintainability Index.

Builds a RepositorySnapshot from one GitHub GraphQL query plus the REST
contributors endpoint, which GraphQL does not expose.
"""

import asyncio
from datetime import datetime
from typing import Any

import httpx

from maintainability_index.config import get_github_token
from maintainability_index.http_client import _get_async_http_client
from maintainability_index.models import CommitInfo, RepositorySnapshot
from maintainability_index.vcs.base import BaseVCSProvider

# GitHub API endpoints
GITHUB_GRAPHQL_API = "https://api.github.com/graphql"
GITHUB_REST_API = "https://api.github.com"

# Sample sizes requested from the API
SAMPLE_LIMITS = {
    "commits": 100,
    "branches": 100,
    "contributors": 100,
}

# README spellings fetched directly, in order of preference
README_ALIASES = ("readmeUpperCase", "readmeLowerCase", "readmeAllCaps", "readmeRst")


def parse_github_datetime(value: str | None) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp (``2024-01-01T00:00:00Z``)."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class GitHubProvider(BaseVCSProvider):
    """GitHub data source using the GraphQL API."""

    def __init__(self, token: str | None = None):
        """
        Initialize GitHub provider.

        Args:
            token: GitHub Personal Access Token. If not provided, reads from
                   GITHUB_TOKEN environment variable.

        Raises:
            ValueError: If token is not provided and GITHUB_TOKEN env var is not set
        """
        self.token = token or get_github_token()
        if not self.token:
            raise ValueError(
                "GITHUB_TOKEN is required for GitHub provider.\n"
                "\n"
                "To get started:\n"
                "1. Create a GitHub Personal Access Token (classic):\n"
                "   → https://github.com/settings/tokens/new\n"
                "2. Select scope: 'public_repo'\n"
                "3. Set the token:\n"
                "   export GITHUB_TOKEN='your_token_here'  # Linux/macOS\n"
                "   or add to your .env file: GITHUB_TOKEN=your_token_here\n"
            )

    def get_repository_url(self, owner: str, repo: str) -> str:
        """Construct GitHub repository URL."""
        return f"https://github.com/{owner}/{repo}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"bearer {self.token}",
            "Content-Type": "application/json",
        }

    async def get_snapshot(self, owner: str, repo: str) -> RepositorySnapshot:
        """
        Fetch a repository snapshot from GitHub.

        Args:
            owner: GitHub repository owner (username or organization)
            repo: GitHub repository name

        Returns:
            RepositorySnapshot with metadata, files, commits, branches,
            contributors and README text

        Raises:
            ValueError: If repository not found or is inaccessible
            httpx.HTTPStatusError: If GitHub API returns an error
        """
        variables = {"owner": owner, "name": repo}
        raw_data, contributors = await asyncio.gather(
            self._query_graphql(self._get_graphql_query(), variables),
            self._get_contributors(owner, repo),
        )

        if "repository" not in raw_data or raw_data["repository"] is None:
            raise ValueError(f"Repository {owner}/{repo} not found or is inaccessible.")

        return self._normalize_github_data(
            owner, repo, raw_data["repository"], contributors
        )

    async def _query_graphql(
        self, query: str, variables: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Execute GraphQL query against GitHub API.

        Raises:
            httpx.HTTPStatusError: If API returns an error
        """
        client = await _get_async_http_client()
        response = await client.post(
            GITHUB_GRAPHQL_API,
            json={"query": query, "variables": variables},
            headers=self._headers(),
            timeout=30,
        )
        response.raise_for_status()
        data = response.json()

        if "errors" in data:
            # A missing repository is reported as a NOT_FOUND error with null data
            if all(error.get("type") == "NOT_FOUND" for error in data["errors"]):
                return data.get("data") or {}
            raise httpx.HTTPStatusError(
                f"GitHub API Errors: {data['errors']}",
                request=response.request,
                response=response,
            )

        return data.get("data", {})

    async def _get_contributors(self, owner: str, repo: str) -> tuple[str, ...]:
        """
        Fetch contributor logins from the REST API.

        Raises:
            httpx.HTTPStatusError: If API returns an error other than 404
        """
        client = await _get_async_http_client()
        response = await client.get(
            f"{GITHUB_REST_API}/repos/{owner}/{repo}/contributors",
            params={"per_page": SAMPLE_LIMITS["contributors"]},
            headers={
                "Authorization": f"bearer {self.token}",
                "Accept": "application/vnd.github+json",
            },
            timeout=30,
        )
        # 204: empty repository; 404: handled by the GraphQL "not found" path
        if response.status_code in (204, 404):
            return ()
        response.raise_for_status()

        contributors = response.json()
        if not isinstance(contributors, list):
            return ()
        return tuple(
            contributor["login"]
            for contributor in contributors
            if isinstance(contributor, dict) and contributor.get("login")
        )

    def _get_graphql_query(self) -> str:
        """Return the GraphQL query to fetch repository data."""
        return """
        query GetRepository($owner: String!, $name: String!) {
          repository(owner: $owner, name: $name) {
            name
            description
            url
            createdAt
            updatedAt
            pushedAt
            hasIssuesEnabled
            stargazerCount
            forkCount
            owner {
              login
            }
            primaryLanguage {
              name
            }
            openIssues: issues(states: OPEN) {
              totalCount
            }
            closedIssues: issues(states: CLOSED) {
              totalCount
            }
            refs(refPrefix: "refs/heads/", first: 100) {
              totalCount
              nodes {
                name
              }
            }
            defaultBranchRef {
              name
              target {
                ... on Commit {
                  history(first: 100) {
                    nodes {
                      oid
                      message
                      committedDate
                      author {
                        name
                        user {
                          login
                        }
                      }
                    }
                  }
                }
              }
            }
            rootTree: object(expression: "HEAD:") {
              ... on Tree {
                entries {
                  name
                  type
                }
              }
            }
            readmeUpperCase: object(expression: "HEAD:README.md") {
              ... on Blob {
                text
              }
            }
            readmeLowerCase: object(expression: "HEAD:readme.md") {
              ... on Blob {
                text
              }
            }
            readmeAllCaps: object(expression: "HEAD:README") {
              ... on Blob {
                text
              }
            }
            readmeRst: object(expression: "HEAD:README.rst") {
              ... on Blob {
                text
              }
            }
          }
        }
        """

    def _normalize_github_data(
        self,
        owner: str,
        repo: str,
        repo_info: dict[str, Any],
        contributors: tuple[str, ...],
    ) -> RepositorySnapshot:
        """
        Normalize a GitHub GraphQL response into a RepositorySnapshot.

        Args:
            owner: Requested repository owner
            repo: Requested repository name
            repo_info: GitHub repository data from GraphQL response
            contributors: Contributor logins from the REST API
        """
        owner_login = (repo_info.get("owner") or {}).get("login") or owner
        primary_language = repo_info.get("primaryLanguage")
        language = primary_language.get("name") if primary_language else None

        # Extract commits (most recent first)
        commits = []
        default_branch = repo_info.get("defaultBranchRef")
        if default_branch and default_branch.get("target"):
            history = default_branch["target"].get("history") or {}
            for node in history.get("nodes") or []:
                if not node:
                    continue
                author = node.get("author") or {}
                user = author.get("user") or {}
                commits.append(
                    CommitInfo(
                        sha=node.get("oid", ""),
                        message=node.get("message") or "",
                        author=user.get("login") or author.get("name") or "",
                        timestamp=parse_github_datetime(node.get("committedDate")),
                    )
                )

        # Extract top-level files
        root_tree = repo_info.get("rootTree") or {}
        files = frozenset(
            entry["name"]
            for entry in root_tree.get("entries") or []
            if entry and entry.get("type") == "blob" and entry.get("name")
        )

        # Extract branches
        refs = repo_info.get("refs") or {}
        branches = tuple(
            node["name"] for node in refs.get("nodes") or [] if node and node.get("name")
        )

        readme = None
        for alias in README_ALIASES:
            candidate = repo_info.get(alias)
            if candidate and candidate.get("text"):
                readme = candidate["text"]
                break

        return RepositorySnapshot(
            owner=owner_login,
            name=repo_info.get("name") or repo,
            description=repo_info.get("description") or "",
            url=repo_info.get("url") or self.get_repository_url(owner, repo),
            language=language,
            stars=repo_info.get("stargazerCount") or 0,
            forks=repo_info.get("forkCount") or 0,
            open_issues=(repo_info.get("openIssues") or {}).get("totalCount", 0),
            closed_issues=(repo_info.get("closedIssues") or {}).get("totalCount", 0),
            created_at=parse_github_datetime(repo_info.get("createdAt")),
            updated_at=parse_github_datetime(repo_info.get("updatedAt")),
            last_commit_at=commits[0].timestamp if commits else None,
            files=files,
            commits=tuple(commits),
            branches=branches,
            contributors=contributors,
            readme=readme,
            has_issues=repo_info.get("hasIssuesEnabled") is not False,
        )
