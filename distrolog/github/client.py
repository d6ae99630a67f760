# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""GitHub REST API client for distrolog.

Two endpoints are used:

- Compare two refs to list the commits of a release range:
    ``GET /repos/{owner}/{repo}/compare/{base}...{head}``
- List the pull requests associated with a commit:
    ``GET /repos/{owner}/{repo}/commits/{sha}/pulls``

Authentication:

- Optional token (argument, or the GITHUB_TOKEN environment variable).
- "${VAR}" tokens are expanded from the environment.
- Unauthenticated: 60 requests/hour per IP. Authenticated: 5000/hour.
  A changelog makes one request per commit, so use a token.

Error Handling:

- 404: NetworkError (repository or ref not found)
- 403: NetworkError (rate limit exceeded)
- Other HTTP errors and transport failures: NetworkError
- Errors are chained with 'from err' for better debugging

Example:
    ```python
    from distrolog.github import GitHubClient

    client = GitHubClient(token="${GITHUB_TOKEN}")
    commits = client.compare_commits("k3s-io", "k3s", "v1.27.2+k3s1", "v1.27.3+k3s1")
    prs = client.list_pull_requests_with_commit("k3s-io", "k3s", commits[0].sha)
    ```
"""

from __future__ import annotations

import os
from typing import Any
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from distrolog.changelog.models import CommitRef, PullRequest
from distrolog.exceptions import NetworkError
from distrolog.logging import get_global_logger

DEFAULT_API_URL = "https://api.github.com"
COMPARE_PAGE_SIZE = 100


def _make_session() -> requests.Session:
    """Create a session that retries transient GitHub API failures.

    Only 5xx errors are retried; rate limiting (403/429) is not.
    """
    retries = Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    s = requests.Session()
    s.mount("https://", HTTPAdapter(max_retries=retries))
    s.mount("http://", HTTPAdapter(max_retries=retries))
    return s


def expand_env(value: str | None) -> str | None:
    """Expand a "${VAR}" reference from the environment.

    Other strings are returned unchanged. Unset variables expand to None.
    """
    if value and value.startswith("${") and value.endswith("}"):
        return os.environ.get(value[2:-1]) or None
    return value


class GitHubClient:
    """Synchronous GitHub client built on requests.

    Attributes:
        api_url: API root (GitHub Enterprise installs use their own).
        timeout: Per-request timeout in seconds.

    """

    def __init__(
        self,
        token: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        logger = get_global_logger()
        if token is None:
            token = os.environ.get("GITHUB_TOKEN")
        elif token.startswith("${"):
            resolved = expand_env(token)
            if resolved is None:
                logger.verbose(
                    "GITHUB", f"Warning: Environment variable {token[2:-1]} not set"
                )
            token = resolved

        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._session = session or _make_session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        if token:
            self._session.headers["Authorization"] = f"token {token}"
            logger.verbose("GITHUB", "Using authenticated API requests")

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.api_url}{path}"
        get_global_logger().debug("GITHUB", f"GET {url} {params or ''}")
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as err:
            if response.status_code == 404:
                raise NetworkError(f"GitHub resource not found: {path}") from err
            elif response.status_code == 403:
                raise NetworkError(
                    f"GitHub API rate limit exceeded. Consider using a token. "
                    f"Status: {response.status_code}"
                ) from err
            else:
                raise NetworkError(
                    f"GitHub API request failed: {response.status_code} "
                    f"{response.reason}"
                ) from err
        except requests.exceptions.RequestException as err:
            raise NetworkError(f"GitHub API request failed: {err}") from err
        return response.json()

    def compare_commits(
        self, organization: str, repository: str, base: str, head: str
    ) -> list[CommitRef]:
        """Return the commits reachable from head but not from base.

        Pages through the compare endpoint until ``total_commits`` commits
        have been read.

        Raises:
            NetworkError: If any page request fails.
        """
        path = (
            f"/repos/{organization}/{repository}/compare/"
            f"{quote(base, safe='')}...{quote(head, safe='')}"
        )
        commits: list[CommitRef] = []
        page = 1
        while True:
            data = self._get(path, {"per_page": COMPARE_PAGE_SIZE, "page": page})
            batch = data.get("commits", [])
            commits.extend(
                CommitRef(
                    sha=c.get("sha", ""),
                    message=(c.get("commit") or {}).get("message", ""),
                )
                for c in batch
            )
            total = data.get("total_commits", len(commits))
            if not batch or len(commits) >= total:
                break
            page += 1

        get_global_logger().verbose(
            "GITHUB", f"{organization}/{repository} {base}...{head}: {len(commits)} commits"
        )
        return commits

    def list_pull_requests_with_commit(
        self, organization: str, repository: str, sha: str
    ) -> list[PullRequest]:
        """Return the pull requests associated with commit ``sha``.

        Raises:
            NetworkError: If the request fails.
        """
        data = self._get(f"/repos/{organization}/{repository}/commits/{sha}/pulls")
        return [PullRequest.from_api_response(pr) for pr in data]
