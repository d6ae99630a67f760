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

"""Commit to pull request correlation for distrolog.

For every commit of a release range the correlator asks GitHub which pull
requests contain it and turns unambiguous answers into Issue records.

Correlation Rules:

- Commits with an empty SHA are skipped.
- Only a commit with exactly ONE associated pull request contributes.
  Zero (direct pushes) or several (merge commits, forward ports) are
  skipped to avoid attributing a change to the wrong PR.
- A PR number is reported once; the first commit that reaches it wins.
- Backport tags ("[release-1.27] Fix ...") are stripped from titles.
- The ```release-note block of the PR body becomes the Issue note.

Commits are processed sequentially in the given order, so the output order
is the commit order and repeated runs over the same data are identical.
A failing query aborts the whole correlation.

Example:
    ```python
    from distrolog.changelog.issues import collect_issues
    from distrolog.github import GitHubClient

    issues = collect_issues(repo.commits, GitHubClient(), "k3s-io", "k3s")
    for issue in issues:
        print(issue.number, issue.title)
    ```
"""

from __future__ import annotations

from collections.abc import Iterable
import re
from typing import Protocol

from distrolog.changelog.models import CommitRef, Issue, PullRequest
from distrolog.logging import get_global_logger

RELEASE_NOTE_SECTION = "```release-note"
FENCE = "```"

# Placeholder blocks: an empty block, or one containing only NONE.
_EMPTY_NOTE_RE = re.compile(r"```release-note[ \t]*\n\s*```")
_NONE_NOTE_RE = re.compile(r"```release-note[ \t]*\n\s*NONE\s*\n\s*```")


class PullRequestSource(Protocol):
    """Anything that can list the pull requests containing a commit."""

    def list_pull_requests_with_commit(
        self, organization: str, repository: str, sha: str
    ) -> list[PullRequest]:
        ...


def strip_backport_tag(title: str) -> str:
    """Remove a leading backport tag from a pull request title.

    A title is treated as tagged when it starts with a "[...]" segment and
    mentions "release" (any case); everything up to and including the first
    "]" is dropped. Bracket tags later in the title are kept.

    Example:
        ```python
        strip_backport_tag("[Release] Fix node drain bug")   # "Fix node drain bug"
        strip_backport_tag("[release-1.27] Bump containerd")  # "Bump containerd"
        strip_backport_tag("Update [docs] links")             # unchanged
        strip_backport_tag("Update release workflow [skip ci]")  # unchanged
        ```
    """
    title = title.strip()
    if title.startswith("[") and "]" in title and "release" in title.lower():
        title = title.split("]", 1)[1]
    return title.strip()


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def is_placeholder_note(body: str) -> bool:
    """Return True if body contains an empty or NONE release-note block."""
    text = _normalize_newlines(body)
    return bool(_EMPTY_NOTE_RE.search(text) or _NONE_NOTE_RE.search(text))


def extract_release_note(body: str) -> str:
    """Return the ```release-note block of a pull request body.

    The body is scanned line by line: a line containing the opening marker
    starts the note, the next line containing a code fence ends it, and the
    non-blank lines in between are joined with newlines.

    Returns:
        The note text, or "" if the body has no release-note block or uses
        one of the placeholder forms (empty block, or NONE).
    """
    if RELEASE_NOTE_SECTION not in body or is_placeholder_note(body):
        return ""

    lines: list[str] = []
    in_note = False
    for line in _normalize_newlines(body).split("\n"):
        if RELEASE_NOTE_SECTION in line:
            in_note = True
            continue
        if FENCE in line:
            in_note = False
        if in_note and line.strip():
            lines.append(line)
    return "\n".join(lines).strip()


def collect_issues(
    commits: Iterable[CommitRef],
    source: PullRequestSource,
    organization: str,
    repository: str,
) -> list[Issue]:
    """Correlate commits with their pull requests.

    Args:
        commits: Commits of the release range, in processing order.
        source: Pull request lookup (e.g., GitHubClient).
        organization: GitHub organization (e.g., "k3s-io").
        repository: GitHub repository name (e.g., "k3s").

    Returns:
        Issues in commit processing order, one per distinct PR number.

    Raises:
        NetworkError: Propagated from ``source`` on the first failed query.
    """
    logger = get_global_logger()
    found: list[Issue] = []
    seen: set[int] = set()

    for commit in commits:
        if not commit.sha:
            continue

        prs = source.list_pull_requests_with_commit(organization, repository, commit.sha)
        if len(prs) != 1:
            logger.verbose(
                "ISSUES",
                f"Skipping {commit.sha[:12]}: {len(prs)} pull requests",
            )
            continue

        pr = prs[0]
        if pr.number in seen:
            logger.debug("ISSUES", f"Skipping {commit.sha[:12]}: #{pr.number} already added")
            continue

        found.append(
            Issue(
                title=strip_backport_tag(pr.title),
                note=extract_release_note(pr.body),
                number=pr.number,
                url=pr.html_url,
            )
        )
        seen.add(pr.number)
        logger.verbose("ISSUES", f"Added #{pr.number} from {commit.sha[:12]}")

    return found
