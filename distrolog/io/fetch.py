"""
HTTP(S) artifact retrieval for distrolog.

Release artifacts (Dockerfiles, image lists, version scripts, go.mod files,
SQLite headers) are small text files served from raw.githubusercontent.com.
This module fetches them fully into memory.

Key Features:

- **Per-request timeout** - Every request carries a timeout (5 seconds by
  default). A slow artifact host fails the run instead of hanging it.
- **Fail fast** - No retries. A non-2xx status, a timeout or a connection
  error is raised immediately as NetworkError, chained from the requests
  exception.
- **Stable identity** - A User-Agent identifies distrolog to the host.

Example:
    >>> from distrolog.io import fetch_bytes
    >>> data = fetch_bytes(
    ...     "https://raw.githubusercontent.com/k3s-io/k3s/v1.27.3+k3s1/go.mod"
    ... )
    >>> data[:6]
    b'module'

Notes:
- Timeouts are per-request, not per-run.
- The session can be injected for connection reuse across artifacts.
"""

from __future__ import annotations

import requests

from distrolog.exceptions import NetworkError
from distrolog.logging import get_global_logger

DEFAULT_TIMEOUT = 5


def make_session() -> requests.Session:
    """Create a requests.Session with distrolog's default headers."""
    s = requests.Session()
    s.headers.update(
        {
            "User-Agent": "distrolog/0.1 (+https://github.com/RogerCibrian/distrolog)",
        }
    )
    return s


def fetch_bytes(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> bytes:
    """Fetch url and return the response body.

    Args:
        url: Source URL.
        timeout: Per-request timeout in seconds.
        session: Optional session to reuse. A temporary one is created
            and closed otherwise.

    Returns:
        The raw response body.

    Raises:
        NetworkError: On non-2xx responses, timeouts, or connection errors.
    """
    logger = get_global_logger()
    logger.verbose("HTTP", f"GET {url}")

    owned = session is None
    s = session if session is not None else make_session()
    try:
        resp = s.get(url, timeout=timeout, allow_redirects=True)
        resp.raise_for_status()
    except requests.exceptions.HTTPError as err:
        raise NetworkError(
            f"download failed for {url}: {resp.status_code} {resp.reason}"
        ) from err
    except requests.exceptions.Timeout as err:
        raise NetworkError(f"timed out after {timeout}s fetching {url}") from err
    except requests.exceptions.RequestException as err:
        raise NetworkError(f"failed to fetch {url}: {err}") from err
    finally:
        if owned:
            s.close()

    logger.debug("HTTP", f"Response: {resp.status_code} ({len(resp.content)} bytes)")
    return resp.content
