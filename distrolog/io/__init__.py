"""Input/Output operations for distrolog.

Modules:

fetch : module
    HTTP(S) artifact retrieval with per-request timeouts.

Public API:

fetch_bytes : function
    Fetch a URL fully into memory, raising NetworkError on failure.
make_session : function
    Create a requests.Session with distrolog's default headers.

Example:
    from distrolog.io import fetch_bytes

    data = fetch_bytes("https://raw.githubusercontent.com/rancher/rke2/v1.27.3+rke2r1/Dockerfile")

"""

from .fetch import DEFAULT_TIMEOUT, fetch_bytes, make_session

__all__ = ["DEFAULT_TIMEOUT", "fetch_bytes", "make_session"]
