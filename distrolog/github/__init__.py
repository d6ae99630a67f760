"""GitHub access for distrolog.

Public API:

GitHubClient : class
    Compare refs and list the pull requests containing a commit.
expand_env : function
    Expand "${VAR}" references used for tokens in configuration.

"""

from .client import GitHubClient, expand_env

__all__ = ["GitHubClient", "expand_env"]
