"""
GitHub API support shared by resource providers.
"""

from plugins.github.client import GitHubClient, GitHubRequestError
from plugins.github.errors import classify_error, get_error_message, handle_error

__all__ = [
    "GitHubClient",
    "GitHubRequestError",
    "classify_error",
    "get_error_message",
    "handle_error",
]
