"""Remote repository directories (GitHub organizations)."""

from .github import RemoteRepo, list_org_repos
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "RemoteRepo",
    "list_org_repos",
]
