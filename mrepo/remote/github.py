"""Listing an organization's repositories through the GitHub REST API."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mrepo.core.config import DEFAULT_GITHUB_API
from mrepo.core.result import Err, Ok, Result
from mrepo.core.structured import as_obj_list, as_str_dict, get_int, get_str
from mrepo.remote.http import HttpError

if TYPE_CHECKING:
    from mrepo.remote.http import HttpClient

__all__ = ["PAGE_SIZE", "RemoteRepo", "list_org_repos"]

PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class RemoteRepo:
    id: int
    name: str
    full_name: str
    clone_url: str
    ssh_url: str | None = None


def list_org_repos(
    http: HttpClient,
    org: str,
    *,
    api_url: str = DEFAULT_GITHUB_API,
    page_size: int = PAGE_SIZE,
) -> Iterator[Result[RemoteRepo, HttpError]]:
    """Lazily yield every repository of ``org``, one page per request.

    Pages are fetched only as the caller iterates. A failed request or a
    malformed page is yielded as a single ``Err`` and ends the iteration.
    """
    page = 1
    while True:
        url = f"{api_url.rstrip('/')}/orgs/{org}/repos?per_page={page_size}&page={page}"
        result = http.get_json(url)
        if isinstance(result, Err):
            yield result
            return

        items = as_obj_list(result.value)
        if items is None:
            yield Err(HttpError(url=url, status=0, message="Expected a JSON array"))
            return

        for item in items:
            repo = _parse_repo(item)
            if repo is None:
                yield Err(HttpError(url=url, status=0, message="Malformed repository entry"))
                return
            yield Ok(repo)

        if len(items) < page_size:
            return
        page += 1


def _parse_repo(item: object) -> RemoteRepo | None:
    data = as_str_dict(item)
    if data is None:
        return None
    repo_id = get_int(data, "id")
    name = get_str(data, "name")
    full_name = get_str(data, "full_name")
    clone_url = get_str(data, "clone_url")
    if repo_id is None or name is None or full_name is None or clone_url is None:
        return None
    return RemoteRepo(
        id=repo_id,
        name=name,
        full_name=full_name,
        clone_url=clone_url,
        ssh_url=get_str(data, "ssh_url"),
    )
