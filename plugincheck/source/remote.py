"""Network-backed source tree over raw file URLs.

Each path is fetched with a plain GET against
``{raw_base_url}/{owner}/{repo}/{ref}/{path}``.

Policy:
  - 200       -> file content
  - 404       -> authoritative absence (FetchResult.missing())
  - 429, 5xx  -> retried with linear backoff, then FetchError
  - other     -> FetchError immediately
  - transport errors and timeouts are retried like 5xx

Every request counts against a per-tree budget (`max_fetches`), so a run
over a pathological repository ends with FetchError instead of issuing
requests indefinitely. Results are cached per tree; one tree serves one run.
"""

import logging
import time
from typing import Callable, Optional
from urllib.parse import quote

import httpx

from plugincheck.config import Settings
from plugincheck.errors import FetchError
from plugincheck.source.types import FetchResult, normalize_path

logger = logging.getLogger(__name__)

GITHUB_BASE = "https://github.com"

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def build_file_raw_url(base_url: str, owner: str, repo: str, ref: str, file_path: str) -> str:
    """Return the raw download URL for one file at a ref."""
    return f"{base_url.rstrip('/')}/{owner}/{repo}/{ref}/{quote(file_path)}"


def build_file_preview_url(owner: str, repo: str, ref: str, file_path: str, line: Optional[int] = None) -> str:
    """Return the human-facing blob URL, anchored to a line when given."""
    url = f"{GITHUB_BASE}/{owner}/{repo}/blob/{ref}/{quote(file_path)}"
    if line is not None:
        url += f"#L{line}"
    return url


def build_repo_home_url(owner: str, repo: str) -> str:
    return f"{GITHUB_BASE}/{owner}/{repo}"


class RawFileSourceTree:
    """Serve files of one repository snapshot over HTTP.

    The client, headers, timeout and retry policy are fixed at construction.
    Pass `client` to inject a preconfigured httpx.Client (tests use a
    MockTransport); the tree then does not own or close it.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        ref: str,
        settings: Settings,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.owner = owner
        self.repo = repo
        self.ref = ref
        self._settings = settings
        self._sleep = sleep
        self._owns_client = client is None
        self._client = client or httpx.Client(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.fetch_timeout_seconds,
            follow_redirects=True,
        )
        self._cache: dict[str, FetchResult] = {}
        self.requests_made = 0

    def __repr__(self) -> str:
        return f"RawFileSourceTree({self.owner}/{self.repo}@{self.ref})"

    def __enter__(self) -> "RawFileSourceTree":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def url_for(self, path: str) -> str:
        return build_file_raw_url(self._settings.raw_base_url, self.owner, self.repo, self.ref, path)

    def fetch(self, path: str) -> FetchResult:
        rel = normalize_path(path)
        if rel is None:
            return FetchResult.missing()

        cached = self._cache.get(rel)
        if cached is not None:
            return cached

        result = self._get_with_retries(rel)
        self._cache[rel] = result
        return result

    def list_files(self) -> Optional[list[str]]:
        # Raw file endpoints cannot enumerate a tree.
        return None

    def _get_with_retries(self, rel: str) -> FetchResult:
        url = self.url_for(rel)
        attempts = self._settings.fetch_retries + 1
        last_problem = ""

        for attempt in range(1, attempts + 1):
            if self.requests_made >= self._settings.max_fetches:
                raise FetchError(
                    f"fetch budget of {self._settings.max_fetches} requests exhausted at [{rel}]",
                    path=rel,
                )
            self.requests_made += 1

            try:
                response = self._client.get(url)
            except httpx.TransportError as exc:
                last_problem = f"{type(exc).__name__}: {exc}"
                logger.debug("GET %s attempt %d/%d failed: %s", url, attempt, attempts, last_problem)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                # redirect loops and malformed URLs are not retried
                raise FetchError(f"HTTP GET [{url}] failed: {exc}", path=rel, cause=exc) from exc
            else:
                if response.status_code == 200:
                    return FetchResult(content=response.content, exists=True)
                if response.status_code == 404:
                    return FetchResult.missing()
                last_problem = f"HTTP {response.status_code}"
                if response.status_code not in _RETRYABLE_STATUS:
                    raise FetchError(f"HTTP GET [{url}] returned {response.status_code}", path=rel)
                logger.debug("GET %s attempt %d/%d returned %d", url, attempt, attempts, response.status_code)

            if attempt < attempts:
                self._sleep(self._settings.fetch_retry_backoff_seconds * attempt)

        raise FetchError(f"HTTP GET [{url}] failed after {attempts} attempts: {last_problem}", path=rel)
