"""Source fetcher: resolve a provenance URI to raw bytes.

Supported schemes are ``file`` (local files only, empty host) and
``http``/``https`` (GET with ``Accept: application/json``). HTTP goes
through an ``httpx.Client`` that is either injected into the
``ProvenanceFetcher`` or constructed for the single call and closed
afterwards; there is no module-level client.

Raises ``FetchError`` (or its subclass ``DeadlineExceededError``) for any
retrieval failure and ``UnsupportedSchemeError`` for other schemes. No
retries are attempted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import SplitResult, unquote, urlsplit

import httpx

from endorsekit import __version__
from endorsekit.exceptions import FetchError, UnsupportedSchemeError
from endorsekit.fetch.deadline import Deadline

logger = logging.getLogger(__name__)

# Upper bound for a single HTTP request (seconds). A Deadline can only shorten it.
DEFAULT_TIMEOUT: float = 30.0

# User-Agent sent with every request.
USER_AGENT: str = f"EndorseKit-Fetcher/{__version__}"

ACCEPT_JSON: str = "application/json"

SUPPORTED_SCHEMES: tuple[str, ...] = ("file", "http", "https")


class ProvenanceFetcher:
    """Fetch provenance bytes from local files or HTTP(S) endpoints.

    The fetcher holds no state besides its configuration, so a single
    instance can serve any number of calls.

    Args:
        client: Optional pre-configured ``httpx.Client``. The caller keeps
            ownership and must close it. When omitted, a client is created
            per HTTP fetch and closed before returning.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = client
        self._timeout = timeout

    def fetch_bytes(self, uri: str, *, deadline: Deadline | None = None) -> bytes:
        """Return the raw bytes behind ``uri``.

        Args:
            uri: A ``file``, ``http`` or ``https`` URI.
            deadline: Optional deadline/cancellation token checked before
                any I/O and used to bound the HTTP request timeout.

        Returns:
            The exact bytes of the file or response body.

        Raises:
            UnsupportedSchemeError: For any scheme other than file/http/https.
            FetchError: On any retrieval failure.
        """
        if deadline is not None:
            deadline.check(uri)

        try:
            parts = urlsplit(uri)
        except ValueError as exc:
            raise FetchError(uri, f"could not parse the URI: {exc}") from exc

        scheme = parts.scheme.lower()
        if scheme in ("http", "https"):
            return self._fetch_http(uri, deadline)
        if scheme == "file":
            return _read_local_file(uri, parts)
        raise UnsupportedSchemeError(uri, scheme)

    # -- HTTP ---------------------------------------------------------------

    def _fetch_http(self, uri: str, deadline: Deadline | None) -> bytes:
        timeout = self._request_timeout(deadline)
        logger.debug("Fetching %s over HTTP (timeout=%.1fs)", uri, timeout)
        if self._client is not None:
            return _get_json_bytes(self._client, uri, timeout, deadline)
        with httpx.Client(
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        ) as client:
            return _get_json_bytes(client, uri, timeout, deadline)

    def _request_timeout(self, deadline: Deadline | None) -> float:
        if deadline is None:
            return self._timeout
        remaining = deadline.remaining()
        if remaining is None:
            return self._timeout
        return min(self._timeout, remaining)


def fetch_bytes(
    uri: str,
    *,
    deadline: Deadline | None = None,
    client: httpx.Client | None = None,
) -> bytes:
    """Convenience wrapper around ``ProvenanceFetcher(client).fetch_bytes``."""
    return ProvenanceFetcher(client).fetch_bytes(uri, deadline=deadline)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _get_json_bytes(
    client: httpx.Client,
    uri: str,
    timeout: float,
    deadline: Deadline | None = None,
) -> bytes:
    """GET ``uri`` and read the full body; the stream is closed on every path.

    httpx applies ``timeout`` to each network operation separately, so the
    deadline is checked again after every received chunk.
    """
    try:
        with client.stream(
            "GET",
            uri,
            headers={"Accept": ACCEPT_JSON},
            timeout=timeout,
        ) as response:
            response.raise_for_status()
            chunks: list[bytes] = []
            for chunk in response.iter_bytes():
                if deadline is not None:
                    deadline.check(uri)
                chunks.append(chunk)
            return b"".join(chunks)
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            uri, f"server responded with HTTP {exc.response.status_code}"
        ) from exc
    except httpx.TimeoutException as exc:
        raise FetchError(uri, f"request timed out: {exc}") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(uri, f"could not receive response from server: {exc}") from exc


def _read_local_file(uri: str, parts: SplitResult) -> bytes:
    """Read a local file named by a ``file`` URI with an empty host."""
    if parts.netloc:
        raise FetchError(
            uri,
            f"invalid scheme ({parts.scheme!r}) and host ({parts.netloc!r}) combination",
        )
    path = Path(unquote(parts.path))
    if not path.exists():
        raise FetchError(uri, f"{str(path)!r} does not exist")
    if not path.is_file():
        raise FetchError(uri, f"{str(path)!r} is not a regular file")
    logger.debug("Reading local provenance file %s", path)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise FetchError(uri, f"could not read {str(path)!r}: {exc}") from exc
