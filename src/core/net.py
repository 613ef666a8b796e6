from __future__ import annotations

import logging
import os
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Mapping, Optional


log = logging.getLogger(__name__)

DEFAULT_ALLOWED_HOSTS = {
    "query1.finance.yahoo.com",
    "query2.finance.yahoo.com",
}


class NetworkError(Exception):
    pass


class HttpStatusError(NetworkError):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = int(status_code)


def network_enabled() -> bool:
    v = (os.environ.get("NETWORK_ENABLED") or "").strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


def allowed_outbound_hosts() -> set[str]:
    raw = (os.environ.get("ALLOWED_OUTBOUND_HOSTS") or "").strip()
    if raw:
        hosts = [h.strip().lower() for h in raw.split(",") if h.strip()]
        return set(hosts)
    return set(DEFAULT_ALLOWED_HOSTS)


def _assert_url_allowed(url: str) -> None:
    u = urllib.parse.urlparse(url)
    if (u.scheme or "").lower() != "https":
        raise NetworkError("Blocked network request: only https:// is allowed.")
    host = (u.hostname or "").lower()
    if not host:
        raise NetworkError("Blocked network request: missing hostname.")
    if host not in allowed_outbound_hosts():
        raise NetworkError(f"Blocked network request: host not allowlisted ({host}).")


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    content: bytes
    content_type: Optional[str] = None


class _AllowlistRedirectHandler(urllib.request.HTTPRedirectHandler):
    def redirect_request(self, req, fp, code, msg, headers, newurl):  # type: ignore[override]
        # Enforce allowlist on redirects as well.
        _assert_url_allowed(str(newurl))
        return super().redirect_request(req, fp, code, msg, headers, newurl)


def http_get(
    url: str,
    *,
    headers: Mapping[str, str] | None = None,
    timeout_s: float = 30.0,
    max_retries: int = 2,
    backoff_s: float = 0.5,
) -> HttpResponse:
    """
    Minimal HTTP GET helper with:
      - NETWORK_ENABLED gate
      - outbound host allowlist
      - timeouts + limited retries (429 and 5xx are retried, other 4xx fail at once)

    Raises HttpStatusError for non-2xx responses so callers can map the status.
    """
    if not network_enabled():
        raise NetworkError("Network disabled; set NETWORK_ENABLED=1 to enable market data requests.")
    _assert_url_allowed(url)

    attempt = 0
    last_err: Exception | None = None
    last_status: int | None = None
    while attempt <= max_retries:
        try:
            opener = urllib.request.build_opener(_AllowlistRedirectHandler())
            req = urllib.request.Request(url, method="GET", headers=dict(headers or {}))
            with opener.open(req, timeout=timeout_s) as resp:
                status = int(getattr(resp, "status", 200))
                content_type = resp.headers.get("Content-Type")
                content = resp.read()
                return HttpResponse(status_code=status, content=content, content_type=content_type)
        except urllib.error.HTTPError as e:
            last_err = e
            status = int(getattr(e, "code", 0) or 0)
            last_status = status
            if status == 429 or status >= 500:
                log.warning("HTTP %s from %s (attempt %d/%d)", status, urllib.parse.urlparse(url).hostname, attempt + 1, max_retries + 1)
                time.sleep(min(8.0, backoff_s * (2**attempt)))
                attempt += 1
                continue
            u = urllib.parse.urlparse(url)
            raise HttpStatusError(status, f"HTTP error status={status} host={(u.hostname or '').lower()} path={u.path or '/'}")
        except (urllib.error.URLError, TimeoutError) as e:
            last_err = e
            last_status = None
            time.sleep(min(8.0, backoff_s * (2**attempt)))
            attempt += 1
            continue

    if last_status is not None:
        raise HttpStatusError(last_status, f"HTTP error status={last_status} after retries")
    reason = getattr(last_err, "reason", None) if last_err is not None else None
    raise NetworkError(
        f"Network request failed after retries: {type(last_err).__name__ if last_err else 'unknown'}"
        + (f": {reason}" if reason else "")
    )
