"""
Single-attempt JSON HTTP helper shared by the GitHub and Jira clients.

Every call is made exactly once: failures are classified into the typed errors in
errors.py and raised to the caller, which decides whether to skip or surface them.
"""

import logging
from typing import Optional, Dict, Any, Tuple
import requests

from errors import UpstreamError, UpstreamAuthError, UpstreamNotFound, RateLimited

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _safe_int_from_headers(headers: Dict[str, Any], key: str) -> Optional[int]:
    try:
        val = headers.get(key)
        return int(val) if val is not None else None
    except (TypeError, ValueError):
        return None


def _parse_body(resp):
    try:
        return resp.json()
    except ValueError:
        return getattr(resp, 'text', None)


def _error_detail(resp) -> str:
    body = _parse_body(resp)
    if isinstance(body, dict):
        # GitHub: {"message": ...}; Jira: {"errorMessages": [...], "errors": {...}}
        messages = list(body.get('errorMessages') or [])
        messages.extend(str(v) for v in (body.get('errors') or {}).values())
        if body.get('message'):
            messages.insert(0, str(body['message']))
        if messages:
            return '; '.join(messages)
    return str(body or '')[:500]


def _is_rate_limited(status: int, headers: Dict[str, Any], detail: str) -> bool:
    if status == 429:
        return True
    # GitHub reports primary rate limits as 403 with an exhausted quota header
    remaining = _safe_int_from_headers(headers, 'X-RateLimit-Remaining')
    if status == 403 and remaining is not None and remaining <= 0:
        return True
    return status == 403 and 'rate limit' in detail.lower()


def raise_for_status(resp, service: str, url: str) -> None:
    """Raise the typed error matching a non-2xx response; return quietly otherwise."""
    status = getattr(resp, 'status_code', 0)
    if 200 <= status < 300:
        return
    headers = getattr(resp, 'headers', {}) or {}
    detail = _error_detail(resp)
    message = f"{service} API request to {url} failed with status {status}: {detail}"
    logger.error(message)
    if _is_rate_limited(status, headers, detail):
        raise RateLimited(message, service=service, status=status)
    if status in (401, 403):
        raise UpstreamAuthError(message, service=service, status=status)
    if status == 404:
        raise UpstreamNotFound(message, service=service, status=status)
    raise UpstreamError(message, service=service, status=status)


def request_json(
    method: str,
    url: str,
    service: str,
    headers: Dict[str, str] = None,
    params: Dict[str, Any] = None,
    json_body: Dict[str, Any] = None,
    auth: Optional[Tuple[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
):
    """Perform one request and return the decoded JSON body.

    Transport failures (DNS, connection reset, timeout) become a plain UpstreamError.
    """
    logger.debug("%s %s params=%s", method, url, params)
    try:
        resp = requests.request(method, url, headers=headers or {}, params=params or None, json=json_body, auth=auth, timeout=timeout)
    except requests.RequestException as ex:
        logger.error("%s request to %s failed: %s", service, url, ex)
        raise UpstreamError(f"{service} API request to {url} failed: {ex}", service=service) from ex
    raise_for_status(resp, service, url)
    return _parse_body(resp)


__all__ = ["request_json", "raise_for_status", "DEFAULT_TIMEOUT"]
