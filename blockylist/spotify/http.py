from typing import Any, Dict, Optional

import requests

from blockylist.config import HTTP_TIMEOUT_SECONDS, SPOTIFY_API_BASE
from blockylist.core import CancelToken, RemoteUnavailable, Unauthorized

from .auth import SpotifyCredential, spotify_headers


def _build_url(path: str) -> str:
    if path.startswith("http://") or path.startswith("https://"):
        return path
    return f"{SPOTIFY_API_BASE}{path}"


def spotify_request(
    method: str,
    credential: SpotifyCredential,
    path: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    json: Optional[Dict[str, Any]] = None,
    cancel: Optional[CancelToken] = None,
) -> Dict[str, Any]:
    """
    Issue one Spotify Web API call and return the decoded JSON body.

    - checks `cancel` before the call and bounds the timeout by its deadline
    - 401/403 -> Unauthorized
    - transport error or any other non-2xx -> RemoteUnavailable
    """
    timeout = HTTP_TIMEOUT_SECONDS
    if cancel is not None:
        cancel.raise_if_cancelled()
        timeout = max(0.1, cancel.remaining(HTTP_TIMEOUT_SECONDS))

    url = _build_url(path)
    headers = spotify_headers(credential)

    try:
        r = requests.request(
            method,
            url,
            headers=headers,
            params=params,
            json=json,
            timeout=timeout,
        )
    except requests.RequestException as e:
        if cancel is not None:
            # A timeout caused by the run deadline is a cancellation, not an outage.
            cancel.raise_if_cancelled()
        raise RemoteUnavailable(f"{method} {path} failed: {e}", url=url) from e

    if r.status_code in (401, 403):
        raise Unauthorized(
            f"Spotify rejected the access token ({r.status_code}) on {method} {path}."
        )
    if not r.ok:
        raise RemoteUnavailable(
            f"{method} {path} returned HTTP {r.status_code}.",
            status_code=r.status_code,
            url=url,
        )

    if r.status_code == 204 or not r.content:
        return {}
    try:
        return r.json()
    except ValueError as e:
        raise RemoteUnavailable(
            f"{method} {path} returned a body that is not JSON.",
            status_code=r.status_code,
            url=url,
        ) from e


def spotify_get(
    credential: SpotifyCredential,
    path: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    cancel: Optional[CancelToken] = None,
) -> Dict[str, Any]:
    return spotify_request("GET", credential, path, params=params, cancel=cancel)


def spotify_post(
    credential: SpotifyCredential,
    path: str,
    body: Dict[str, Any],
    *,
    cancel: Optional[CancelToken] = None,
) -> Dict[str, Any]:
    return spotify_request("POST", credential, path, json=body, cancel=cancel)


def page_limit(limit: int, maximum: int = 50) -> int:
    """Clamp a caller-supplied page size to what the endpoint accepts."""
    return max(1, min(maximum, int(limit)))
