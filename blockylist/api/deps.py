from typing import NoReturn

from fastapi import Depends, Header, HTTPException

from blockylist.core import RemoteUnavailable, Unauthorized
from blockylist.spotify import SpotifyCredential, get_current_user_id


def raise_unauth(e: Unauthorized) -> NoReturn:
    raise HTTPException(
        status_code=401,
        detail={
            "status": "unauthenticated",
            "message": str(e) or "Spotify authorization required.",
        },
    )


def raise_remote_unavailable(e: RemoteUnavailable) -> NoReturn:
    raise HTTPException(
        status_code=502,
        detail={
            "status": "spotify_unavailable",
            "message": str(e) or "Spotify is unavailable.",
        },
    )


def get_credential(
    authorization: str | None = Header(default=None),
) -> SpotifyCredential:
    """Bearer credential taken from the request's Authorization header."""
    try:
        return SpotifyCredential.from_authorization_header(authorization)
    except Unauthorized as e:
        raise_unauth(e)


def get_user_id(credential: SpotifyCredential = Depends(get_credential)) -> str:
    """Spotify user id of the caller; blocklists are stored per user."""
    try:
        return get_current_user_id(credential)
    except Unauthorized as e:
        raise_unauth(e)
    except RemoteUnavailable as e:
        raise_remote_unavailable(e)
