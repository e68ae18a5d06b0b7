"""Bearer credential handling.

Token acquisition (authorization code + PKCE) happens outside this package;
callers hand over an access token and every Spotify call receives it
explicitly as a SpotifyCredential. There is no process-wide auth state.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from blockylist.config import SCOPES
from blockylist.core import Unauthorized


@dataclass(frozen=True)
class SpotifyCredential:
    access_token: str
    scopes: Tuple[str, ...] = tuple(SCOPES)

    @classmethod
    def from_authorization_header(cls, value: Optional[str]) -> "SpotifyCredential":
        """
        Build a credential from an HTTP Authorization header value.

        Accepts "Bearer <token>"; anything else is rejected with Unauthorized.
        """
        if not value:
            raise Unauthorized("Missing Authorization header.")

        scheme, _, token = value.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            raise Unauthorized("Authorization header must be 'Bearer <token>'.")
        return cls(access_token=token)


def spotify_headers(credential: Optional[SpotifyCredential]) -> Dict[str, str]:
    if credential is None or not credential.access_token:
        raise Unauthorized("Spotify access token is missing.")
    return {"Authorization": f"Bearer {credential.access_token}"}
