from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from spotify_top.config import (
    SCOPES,
    SPOTIFY_API_BASE,
    SPOTIFY_AUTH_URL,
    SPOTIFY_TOKEN_URL,
    Settings,
)
from spotify_top.core import (
    SpotifyProfile,
    TokenPair,
    log_step,
    log_warning,
    mask_token,
)

from .errors import SpotifyAuthError


def spotify_headers(access_token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


def _error_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _profile_from_me(data: Dict[str, Any]) -> SpotifyProfile:
    images = data.get("images") or []
    image_url = images[0].get("url") if images and isinstance(images[0], dict) else None
    return SpotifyProfile(
        id=data["id"],
        display_name=data.get("display_name"),
        email=data.get("email"),
        image_url=image_url,
    )


class SpotifyTokenClient:
    """
    Talks to the Spotify accounts service and the /me endpoint.

    It never touches storage: it validates access tokens, refreshes them,
    and handles the authorization-code leg of the OAuth flow. Client
    credentials come from the injected Settings.
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def _client_auth(self) -> tuple[str, str]:
        return (
            self.settings.spotify_client_id or "",
            self.settings.spotify_client_secret or "",
        )

    def build_authorize_url(self, state: Optional[str] = None) -> str:
        params = {
            "response_type": "code",
            "client_id": self.settings.spotify_client_id or "",
            "redirect_uri": self.settings.callback_url,
            "scope": " ".join(SCOPES),
        }
        if state:
            params["state"] = state
        return f"{SPOTIFY_AUTH_URL}?{urlencode(params)}"

    def validate_access_token(self, access_token: str) -> bool:
        """
        Probe GET /me with the token. True only on HTTP 200.

        Transport errors count as "invalid"; nothing is raised.
        """
        if not access_token:
            return False
        try:
            r = self.session.get(
                f"{SPOTIFY_API_BASE}/me",
                headers=spotify_headers(access_token),
                timeout=self.settings.http_timeout,
            )
        except requests.RequestException as e:
            log_warning(f"Access token probe failed ({type(e).__name__}).")
            return False
        return r.status_code == 200

    def refresh_access_token(self, refresh_token: str) -> Optional[TokenPair]:
        """
        Exchange a refresh token for a new access token.

        Returns None on any failure (revoked token, bad credentials, network
        error). A None result means the user must log in again; retrying with
        the same refresh token will not help.
        """
        if not refresh_token:
            return None

        log_step(f"Refreshing Spotify access token ({mask_token(refresh_token)})...")
        try:
            r = self.session.post(
                SPOTIFY_TOKEN_URL,
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": refresh_token,
                },
                auth=self._client_auth,
                timeout=self.settings.http_timeout,
            )
        except requests.RequestException as e:
            log_warning(f"Token refresh request failed: {e}")
            return None

        if r.status_code != 200:
            log_warning(
                f"Token refresh rejected by Spotify ({r.status_code}): {_error_body(r)}"
            )
            return None

        try:
            return TokenPair(**r.json())
        except (ValueError, TypeError) as e:
            log_warning(f"Token refresh returned an unexpected payload: {e}")
            return None

    def exchange_code(self, code: str) -> TokenPair:
        """
        Exchange an authorization code (OAuth callback) for a token pair.
        """
        log_step("Exchanging Spotify authorization code for tokens...")
        try:
            r = self.session.post(
                SPOTIFY_TOKEN_URL,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.settings.callback_url,
                },
                auth=self._client_auth,
                timeout=self.settings.http_timeout,
            )
        except requests.RequestException as e:
            raise SpotifyAuthError(f"Token exchange failed: {e}") from e

        if r.status_code != 200:
            raise SpotifyAuthError(
                f"Token exchange rejected by Spotify ({r.status_code})."
            )

        try:
            return TokenPair(**r.json())
        except (ValueError, TypeError) as e:
            raise SpotifyAuthError("Token exchange returned an invalid payload.") from e

    def fetch_profile(self, access_token: str) -> SpotifyProfile:
        try:
            r = self.session.get(
                f"{SPOTIFY_API_BASE}/me",
                headers=spotify_headers(access_token),
                timeout=self.settings.http_timeout,
            )
        except requests.RequestException as e:
            raise SpotifyAuthError(f"Profile lookup failed: {e}") from e

        if r.status_code != 200:
            raise SpotifyAuthError(f"Profile lookup rejected by Spotify ({r.status_code}).")

        try:
            return _profile_from_me(r.json())
        except (ValueError, KeyError, TypeError) as e:
            raise SpotifyAuthError("Profile lookup returned an invalid payload.") from e
