from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, RedirectResponse

from spotify_top.api.dependencies import (
    get_auth_service,
    get_settings,
    get_token_client,
    raise_http,
)
from spotify_top.config import Settings
from spotify_top.core import ResolutionError, log_step
from spotify_top.services import AuthService
from spotify_top.spotify import SpotifyAuthError, SpotifyTokenClient

from .schemas import LogoutResponse, TokenValidationRequest, TokenValidationResponse

router = APIRouter()

_ERROR_MESSAGES = {
    ResolutionError.USER_NOT_FOUND: "User not found.",
    ResolutionError.INVALID_REFRESH_TOKEN: "Invalid refresh token.",
    ResolutionError.INTERNAL_ERROR: "Internal server error.",
}


@router.get("/spotify")
def spotify_login(
    settings: Settings = Depends(get_settings),
    token_client: SpotifyTokenClient = Depends(get_token_client),
) -> RedirectResponse:
    """
    Start the OAuth flow: redirect the browser to Spotify's consent page.
    """
    if not settings.spotify_client_id:
        raise HTTPException(status_code=500, detail="SPOTIFY_CLIENT_ID is not configured.")
    return RedirectResponse(token_client.build_authorize_url())


@router.get("/spotify/callback")
def spotify_callback(
    code: str | None = Query(default=None),
    error: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
    token_client: SpotifyTokenClient = Depends(get_token_client),
    auth_service: AuthService = Depends(get_auth_service),
) -> RedirectResponse:
    """
    Spotify redirect target.

    Exchanges the code, stores (or updates) the user, then hands both tokens
    to the frontend:
      {FRONTEND_URL}/login-success?access=...&refresh=...
    """
    if error:
        raise HTTPException(status_code=400, detail=f"Spotify authorization failed: {error}")

    if not code:
        raise HTTPException(status_code=400, detail="Missing 'code' parameter.")

    try:
        tokens = token_client.exchange_code(code)
        profile = token_client.fetch_profile(tokens.access_token)
    except SpotifyAuthError as e:
        raise_http(e)

    log_step(f"Spotify login for account {profile.id}.")
    user = auth_service.find_or_create_user(
        profile, tokens.access_token, tokens.refresh_token
    )

    query = urlencode(
        {"access": user.access_token or "", "refresh": user.refresh_token or ""}
    )
    return RedirectResponse(f"{settings.frontend_url}/login-success?{query}")


@router.post("/validate-token", response_model=TokenValidationResponse)
def validate_token(
    body: TokenValidationRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """
    Check an access token, refreshing it from the stored refresh token if
    needed. HTTP 200 when usable, 401 otherwise; the body always carries the
    full result.
    """
    result = auth_service.validate_token(body.access_token)

    if result.is_valid:
        status_code, message = 200, "Token is valid."
    else:
        status_code = 401
        message = _ERROR_MESSAGES.get(result.error, "Invalid token.")

    payload = TokenValidationResponse(status_code=status_code, message=message, data=result)
    return JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))


@router.post("/logout", response_model=LogoutResponse)
def logout(
    body: TokenValidationRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LogoutResponse:
    auth_service.logout(body.access_token)
    return LogoutResponse()
