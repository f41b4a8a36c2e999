class SpotifyError(Exception):
    """Base class for errors surfaced to callers of the Spotify clients."""

    status_code = 500
    default_message = "Spotify request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class SpotifyBadRequest(SpotifyError):
    """Malformed or missing input, rejected before any network call."""

    status_code = 400
    default_message = "Authorization token is required."


class SpotifyUnauthorized(SpotifyError):
    status_code = 401
    default_message = "Unauthorized - Invalid or expired token."


class SpotifyForbidden(SpotifyError):
    status_code = 403
    default_message = "Forbidden - Insufficient permissions."


class SpotifyRateLimited(SpotifyError):
    status_code = 429
    default_message = "Rate limit exceeded."


class SpotifyUpstreamFailure(SpotifyError):
    status_code = 500
    default_message = "Failed to fetch data from Spotify API."


class SpotifyAuthError(SpotifyError):
    """The OAuth code exchange or profile lookup failed."""

    status_code = 502
    default_message = "Spotify authorization failed."


_ERRORS_BY_STATUS = {
    401: SpotifyUnauthorized,
    403: SpotifyForbidden,
    429: SpotifyRateLimited,
}


def error_for_status(status_code: int | None) -> SpotifyError:
    """
    Map an upstream HTTP status to the matching error.

    Anything that is not 401/403/429 (including None for transport failures)
    becomes SpotifyUpstreamFailure.
    """
    error_cls = _ERRORS_BY_STATUS.get(status_code, SpotifyUpstreamFailure)
    return error_cls()
