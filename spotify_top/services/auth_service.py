from typing import Optional

from spotify_top.core import (
    ResolutionError,
    SpotifyProfile,
    TokenValidationResult,
    UserProfile,
    UserRecord,
    log_error,
    log_info,
    log_success,
    log_suppressed,
    mask_token,
)
from spotify_top.data import UserStore
from spotify_top.spotify import SpotifyTokenClient


class AuthService:
    """
    Links Spotify identities to stored tokens and keeps those tokens usable.
    """

    def __init__(self, users: UserStore, token_client: SpotifyTokenClient) -> None:
        self.users = users
        self.token_client = token_client

    def find_or_create_user(
        self,
        profile: SpotifyProfile,
        access_token: str,
        refresh_token: Optional[str],
    ) -> UserRecord:
        """
        Called from the OAuth callback.

        A never-seen Spotify id creates a record; a known one only gets its
        tokens replaced.
        """
        user = self.users.find_by_spotify_id(profile.id)

        if user is None:
            user = UserRecord(
                spotify_id=profile.id,
                display_name=profile.display_name or profile.id,
                access_token=access_token,
                refresh_token=refresh_token,
                email=profile.email,
                profile_image_url=profile.image_url,
            )
            self.users.insert(user)
            log_success(f"Created user for Spotify account {profile.id}.")
            return user

        user.access_token = access_token
        if refresh_token:
            user.refresh_token = refresh_token
        log_info(f"Updated tokens for Spotify account {profile.id}.")
        return self.users.save(user)

    def find_user_by_access_token(self, access_token: str) -> Optional[UserRecord]:
        return self.users.find_by_access_token(access_token)

    def validate_token(self, access_token: str) -> TokenValidationResult:
        """
        Confirm `access_token`, or repair it with the stored refresh token.

        1. Valid token owned by a stored user -> valid, no new token.
        2. Otherwise the user owning the token is looked up once; none found
           -> USER_NOT_FOUND.
        3. Refresh fails -> INVALID_REFRESH_TOKEN.
        4. Refresh succeeds -> tokens are overwritten and the new access token
           is returned.

        Unexpected exceptions become INTERNAL_ERROR and are never raised.
        Two concurrent refreshes for the same user both persist; the last
        write wins.
        """
        try:
            is_token_valid = self.token_client.validate_access_token(access_token)
            user = self.users.find_by_access_token(access_token)

            if is_token_valid and user is not None:
                return TokenValidationResult(
                    is_valid=True,
                    user=UserProfile.from_record(user),
                )

            if user is None:
                return TokenValidationResult(
                    is_valid=False,
                    error=ResolutionError.USER_NOT_FOUND,
                )

            new_tokens = self.token_client.refresh_access_token(user.refresh_token or "")
            if new_tokens is None:
                return TokenValidationResult(
                    is_valid=False,
                    error=ResolutionError.INVALID_REFRESH_TOKEN,
                )

            user.access_token = new_tokens.access_token
            if new_tokens.refresh_token:
                user.refresh_token = new_tokens.refresh_token
            user = self.users.save(user)
            log_success(f"Access token refreshed for Spotify account {user.spotify_id}.")

            return TokenValidationResult(
                is_valid=True,
                new_access_token=new_tokens.access_token,
                user=UserProfile.from_record(user),
            )
        except Exception as e:
            log_error(
                f"Token validation failed for {mask_token(access_token)}: "
                f"{type(e).__name__}: {e}"
            )
            return TokenValidationResult(
                is_valid=False,
                error=ResolutionError.INTERNAL_ERROR,
            )

    def logout(self, access_token: str) -> None:
        """Forget the tokens of the user owning `access_token`. Never raises."""
        try:
            if self.users.clear_tokens_by_access_token(access_token):
                log_info(f"Tokens cleared for {mask_token(access_token)}.")
        except Exception as e:
            log_suppressed("Logout", e)
