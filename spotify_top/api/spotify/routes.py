from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from spotify_top.api.dependencies import (
    get_auth_service,
    get_fetcher,
    raise_http,
    resolve_cache_user_id,
)
from spotify_top.core import (
    DEFAULT_TOP_ITEMS_LIMIT,
    ItemType,
    ProcessedArtistsResponse,
    TimeRange,
    TopItemsQuery,
    log_info,
)
from spotify_top.services import (
    AuthService,
    is_well_formed_top_items_response,
    process_top_artists_response,
)
from spotify_top.spotify import SpotifyError, TopItemsFetcher

from .schemas import CacheClearResponse

router = APIRouter()


def _require_authorization(authorization: Optional[str]) -> str:
    if not authorization or not authorization.strip():
        raise HTTPException(status_code=400, detail="Authorization header is required.")
    return authorization


def _fetch(
    fetcher: TopItemsFetcher,
    auth_service: AuthService,
    item_type: ItemType,
    time_range: TimeRange,
    limit: int,
    offset: int,
    authorization: Optional[str],
) -> Dict[str, Any]:
    query = TopItemsQuery(
        item_type=item_type,
        time_range=time_range,
        limit=limit,
        offset=offset,
        authorization=_require_authorization(authorization),
    )
    user_id = resolve_cache_user_id(auth_service, authorization)
    try:
        return fetcher.fetch(query, user_id)
    except SpotifyError as e:
        raise_http(e)


@router.get("/top/artists/processed", response_model=ProcessedArtistsResponse)
def get_top_artists_processed(
    time_range: TimeRange = Query(default=TimeRange.MEDIUM_TERM),
    limit: int = Query(default=DEFAULT_TOP_ITEMS_LIMIT, ge=1, le=50),
    offset: int = Query(default=0, ge=0),
    authorization: Optional[str] = Header(default=None),
    fetcher: TopItemsFetcher = Depends(get_fetcher),
    auth_service: AuthService = Depends(get_auth_service),
) -> ProcessedArtistsResponse:
    """
    Top artists split into three popularity-balanced lists.
    """
    response = _fetch(
        fetcher, auth_service, ItemType.ARTISTS, time_range, limit, offset, authorization
    )

    if not is_well_formed_top_items_response(response):
        raise HTTPException(
            status_code=400, detail="Invalid response format from Spotify API."
        )

    processed = process_top_artists_response(response)
    log_info(
        f"Processed {processed.original_total} artists into {len(processed.lists)} lists."
    )
    return processed


@router.get("/top/artists")
def get_top_artists(
    time_range: TimeRange = Query(default=TimeRange.MEDIUM_TERM),
    limit: int = Query(default=DEFAULT_TOP_ITEMS_LIMIT, ge=1, le=50),
    offset: int = Query(default=0, ge=0),
    authorization: Optional[str] = Header(default=None),
    fetcher: TopItemsFetcher = Depends(get_fetcher),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    return _fetch(
        fetcher, auth_service, ItemType.ARTISTS, time_range, limit, offset, authorization
    )


@router.get("/top/tracks")
def get_top_tracks(
    time_range: TimeRange = Query(default=TimeRange.MEDIUM_TERM),
    limit: int = Query(default=DEFAULT_TOP_ITEMS_LIMIT, ge=1, le=50),
    offset: int = Query(default=0, ge=0),
    authorization: Optional[str] = Header(default=None),
    fetcher: TopItemsFetcher = Depends(get_fetcher),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    return _fetch(
        fetcher, auth_service, ItemType.TRACKS, time_range, limit, offset, authorization
    )


@router.get("/top/{item_type}")
def get_top_items(
    item_type: ItemType,
    time_range: TimeRange = Query(default=TimeRange.MEDIUM_TERM),
    limit: int = Query(default=DEFAULT_TOP_ITEMS_LIMIT, ge=1, le=50),
    offset: int = Query(default=0, ge=0),
    authorization: Optional[str] = Header(default=None),
    fetcher: TopItemsFetcher = Depends(get_fetcher),
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """
    Raw Spotify /me/top/{artists|tracks} payload, cached for an hour per
    stored user and query shape.
    """
    return _fetch(
        fetcher, auth_service, item_type, time_range, limit, offset, authorization
    )


@router.delete("/cache", response_model=CacheClearResponse)
def clear_cache(
    authorization: Optional[str] = Header(default=None),
    fetcher: TopItemsFetcher = Depends(get_fetcher),
    auth_service: AuthService = Depends(get_auth_service),
) -> CacheClearResponse:
    user_id = resolve_cache_user_id(auth_service, authorization)
    if not user_id:
        return CacheClearResponse(message="User not authenticated")

    if fetcher.cache is not None:
        fetcher.cache.clear(user_id)
    return CacheClearResponse(message="Cache cleared successfully")
