"""Reshaping of Spotify "top artists" responses.

Pure functions only: no I/O, no shared state.
"""

from decimal import ROUND_HALF_UP, Decimal
from numbers import Real
from typing import Any, Dict, List, Mapping, Sequence

from spotify_top.core import ArtistsList, ProcessedArtistsResponse, SimplifiedArtist

LIST_COUNT = 3


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def is_well_formed_top_items_response(response: Any) -> bool:
    """
    True if `response["items"]` is a list whose elements all carry a numeric
    `popularity`, a string `name` and a string `id`.
    """
    if not isinstance(response, Mapping):
        return False
    items = response.get("items")
    if not isinstance(items, list):
        return False
    return all(
        isinstance(item, Mapping)
        and _is_number(item.get("popularity"))
        and isinstance(item.get("name"), str)
        and isinstance(item.get("id"), str)
        for item in items
    )


def average_popularity(artists: Sequence[SimplifiedArtist]) -> int:
    """Mean popularity rounded half-up to an integer (0 for an empty list)."""
    if not artists:
        return 0
    total = sum(Decimal(str(a.popularity)) for a in artists)
    mean = total / Decimal(len(artists))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def distribute_top_artists(
    artists: Sequence[Mapping[str, Any]],
) -> ProcessedArtistsResponse:
    """
    Split artists into (up to) three balanced lists.

    Artists are ranked by popularity, highest first; ties keep their input
    order. The three best-ranked artists lead lists 1, 2 and 3, then the
    rest are dealt round-robin in rank order: 1 → 2 → 3 → 1 → ...

    Example:
      A90 B80 C70 D60 E50 F40 -> [A, D] avg 75, [B, E] avg 65, [C, F] avg 55
    """
    if not artists:
        return ProcessedArtistsResponse(lists=[], original_total=0)

    # sorted() is stable, also with reverse=True
    ranked = sorted(artists, key=lambda a: a["popularity"], reverse=True)

    buckets: List[List[SimplifiedArtist]] = [
        [] for _ in range(min(LIST_COUNT, len(ranked)))
    ]
    for rank, artist in enumerate(ranked):
        buckets[rank % LIST_COUNT].append(
            SimplifiedArtist(name=artist["name"], popularity=artist["popularity"])
        )

    lists = [
        ArtistsList(
            id=index + 1,
            artists=members,
            average_popularity=average_popularity(members),
        )
        for index, members in enumerate(buckets)
    ]
    return ProcessedArtistsResponse(lists=lists, original_total=len(artists))


def process_top_artists_response(response: Dict[str, Any]) -> ProcessedArtistsResponse:
    """Distribute the `items` of a Spotify top artists response."""
    return distribute_top_artists(response.get("items") or [])
