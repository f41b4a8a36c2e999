from fakes import artists_payload
from spotify_top.services import (
    average_popularity,
    distribute_top_artists,
    is_well_formed_top_items_response,
    process_top_artists_response,
)
from spotify_top.core import SimplifiedArtist


def _names(artists_list) -> list:
    return [a.name for a in artists_list.artists]


def test_six_artists_are_seeded_then_dealt_round_robin() -> None:
    payload = artists_payload(
        ("A", 90), ("B", 80), ("C", 70), ("D", 60), ("E", 50), ("F", 40)
    )

    result = distribute_top_artists(payload["items"])

    assert result.original_total == 6
    assert [lst.id for lst in result.lists] == [1, 2, 3]
    assert _names(result.lists[0]) == ["A", "D"]
    assert _names(result.lists[1]) == ["B", "E"]
    assert _names(result.lists[2]) == ["C", "F"]
    assert [lst.average_popularity for lst in result.lists] == [75, 65, 55]


def test_input_order_does_not_matter_only_popularity() -> None:
    payload = artists_payload(
        ("F", 40), ("C", 70), ("A", 90), ("E", 50), ("B", 80), ("D", 60)
    )

    result = distribute_top_artists(payload["items"])

    assert _names(result.lists[0]) == ["A", "D"]
    assert _names(result.lists[1]) == ["B", "E"]
    assert _names(result.lists[2]) == ["C", "F"]


def test_ties_keep_input_order() -> None:
    payload = artists_payload(("X", 50), ("Y", 50), ("Z", 50), ("W", 50))

    result = distribute_top_artists(payload["items"])

    assert _names(result.lists[0]) == ["X", "W"]
    assert _names(result.lists[1]) == ["Y"]
    assert _names(result.lists[2]) == ["Z"]


def test_two_artists_produce_two_lists() -> None:
    payload = artists_payload(("A", 90), ("B", 80))

    result = distribute_top_artists(payload["items"])

    assert result.original_total == 2
    assert len(result.lists) == 2
    assert _names(result.lists[0]) == ["A"]
    assert _names(result.lists[1]) == ["B"]
    assert result.lists[0].average_popularity == 90


def test_empty_input_returns_no_lists() -> None:
    result = distribute_top_artists([])

    assert result.lists == []
    assert result.original_total == 0


def test_average_popularity_rounds_half_up() -> None:
    artists = [
        SimplifiedArtist(name="A", popularity=70),
        SimplifiedArtist(name="B", popularity=61),
    ]
    assert average_popularity(artists) == 66

    # 64.5: round() would give 64
    artists = [
        SimplifiedArtist(name="A", popularity=70),
        SimplifiedArtist(name="B", popularity=59),
    ]
    assert average_popularity(artists) == 65


def test_seven_artists_wrap_back_to_first_list() -> None:
    payload = artists_payload(
        ("A", 90), ("B", 80), ("C", 70), ("D", 60), ("E", 50), ("F", 40), ("G", 30)
    )

    result = distribute_top_artists(payload["items"])

    assert _names(result.lists[0]) == ["A", "D", "G"]
    assert result.lists[0].average_popularity == 60


def test_process_top_artists_response_uses_items() -> None:
    payload = artists_payload(("A", 90), ("B", 80), ("C", 70))

    result = process_top_artists_response(payload)

    assert result.original_total == 3
    assert [_names(lst) for lst in result.lists] == [["A"], ["B"], ["C"]]


def test_well_formed_response_detection() -> None:
    assert is_well_formed_top_items_response(artists_payload(("A", 90))) is True
    assert is_well_formed_top_items_response({"items": []}) is True

    assert is_well_formed_top_items_response(None) is False
    assert is_well_formed_top_items_response({"items": "nope"}) is False
    assert is_well_formed_top_items_response({}) is False
    assert (
        is_well_formed_top_items_response(
            {"items": [{"id": "1", "name": "A", "popularity": "90"}]}
        )
        is False
    )
    assert (
        is_well_formed_top_items_response({"items": [{"name": "A", "popularity": 90}]})
        is False
    )
    assert (
        is_well_formed_top_items_response(
            {"items": [{"id": "1", "name": "A", "popularity": True}]}
        )
        is False
    )
