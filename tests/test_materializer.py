import random

import pytest
import requests

from blockylist.core import (
    BlockListDocument,
    CancelToken,
    ErrorKind,
    FixedEpisodeBlock,
    IncompleteBlocklist,
    LatestShowEpisodeBlock,
    RecommendedSongsBlock,
    RunCancelled,
    SongRange,
    SongsFromSourceBlock,
    Unauthorized,
)
from blockylist.engine import materialize_blocklist, materialize_blocks
from conftest import make_track, route_playlist_creation, track_items


def _appended(fake_spotify, playlist_id="pl-new"):
    calls = fake_spotify.calls_to("POST", f"/playlists/{playlist_id}/tracks")
    return [u for c in calls for u in c.json["uris"]]


def test_failed_middle_block_is_skipped_and_order_is_kept(fake_spotify, credential) -> None:
    route_playlist_creation(fake_spotify)
    fake_spotify.add("GET", "/shows/s-down/episodes", {"error": "down"}, status=503)
    fake_spotify.add(
        "GET", "/playlists/src/tracks", track_items([make_track("a"), make_track("b")])
    )
    blocks = [
        FixedEpisodeBlock(episode_id="ep1"),
        LatestShowEpisodeBlock(show_id="s-down"),
        SongsFromSourceBlock(source_id="src", song_range=SongRange(min=2, max=2)),
    ]

    result = materialize_blocks(credential, "Mix", blocks, rng=random.Random(4))

    assert result.playlist_id == "pl-new"
    assert result.playlist_url == "https://open.spotify.com/playlist/pl-new"
    first, second, third = result.per_block
    assert first.ok and first.appended
    assert second.ok is False
    assert second.error_kind == ErrorKind.REMOTE_UNAVAILABLE
    assert second.uris == []
    assert third.ok and third.appended

    appended = _appended(fake_spotify)
    assert appended[0] == "spotify:episode:ep1"
    assert sorted(appended[1:]) == ["spotify:track:a", "spotify:track:b"]
    assert result.populated_count == 2
    assert result.summary() == "created with 2/3 blocks populated (3 items)"


def test_playlist_is_created_once_with_metadata(fake_spotify, credential) -> None:
    route_playlist_creation(fake_spotify)

    materialize_blocks(
        credential,
        "Morning",
        [FixedEpisodeBlock(episode_id="e1"), FixedEpisodeBlock(episode_id="e2")],
        description="daily",
        public=False,
    )

    creations = fake_spotify.calls_to("POST", "/users/user-1/playlists")
    assert len(creations) == 1
    assert creations[0].json == {"name": "Morning", "description": "daily", "public": False}
    # One append per non-empty block, all to the same playlist.
    assert len(fake_spotify.calls_to("POST", "/playlists/pl-new/tracks")) == 2


def test_empty_blocks_are_not_appended(fake_spotify, credential) -> None:
    route_playlist_creation(fake_spotify)
    fake_spotify.add("GET", "/shows/quiet/episodes", {"items": []})

    result = materialize_blocks(
        credential,
        "Mix",
        [LatestShowEpisodeBlock(show_id="quiet"), SongsFromSourceBlock()],
    )

    assert fake_spotify.calls_to("POST", "/playlists/pl-new/tracks") == []
    assert [r.ok for r in result.per_block] == [True, True]
    assert result.per_block[1].incomplete is True
    assert result.populated_count == 0


def test_append_failure_marks_block_and_continues(fake_spotify, credential) -> None:
    route_playlist_creation(fake_spotify)
    fake_spotify.add("POST", "/playlists/pl-new/tracks", {"error": "down"}, status=503)

    result = materialize_blocks(
        credential,
        "Mix",
        [FixedEpisodeBlock(episode_id="e1"), FixedEpisodeBlock(episode_id="e2")],
    )

    assert [r.ok for r in result.per_block] == [False, False]
    assert {r.error_kind for r in result.per_block} == {ErrorKind.REMOTE_UNAVAILABLE}
    assert [r.appended for r in result.per_block] == [False, False]
    # Each block's batch is posted exactly once, never retried.
    assert len(fake_spotify.calls_to("POST", "/playlists/pl-new/tracks")) == 2
    assert result.summary() == "created with 0/2 blocks populated (0 items)"


def test_unauthorized_aborts_the_run(fake_spotify, credential) -> None:
    route_playlist_creation(fake_spotify)
    fake_spotify.add("GET", "/shows/s1/episodes", {"error": "expired"}, status=401)

    with pytest.raises(Unauthorized):
        materialize_blocks(
            credential,
            "Mix",
            [LatestShowEpisodeBlock(show_id="s1"), FixedEpisodeBlock(episode_id="e2")],
        )

    assert fake_spotify.calls_to("POST", "/playlists/pl-new/tracks") == []


def test_cancellation_returns_partial_result(fake_spotify, credential) -> None:
    route_playlist_creation(fake_spotify)
    token = CancelToken()

    def cancel_after_first_append(params, body):
        token.cancel()
        return {"snapshot_id": "s"}

    fake_spotify.add("POST", "/playlists/pl-new/tracks", cancel_after_first_append, status=201)

    with pytest.raises(RunCancelled) as exc_info:
        materialize_blocks(
            credential,
            "Mix",
            [FixedEpisodeBlock(episode_id="e1"), FixedEpisodeBlock(episode_id="e2")],
            cancel=token,
        )

    partial = exc_info.value.partial
    assert partial is not None
    assert partial.playlist_id == "pl-new"
    assert [r.appended for r in partial.per_block] == [True]
    assert _appended(fake_spotify) == ["spotify:episode:e1"]


def test_blocklist_with_incomplete_blocks_is_refused(fake_spotify, credential) -> None:
    doc = BlockListDocument(
        name="Draft",
        blocks=[FixedEpisodeBlock(episode_id="e1"), LatestShowEpisodeBlock(id="b-missing")],
    )

    with pytest.raises(IncompleteBlocklist) as exc_info:
        materialize_blocklist(credential, doc)

    assert exc_info.value.block_ids == ["b-missing"]
    assert fake_spotify.calls == []


def _route_recommendations(fake_spotify, artist_top_tracks) -> None:
    fake_spotify.add(
        "GET", "/me/top/artists", {"items": [{"id": "ar1", "name": "A"}, {"id": "ar2", "name": "B"}]}
    )
    fake_spotify.add("GET", "/artists/ar1/top-tracks", artist_top_tracks)
    fake_spotify.add("GET", "/artists/ar2/top-tracks", artist_top_tracks)
    fake_spotify.add("GET", "/me/playlists", {"items": []})
    fake_spotify.add("GET", "/me/tracks", track_items([]))


def test_append_failing_part_way_keeps_only_posted_items(fake_spotify, credential) -> None:
    route_playlist_creation(fake_spotify)
    _route_recommendations(fake_spotify, {"tracks": [make_track(f"r{i}") for i in range(150)]})
    posted = []

    def fail_second_batch(params, body):
        posted.append(body["uris"])
        if len(posted) == 2:
            raise requests.ConnectionError("connection reset")
        return {"snapshot_id": "s"}

    fake_spotify.add("POST", "/playlists/pl-new/tracks", fail_second_batch, status=201)

    result = materialize_blocks(
        credential,
        "Mix",
        [RecommendedSongsBlock(song_range=SongRange(min=150, max=150))],
        rng=random.Random(2),
    )

    block = result.per_block[0]
    assert [len(batch) for batch in posted] == [100, 50]
    assert block.ok is False
    assert block.error_kind == ErrorKind.REMOTE_UNAVAILABLE
    assert block.appended is True
    assert block.uris == posted[0]
    assert result.track_count == 100
    assert result.summary() == "created with 0/1 blocks populated (100 items)"


def test_cancellation_stops_recommendation_fetches(fake_spotify, credential) -> None:
    route_playlist_creation(fake_spotify)
    token = CancelToken()

    def cancel_on_first_artist(params, body):
        token.cancel()
        return {"tracks": [make_track("r1")]}

    _route_recommendations(fake_spotify, cancel_on_first_artist)

    with pytest.raises(RunCancelled) as exc_info:
        materialize_blocks(
            credential,
            "Mix",
            [FixedEpisodeBlock(id="b1", episode_id="e1"), RecommendedSongsBlock(id="b2")],
            rng=random.Random(5),
            cancel=token,
            max_workers=1,
        )

    partial = exc_info.value.partial
    assert [r.block_id for r in partial.per_block] == ["b1"]
    assert partial.per_block[0].appended is True
    # The second artist's fetch never went out.
    artist_calls = fake_spotify.calls_to("GET", "/artists/ar1/top-tracks") + fake_spotify.calls_to(
        "GET", "/artists/ar2/top-tracks"
    )
    assert len(artist_calls) == 1
    assert _appended(fake_spotify) == ["spotify:episode:e1"]


def test_unauthorized_after_creation_reports_partial_playlist(fake_spotify, credential) -> None:
    route_playlist_creation(fake_spotify)
    fake_spotify.add("GET", "/shows/s1/episodes", {"error": "expired"}, status=401)

    with pytest.raises(Unauthorized) as exc_info:
        materialize_blocks(
            credential,
            "Mix",
            [FixedEpisodeBlock(id="b1", episode_id="e1"), LatestShowEpisodeBlock(id="b2", show_id="s1")],
        )

    partial = exc_info.value.partial
    assert partial.playlist_id == "pl-new"
    assert [r.block_id for r in partial.per_block] == ["b1"]
    assert partial.track_count == 1
