import random

import pytest

from blockylist.core import ArtistInfo, NoCandidates, PlaylistInfo, RemoteUnavailable, TrackEntry, Unauthorized
from blockylist.engine import CandidatePool, build_candidate_pool


def _t(track_id: str, popularity=None) -> TrackEntry:
    return TrackEntry(uri=f"spotify:track:{track_id}", id=track_id, popularity=popularity)


def _install_signals(monkeypatch, *, artists, artist_tracks, playlists, playlist_tracks, saved):
    """Replace the Spotify fetchers used by the pool builder."""

    def top_artists(credential, limit, *, cancel=None):
        if isinstance(artists, Exception):
            raise artists
        return list(artists)

    def artist_top(credential, artist_id, *, cancel=None):
        result = artist_tracks.get(artist_id, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    def user_playlists(credential, limit, *, cancel=None):
        return list(playlists)

    def playlist_items(credential, playlist_id, limit, *, cancel=None):
        assert limit == 30
        result = playlist_tracks.get(playlist_id, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    def saved_tracks(credential, limit, *, cancel=None):
        if isinstance(saved, Exception):
            raise saved
        return list(saved)

    monkeypatch.setattr("blockylist.engine.candidate_pool.fetch_top_artists", top_artists)
    monkeypatch.setattr("blockylist.engine.candidate_pool.fetch_artist_top_tracks", artist_top)
    monkeypatch.setattr("blockylist.engine.candidate_pool.fetch_user_playlists", user_playlists)
    monkeypatch.setattr("blockylist.engine.candidate_pool.fetch_playlist_tracks", playlist_items)
    monkeypatch.setattr("blockylist.engine.candidate_pool.fetch_saved_tracks", saved_tracks)


def test_merge_adds_weights_and_keeps_first_popularity() -> None:
    pool = CandidatePool()
    pool.merge("u1", 70, 0.8)
    pool.merge("u1", 20, 0.8)
    pool.merge("u1", 10, 0.3)

    entry = pool.get("u1")
    assert entry.popularity == 70
    assert entry.weight == pytest.approx(1.9)


def test_missing_or_zero_popularity_defaults_to_50() -> None:
    pool = CandidatePool()
    pool.merge_tracks([_t("a", None), _t("b", 0), _t("c", 12)], 0.3)

    assert [c.popularity for c in pool.candidates()] == [50, 50, 12]


def test_pool_merges_signals_and_excludes_saved(monkeypatch, credential) -> None:
    _install_signals(
        monkeypatch,
        artists=[ArtistInfo(id="ar1"), ArtistInfo(id="ar2")],
        artist_tracks={
            "ar1": [_t("shared", 80), _t("a1", 60)],
            "ar2": [_t("shared", 80), _t("saved", 90)],
        },
        playlists=[PlaylistInfo(id="pl1", name="P1")],
        playlist_tracks={"pl1": [_t("shared", 30), _t("p1")]},
        saved=[_t("saved")],
    )

    pool = build_candidate_pool(credential, random.Random(0), max_workers=4)

    assert pool.get("spotify:track:saved") is None
    shared = pool.get("spotify:track:shared")
    # Two artist hits plus one playlist hit; artists merge before playlists.
    assert shared.weight == pytest.approx(0.8 + 0.8 + 0.3)
    assert shared.popularity == 80
    assert pool.get("spotify:track:p1").weight == pytest.approx(0.3)
    assert pool.get("spotify:track:p1").popularity == 50
    assert len(pool) == 3


def test_pool_samples_at_most_ten_artists_and_eight_playlists(monkeypatch, credential) -> None:
    requested_artists = []
    requested_playlists = []

    artists = [ArtistInfo(id=f"ar{i}") for i in range(50)]
    playlists = [PlaylistInfo(id=f"pl{i}", name=str(i)) for i in range(50)]
    _install_signals(
        monkeypatch,
        artists=artists,
        artist_tracks={a.id: [_t(a.id)] for a in artists},
        playlists=playlists,
        playlist_tracks={p.id: [_t(p.id)] for p in playlists},
        saved=[],
    )

    pool = build_candidate_pool(credential, random.Random(3))

    for c in pool.candidates():
        track_id = c.uri.rsplit(":", 1)[-1]
        (requested_artists if track_id.startswith("ar") else requested_playlists).append(track_id)
    assert len(requested_artists) == 10
    assert len(requested_playlists) == 8


def test_failed_sub_fetch_contributes_nothing(monkeypatch, credential) -> None:
    _install_signals(
        monkeypatch,
        artists=[ArtistInfo(id="ar1"), ArtistInfo(id="broken")],
        artist_tracks={"ar1": [_t("a1")], "broken": RemoteUnavailable("500")},
        playlists=[PlaylistInfo(id="pl1", name="P1")],
        playlist_tracks={"pl1": RemoteUnavailable("timeout")},
        saved=RemoteUnavailable("saved tracks down"),
    )

    pool = build_candidate_pool(credential, random.Random(1))

    assert [c.uri for c in pool.candidates()] == ["spotify:track:a1"]


def test_empty_pool_after_exclusion_raises_no_candidates(monkeypatch, credential) -> None:
    _install_signals(
        monkeypatch,
        artists=[ArtistInfo(id="ar1")],
        artist_tracks={"ar1": [_t("a1")]},
        playlists=[],
        playlist_tracks={},
        saved=[_t("a1")],
    )

    with pytest.raises(NoCandidates):
        build_candidate_pool(credential, random.Random(0))


def test_unauthorized_aborts_pool_build(monkeypatch, credential) -> None:
    _install_signals(
        monkeypatch,
        artists=Unauthorized("expired"),
        artist_tracks={},
        playlists=[],
        playlist_tracks={},
        saved=[],
    )

    with pytest.raises(Unauthorized):
        build_candidate_pool(credential, random.Random(0))


def test_same_seed_gives_same_pool(monkeypatch, credential) -> None:
    artists = [ArtistInfo(id=f"ar{i}") for i in range(30)]
    _install_signals(
        monkeypatch,
        artists=artists,
        artist_tracks={a.id: [_t(a.id, 40)] for a in artists},
        playlists=[],
        playlist_tracks={},
        saved=[],
    )

    first = build_candidate_pool(credential, random.Random(9)).candidates()
    second = build_candidate_pool(credential, random.Random(9)).candidates()

    assert [c.uri for c in first] == [c.uri for c in second]
