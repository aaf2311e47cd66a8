"""Test track classification and scanning"""

import pytest

from spot_auditor.audit.classifier import UNPLAYABLE_REASON, classify_track
from spot_auditor.audit.scanner import scan_tracks
from spot_auditor.core.exceptions import SpotifyError


class TestClassifier:
    """Test classify_track"""

    def test_playable_track_is_fine(self, make_track):
        assert classify_track(make_track(is_playable=True)) is None

    def test_missing_flag_is_fine(self, make_track):
        """No market in the request means no flag, which is not a problem"""
        assert classify_track(make_track(is_playable=None)) is None

    def test_unplayable_track(self, make_track):
        problem = classify_track(make_track(is_playable=False, markets=['US', 'CA']))

        assert problem is not None
        assert problem.id == '4cOdK2wGLETKBW3PvgPWqT'
        assert problem.reason == UNPLAYABLE_REASON
        assert problem.available_markets_count == 2
        assert problem.external_url.endswith('4cOdK2wGLETKBW3PvgPWqT')

    def test_unplayable_without_id(self, make_track):
        problem = classify_track(make_track(track_id=None, is_playable=False, is_local=True))
        assert problem.id == 'unknown'


class TestScanTracks:
    """Test scan_tracks"""

    def test_mixed_source(self, make_track):
        """One playable, one removed globally, one geo-locked"""
        tracks = [
            make_track(track_id='ok1', is_playable=True),
            make_track(track_id='dead1', is_playable=False, markets=[]),
            make_track(track_id='geo1', is_playable=False, markets=['JP', 'KR']),
        ]

        summary = scan_tracks(tracks)

        assert summary.total_tracks_scanned == 3
        assert [p.id for p in summary.problematic_tracks] == ['dead1', 'geo1']
        assert summary.problematic_tracks[0].status == '[REMOVED GLOBALLY]'
        assert summary.problematic_tracks[1].status == '[GEO-LOCKED] (Available in 2 markets)'

    def test_empty_source(self):
        summary = scan_tracks([])

        assert summary.total_tracks_scanned == 0
        assert summary.problematic_tracks == []

    def test_consumes_generator_once(self, make_track):
        consumed = []

        def source():
            for i in range(4):
                consumed.append(i)
                yield make_track(track_id=f't{i}', is_playable=i % 2 == 0)

        summary = scan_tracks(source())

        assert consumed == [0, 1, 2, 3]
        assert summary.total_tracks_scanned == 4
        assert summary.problem_count == 2

    def test_source_failure_propagates(self, make_track):
        def source():
            yield make_track(is_playable=False)
            raise SpotifyError("Failed to fetch saved tracks")

        with pytest.raises(SpotifyError):
            scan_tracks(source())


class TestMarketLookup:
    """Test scan_tracks filling in markets for flagged tracks"""

    def test_lookup_turns_flag_into_geo_lock(self, make_track):
        lookups = []

        def lookup(track_id):
            lookups.append(track_id)
            return make_track(track_id=track_id, markets=['JP', 'KR'])

        summary = scan_tracks(
            [make_track(track_id='ok', is_playable=True), make_track(track_id='geo', is_playable=False)],
            market_lookup=lookup,
        )

        assert lookups == ['geo']
        assert summary.problematic_tracks[0].status == '[GEO-LOCKED] (Available in 2 markets)'

    def test_lookup_with_no_markets_stays_removed(self, make_track):
        summary = scan_tracks(
            [make_track(track_id='dead', is_playable=False)],
            market_lookup=lambda track_id: make_track(track_id=track_id, markets=[]),
        )

        assert summary.problematic_tracks[0].status == '[REMOVED GLOBALLY]'

    def test_no_lookup_when_markets_present(self, make_track):
        def lookup(track_id):
            raise AssertionError("lookup should not be called")

        summary = scan_tracks(
            [make_track(track_id='geo', is_playable=False, markets=['US'])],
            market_lookup=lookup,
        )

        assert summary.problematic_tracks[0].available_markets_count == 1

    def test_no_lookup_without_id(self, make_track):
        def lookup(track_id):
            raise AssertionError("lookup should not be called")

        summary = scan_tracks(
            [make_track(track_id=None, is_playable=False, is_local=True)],
            market_lookup=lookup,
        )

        assert summary.problematic_tracks[0].id == 'unknown'

    def test_lookup_failure_propagates(self, make_track):
        def lookup(track_id):
            raise SpotifyError("Failed to fetch track")

        with pytest.raises(SpotifyError):
            scan_tracks([make_track(is_playable=False)], market_lookup=lookup)
