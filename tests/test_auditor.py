"""Test the Auditor facade against a fake SpotifyClient"""

import pytest

from spot_auditor.audit import Auditor
from spot_auditor.core.exceptions import InvalidIdentifierError


PLAYLIST_ID = '37i9dQZF1DXcBWIGoYBM5M'
TRACK_ID = '4uLU6hMCjMI75M1A2tKUQC'


class TestAuditor:
    """Test operations end to end down to the client"""

    def test_scan_liked_songs_uses_market(self, mock_client, make_track_data):
        mock_client.iter_saved_track_items.return_value = iter([
            {'track': make_track_data(track_id='ok', is_playable=True)},
            {'track': make_track_data(track_id='bad', is_playable=False)},
            {'track': None},
        ])
        mock_client.track.return_value = make_track_data(track_id='bad', markets=['JP'])

        summary = Auditor(mock_client, market='DE').scan_liked_songs()

        mock_client.iter_saved_track_items.assert_called_once_with(market='DE')
        assert summary.total_tracks_scanned == 2
        assert [p.id for p in summary.problematic_tracks] == ['bad']

    def test_scan_playlist_skips_non_tracks(self, mock_client, make_track_data):
        mock_client.iter_playlist_items.return_value = iter([
            {'track': make_track_data(track_id='bad', is_playable=False)},
            {'track': {'id': 'ep', 'type': 'episode', 'name': 'Pod'}},
            {'track': None},
        ])
        mock_client.track.return_value = make_track_data(track_id='bad', markets=[])

        summary = Auditor(mock_client).scan_playlist(f'spotify:playlist:{PLAYLIST_ID}')

        mock_client.iter_playlist_items.assert_called_once_with(PLAYLIST_ID, market='from_token')
        assert summary.total_tracks_scanned == 1
        assert summary.problem_count == 1

    def test_scan_looks_up_markets_for_flagged_tracks(self, mock_client, make_track_data):
        """Market-filtered pages carry no available_markets, so geo-locks need a lookup"""
        mock_client.iter_saved_track_items.return_value = iter([
            {'track': make_track_data(track_id='ok', is_playable=True)},
            {'track': make_track_data(track_id='geo', is_playable=False)},
        ])
        mock_client.track.return_value = make_track_data(track_id='geo', markets=['JP', 'KR', 'TW'])

        summary = Auditor(mock_client).scan_liked_songs()

        mock_client.track.assert_called_once_with('geo')
        problem = summary.problematic_tracks[0]
        assert problem.available_markets_count == 3
        assert problem.status == '[GEO-LOCKED] (Available in 3 markets)'

    def test_scan_playlist_rejects_bad_id(self, mock_client):
        with pytest.raises(InvalidIdentifierError):
            Auditor(mock_client).scan_playlist('bad id')
        mock_client.iter_playlist_items.assert_not_called()

    def test_track_wrapper_sees_tracks(self, mock_client, make_track_data):
        mock_client.iter_saved_track_items.return_value = iter([{'track': make_track_data()}])
        seen = []

        def wrapper(tracks):
            for track in tracks:
                seen.append(track.spotify_id)
                yield track

        Auditor(mock_client, track_wrapper=wrapper).scan_liked_songs()

        assert seen == ['4cOdK2wGLETKBW3PvgPWqT']

    def test_inspect_track(self, mock_client, make_track_data):
        mock_client.track.return_value = make_track_data(
            track_id=TRACK_ID, markets=['US', 'GB'], isrc='USRC1'
        )

        info = Auditor(mock_client).inspect_track(f'https://open.spotify.com/track/{TRACK_ID}')

        mock_client.track.assert_called_once_with(TRACK_ID)
        assert info.id == TRACK_ID
        assert info.available_markets == ('US', 'GB')
        assert info.external_ids == {'isrc': 'USRC1'}

    def test_inspect_rejects_playlist_uri(self, mock_client):
        with pytest.raises(InvalidIdentifierError):
            Auditor(mock_client).inspect_track(f'spotify:playlist:{PLAYLIST_ID}')
        mock_client.track.assert_not_called()

    def test_list_playlists(self, mock_client):
        mock_client.iter_user_playlists.return_value = iter([
            {'id': 'p1', 'name': 'One', 'tracks': {'total': 3}, 'owner': {'display_name': 'Me'}},
            None,
            {'id': 'p2', 'name': 'Two', 'tracks': {'total': 0}, 'owner': {'id': 'them'}},
        ])

        playlists = Auditor(mock_client).list_playlists()

        assert [p.id for p in playlists] == ['p1', 'p2']
        assert playlists[1].owner_name == 'them'

    def test_sync_playlist(self, mock_client, make_track_data):
        mock_client.saved_tracks_total.side_effect = [5, 7]
        mock_client.iter_playlist_items.return_value = iter([
            {'track': make_track_data(track_id='a')},
            {'track': make_track_data(track_id='b')},
        ])

        report = Auditor(mock_client).sync_playlist_to_liked(PLAYLIST_ID)

        mock_client.saved_tracks_add.assert_called_once_with(['a', 'b'])
        assert report.estimated_added == 2

    def test_deduplicate_fetches_without_market(self, mock_client, make_track_data):
        mock_client.iter_saved_track_items.return_value = iter([
            {'track': make_track_data(track_id='live', isrc='X', markets=['US'])},
            {'track': make_track_data(track_id='dead', isrc='X', markets=[])},
        ])

        report = Auditor(mock_client, market='US').deduplicate_liked_songs()

        mock_client.iter_saved_track_items.assert_called_once_with(market=None)
        mock_client.saved_tracks_delete.assert_called_once_with(['dead'])
        assert report.removed_track_ids == ['dead']
