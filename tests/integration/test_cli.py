"""Integration tests for the handset command-line tool."""

import pytest

from handset.cli import main, pick_variant, replay, summarize
from handset.domain import CharacterData
from handset.pipeline import build_variant
from handset.playback import PlaybackParams, PlayerState
from handset.session import new_tracing_session
from handset.storage import load_session_file, save_session_file

pytestmark = pytest.mark.integration


@pytest.fixture
def session_file(tmp_path, sample_variant, raw_stroke, glyph_box):
    record = new_tracing_session('Caveat', '09')
    unstarred = build_variant([raw_stroke], glyph_box, variant_id='plain')
    starred = build_variant([raw_stroke], glyph_box, variant_id='star', starred=True)
    record.set['1'] = CharacterData(variants=[sample_variant, unstarred])
    record.set['7'] = CharacterData(variants=[unstarred, starred])
    return save_session_file(record, tmp_path)


class TestPickVariant:

    def test_by_id(self, session_file):
        session = load_session_file(session_file)
        assert pick_variant(session, '1', 'plain').id == 'plain'

    def test_first_starred(self, session_file):
        session = load_session_file(session_file)
        assert pick_variant(session, '7').id == 'star'

    def test_first_when_none_starred(self, session_file):
        session = load_session_file(session_file)
        assert pick_variant(session, '1').id == 'v-test'

    def test_uncaptured_character(self, session_file):
        session = load_session_file(session_file)
        with pytest.raises(KeyError):
            pick_variant(session, '3')
        with pytest.raises(KeyError):
            pick_variant(session, '1', 'missing')


class TestCommands:

    def test_summary(self, session_file, capsys):
        assert main(['summary', str(session_file)]) == 0
        out = capsys.readouterr().out
        assert '2/10 captured' in out
        assert "'1': 2 variants (0 starred)" in out
        assert "'7': 2 variants (1 starred)" in out
        assert "'3'" not in out

    def test_replay(self, session_file, capsys):
        assert main(['replay', str(session_file), '--char', '1', '--variant', 'v-test']) == 0
        out = capsys.readouterr().out
        assert 'variant v-test' in out
        assert '600 ms recorded' in out
        assert 'revealed 100%' in out
        assert 'state completed' in out

    def test_replay_options(self, session_file, capsys):
        args = ['replay', str(session_file), '--char', '1', '--variant', 'v-test',
                '--speed', '2', '--width-gain', '80', '--size', '300', '200',
                '--pen-lift-gaps', '--ink-lag', '60']
        assert main(args) == 0
        assert '800 ms recorded' in capsys.readouterr().out

    def test_replay_unknown_character(self, session_file, capsys):
        assert main(['replay', str(session_file), '--char', '3']) == 2
        assert 'error' in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(['summary', str(tmp_path / 'nope.json')]) == 2

    def test_invalid_speed(self, session_file):
        assert main(['replay', str(session_file), '--char', '1', '--speed', '0']) == 2

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main([])


class TestHelpers:

    def test_summarize_lists_captured_only(self, session_file):
        lines = summarize(load_session_file(session_file))
        assert len(lines) == 3

    def test_replay_completes(self, sample_variant):
        player = replay(sample_variant, PlaybackParams(speed_multiplier=4))
        assert player.state is PlayerState.COMPLETED
        assert player.last_frame.revealed == 1.0
