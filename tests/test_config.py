"""Test configuration loading"""

from pathlib import Path

import pytest

from spot_auditor.core.config import DEFAULT_REDIRECT_URI, load_config
from spot_auditor.core.exceptions import ConfigError


ENV_VARS = (
    'SPOTIPY_CLIENT_ID',
    'SPOTIPY_CLIENT_SECRET',
    'SPOTIPY_REDIRECT_URI',
    'SPOT_AUDITOR_CACHE_PATH',
    'SPOT_AUDITOR_MARKET',
    'SPOT_AUDITOR_LOG_DIR',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path, mocker):
    """Isolate from the real environment, .env files and config.yaml"""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    mocker.patch('spot_auditor.core.config.load_dotenv')


def _write(tmp_path, text):
    path = tmp_path / 'config.yaml'
    path.write_text(text, encoding='utf-8')
    return path


class TestLoadConfig:
    """Test layering of defaults, file and environment"""

    def test_env_only(self, monkeypatch):
        monkeypatch.setenv('SPOTIPY_CLIENT_ID', 'env_id')
        monkeypatch.setenv('SPOTIPY_CLIENT_SECRET', 'env_secret')

        config = load_config()

        assert config.spotify.client_id == 'env_id'
        assert config.spotify.client_secret == 'env_secret'
        assert config.spotify.redirect_uri == DEFAULT_REDIRECT_URI
        assert config.spotify.market == 'from_token'
        assert config.spotify.open_browser is True
        assert config.spotify.cache_path == Path('.spotify_token_cache.json')
        assert config.logging.directory is None
        assert config.logging.level == 'INFO'

    def test_file_values(self, tmp_path):
        _write(tmp_path, (
            "spotify:\n"
            "  client_id: file_id\n"
            "  client_secret: file_secret\n"
            "  market: IT\n"
            "  open_browser: false\n"
            "logging:\n"
            f"  directory: {tmp_path / 'state'}\n"
            "  level: debug\n"
        ))

        config = load_config()

        assert config.spotify.client_id == 'file_id'
        assert config.spotify.market == 'IT'
        assert config.spotify.open_browser is False
        assert config.logging.directory == (tmp_path / 'state').resolve()
        assert config.logging.level == 'DEBUG'

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        _write(tmp_path, "spotify:\n  client_id: file_id\n  client_secret: file_secret\n  market: IT\n")
        monkeypatch.setenv('SPOTIPY_CLIENT_ID', 'env_id')
        monkeypatch.setenv('SPOT_AUDITOR_MARKET', 'US')

        config = load_config()

        assert config.spotify.client_id == 'env_id'
        assert config.spotify.client_secret == 'file_secret'
        assert config.spotify.market == 'US'

    def test_null_market_disables_filter(self, tmp_path):
        _write(tmp_path, "spotify:\n  client_id: a\n  client_secret: b\n  market: null\n")
        assert load_config().spotify.market is None

    def test_explicit_path(self, tmp_path):
        path = tmp_path / 'other.yaml'
        path.write_text("spotify:\n  client_id: a\n  client_secret: b\n", encoding='utf-8')

        assert load_config(path).spotify.client_id == 'a'

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / 'missing.yaml')


class TestConfigErrors:
    """Test validation failures"""

    def test_missing_client_id(self):
        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert exc_info.value.details['env_var'] == 'SPOTIPY_CLIENT_ID'

    def test_missing_client_secret(self, monkeypatch):
        monkeypatch.setenv('SPOTIPY_CLIENT_ID', 'id')

        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert exc_info.value.details['field'] == 'spotify.client_secret'

    def test_invalid_yaml(self, tmp_path):
        _write(tmp_path, "spotify: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config()

    def test_top_level_not_a_dict(self, tmp_path):
        _write(tmp_path, "- a\n- b\n")
        with pytest.raises(ConfigError, match="dictionary"):
            load_config()

    def test_section_not_a_dict(self, tmp_path):
        _write(tmp_path, "spotify: nope\n")
        with pytest.raises(ConfigError, match="'spotify'"):
            load_config()

    def test_invalid_log_level(self, tmp_path, monkeypatch):
        monkeypatch.setenv('SPOTIPY_CLIENT_ID', 'id')
        monkeypatch.setenv('SPOTIPY_CLIENT_SECRET', 'secret')
        _write(tmp_path, "logging:\n  level: LOUD\n")

        with pytest.raises(ConfigError, match="logging.level"):
            load_config()

    def test_invalid_open_browser(self, tmp_path):
        _write(tmp_path, "spotify:\n  client_id: a\n  client_secret: b\n  open_browser: maybe\n")
        with pytest.raises(ConfigError, match="open_browser"):
            load_config()
