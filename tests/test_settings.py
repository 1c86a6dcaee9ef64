"""Tests for settings configuration.

Tests the Settings dataclasses, YAML loading and environment overrides.
"""
# Created: 2026-10-18

import pytest
import yaml
from pathlib import Path

from tubemirror.config.settings import (
    Settings,
    YouTubeSettings,
    StoreSettings,
    load_settings,
    save_settings
)
from tubemirror.errors import ConfigurationError, SelectorConflict
from tubemirror.models import Channel, User


ENV_VARS = ['YOUTUBE_API_KEY', 'YOUTUBE_USERNAME', 'YOUTUBE_CHANNEL_ID',
            'YOUTUBE_PLAYLISTS', 'TUBEMIRROR_DB']


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of these tests."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestSettingsDataclasses:
    """Test the settings sections."""

    def test_defaults(self):
        settings = Settings()

        assert settings.youtube.api_key == ""
        assert settings.youtube.username == ""
        assert settings.youtube.channel_id == ""
        assert settings.youtube.playlists == ""
        assert settings.store.database.endswith("videos.db")

    def test_from_dict(self):
        settings = Settings.from_dict({
            'youtube': {'api_key': 'k', 'channel_id': 'UC1', 'unknown': 'ignored'},
            'store': {'database': '/tmp/v.db'},
        })

        assert settings.youtube.api_key == 'k'
        assert settings.youtube.channel_id == 'UC1'
        assert settings.store.database == '/tmp/v.db'
        assert not hasattr(settings.youtube, 'unknown')

    def test_from_dict_rejects_non_mapping_section(self):
        with pytest.raises(ConfigurationError):
            Settings.from_dict({'youtube': ['not', 'a', 'mapping']})

    def test_merge_only_overrides_set_values(self):
        base = Settings(youtube=YouTubeSettings(api_key='base', username='bob'))
        other = Settings(youtube=YouTubeSettings(api_key='other'), store=StoreSettings(database=''))

        base.merge(other)

        assert base.youtube.api_key == 'other'
        assert base.youtube.username == 'bob'
        assert base.store.database.endswith("videos.db")


class TestAccountRef:
    """Test Settings.account_ref."""

    def test_username(self):
        settings = Settings(youtube=YouTubeSettings(username=' bob '))
        assert settings.account_ref() == User('bob')

    def test_channel(self):
        settings = Settings(youtube=YouTubeSettings(channel_id='UC1'))
        assert settings.account_ref() == Channel('UC1')

    def test_neither(self):
        with pytest.raises(SelectorConflict):
            Settings().account_ref()

    def test_both(self):
        settings = Settings(youtube=YouTubeSettings(username='bob', channel_id='UC1'))
        with pytest.raises(SelectorConflict, match="only one"):
            settings.account_ref()

    def test_selector_conflict_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            Settings().account_ref()


class TestLoadSettings:
    """Test load_settings and save_settings."""

    def test_missing_config_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path)
        assert settings.youtube.api_key == ""

    def test_loads_yaml(self, tmp_path):
        (tmp_path / "config.yaml").write_text(yaml.safe_dump({
            'youtube': {'api_key': 'from-file', 'username': 'bob', 'playlists': 'uploads'},
        }))

        settings = load_settings(tmp_path)

        assert settings.youtube.api_key == 'from-file'
        assert settings.youtube.username == 'bob'
        assert settings.youtube.playlists == 'uploads'

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text(yaml.safe_dump({
            'youtube': {'api_key': 'from-file'},
        }))
        monkeypatch.setenv('YOUTUBE_API_KEY', 'from-env')
        monkeypatch.setenv('YOUTUBE_CHANNEL_ID', 'UCenv')
        monkeypatch.setenv('YOUTUBE_PLAYLISTS', 'likes')
        monkeypatch.setenv('TUBEMIRROR_DB', '/tmp/env.db')

        settings = load_settings(tmp_path)

        assert settings.youtube.api_key == 'from-env'
        assert settings.youtube.channel_id == 'UCenv'
        assert settings.youtube.playlists == 'likes'
        assert settings.store.database == '/tmp/env.db'

    def test_environment_channel_replaces_file_username(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text(yaml.safe_dump({
            'youtube': {'username': 'bob'},
        }))
        monkeypatch.setenv('YOUTUBE_CHANNEL_ID', 'UCenv')

        settings = load_settings(tmp_path)

        assert settings.account_ref() == Channel('UCenv')

    def test_environment_username_replaces_file_channel(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text(yaml.safe_dump({
            'youtube': {'channel_id': 'UCfile'},
        }))
        monkeypatch.setenv('YOUTUBE_USERNAME', 'alice')

        settings = load_settings(tmp_path)

        assert settings.account_ref() == User('alice')

    def test_both_selectors_in_environment_conflict(self, tmp_path, monkeypatch):
        monkeypatch.setenv('YOUTUBE_USERNAME', 'alice')
        monkeypatch.setenv('YOUTUBE_CHANNEL_ID', 'UCenv')

        with pytest.raises(SelectorConflict):
            load_settings(tmp_path).account_ref()

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "config.yaml").write_text("youtube: [unclosed")

        with pytest.raises(ConfigurationError):
            load_settings(tmp_path)

    def test_non_mapping_yaml(self, tmp_path):
        (tmp_path / "config.yaml").write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError):
            load_settings(tmp_path)

    def test_save_and_reload(self, tmp_path):
        settings = Settings(
            youtube=YouTubeSettings(api_key='k', channel_id='UC1', playlists='uploads,likes'),
            store=StoreSettings(database=str(tmp_path / 'v.db'))
        )

        path = save_settings(settings, tmp_path / "cfg")
        loaded = load_settings(tmp_path / "cfg")

        assert path == tmp_path / "cfg" / "config.yaml"
        assert loaded.youtube == settings.youtube
        assert loaded.store == settings.store
