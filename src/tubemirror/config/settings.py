"""Settings management for tubemirror.

Handles loading and merging configuration from the config file and the
environment.
"""
# Created: 2026-10-18

import os
from pathlib import Path
from typing import Dict, Any, Optional
import yaml
from dataclasses import dataclass, field

from ..errors import ConfigurationError, SelectorConflict
from ..models import AccountRef, Channel, User


DEFAULT_CONFIG_DIR = Path.home() / ".config" / "tubemirror"
DEFAULT_DATABASE = str(Path.home() / ".local" / "share" / "tubemirror" / "videos.db")


@dataclass
class YouTubeSettings:
    """YouTube API and account settings."""
    api_key: str = ""
    username: str = ""  # Fill only one of username / channel_id
    channel_id: str = ""
    playlists: str = ""  # Comma-separated playlist names, empty for all


@dataclass
class StoreSettings:
    """Video store settings."""
    database: str = DEFAULT_DATABASE


@dataclass
class Settings:
    """Main settings container."""
    youtube: YouTubeSettings = field(default_factory=YouTubeSettings)
    store: StoreSettings = field(default_factory=StoreSettings)

    SECTIONS = ('youtube', 'store')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Settings':
        """Create Settings from dictionary."""
        settings = cls()

        for section in cls.SECTIONS:
            values = data.get(section) or {}
            if not isinstance(values, dict):
                raise ConfigurationError(f"Config section '{section}' must be a mapping")
            target = getattr(settings, section)
            for key, value in values.items():
                if hasattr(target, key):
                    setattr(target, key, "" if value is None else str(value))

        return settings

    def merge(self, other: 'Settings') -> None:
        """Merge another Settings object into this one.

        Only non-empty values of ``other`` override.
        """
        for section in self.SECTIONS:
            self_section = getattr(self, section)
            other_section = getattr(other, section)

            for key in vars(other_section):
                value = getattr(other_section, key)
                if value:
                    setattr(self_section, key, value)

    def account_ref(self) -> AccountRef:
        """Build the account selector from username / channel id.

        Raises:
            SelectorConflict: If neither or both are set
        """
        username = self.youtube.username.strip()
        channel_id = self.youtube.channel_id.strip()

        if username and channel_id:
            raise SelectorConflict(
                "Please fill only one: YouTube username OR channel id"
            )
        if username:
            return User(username)
        if channel_id:
            return Channel(channel_id)
        raise SelectorConflict("A YouTube username or channel id is required")


def load_settings(config_dir: Optional[Path] = None) -> Settings:
    """Load settings from configuration files.

    Loads from multiple sources in order of precedence:
    1. Default settings (built-in)
    2. User config file
    3. Environment variables

    Args:
        config_dir: Optional config directory override

    Returns:
        Merged Settings object

    Raises:
        ConfigurationError: If the config file cannot be parsed
    """
    settings = Settings()

    if config_dir is None:
        config_dir = DEFAULT_CONFIG_DIR

    user_config_path = Path(config_dir) / "config.yaml"
    if user_config_path.exists():
        try:
            with open(user_config_path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load config {user_config_path}: {e}") from e
        if data:
            if not isinstance(data, dict):
                raise ConfigurationError(f"Config {user_config_path} must be a mapping")
            settings.merge(Settings.from_dict(data))

    # Override with environment variables
    if api_key := os.environ.get('YOUTUBE_API_KEY'):
        settings.youtube.api_key = api_key

    # A selector from the environment replaces the one from the file
    username = os.environ.get('YOUTUBE_USERNAME')
    channel_id = os.environ.get('YOUTUBE_CHANNEL_ID')
    if username or channel_id:
        settings.youtube.username = username or ''
        settings.youtube.channel_id = channel_id or ''

    if playlists := os.environ.get('YOUTUBE_PLAYLISTS'):
        settings.youtube.playlists = playlists

    if database := os.environ.get('TUBEMIRROR_DB'):
        settings.store.database = database

    return settings


def save_settings(settings: Settings, config_dir: Optional[Path] = None) -> Path:
    """Save settings to user config file.

    Args:
        settings: Settings object to save
        config_dir: Optional config directory override

    Returns:
        Path of the written config file
    """
    if config_dir is None:
        config_dir = DEFAULT_CONFIG_DIR
    config_dir = Path(config_dir)

    config_dir.mkdir(parents=True, exist_ok=True)

    data = {section: vars(getattr(settings, section)) for section in Settings.SECTIONS}

    config_path = config_dir / "config.yaml"
    with open(config_path, 'w') as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    return config_path
