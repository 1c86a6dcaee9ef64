"""Configuration management for tubemirror."""
# Created: 2026-10-18

from .settings import Settings, YouTubeSettings, StoreSettings, load_settings, save_settings

__all__ = ['Settings', 'YouTubeSettings', 'StoreSettings', 'load_settings', 'save_settings']
