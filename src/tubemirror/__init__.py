"""tubemirror - mirror YouTube playlists into a local video store."""
# Created: 2026-10-18

__version__ = "0.1.0"
