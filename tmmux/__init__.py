"""Stream buffers, section carousels, tree models, playlists and IPC helpers for a transport stream multiplexer."""

__version__ = "0.1.0"