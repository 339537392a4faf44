"""Last.fm web service signing and requests, data directories, and MP3 MusicBrainz IDs."""

__version__ = "1.0.0"
__all__ = ["abstract_type", "mbid", "misc", "ws"]