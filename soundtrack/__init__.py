"""
Book Soundtrack Toolkit

Core modules for turning a curated CSV of song mentions into an enriched
songs.json and presenting it as a browsable timeline.
"""

__version__ = "1.0.0"
__author__ = "Book Soundtrack Contributors"

from .config_manager import Config
from .models import SongEntry, SearchCandidate, MatchType

__all__ = ['Config', 'SongEntry', 'SearchCandidate', 'MatchType']
