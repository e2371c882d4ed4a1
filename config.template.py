# Book Soundtrack Toolkit Configuration Template
# Copy this file to config.py and update with your settings

# ========== DATA FILES ==========
SONGS_CSV_PATH = "data/songs.csv"     # Hand-curated song mentions (input)
SONGS_JSON_PATH = "data/songs.json"   # Records read by the timeline page

# ========== ITUNES SEARCH API ==========
ITUNES_SEARCH_URL = "https://itunes.apple.com/search"
ITUNES_COUNTRY = None           # Storefront code, e.g. "us" (None = API default)
ITUNES_RESULT_LIMIT = 5         # Candidates requested per search (1-200)
ITUNES_TIMEOUT = 10.0           # Seconds before a search request is abandoned

# ========== ENRICHMENT PACING ==========
# Each run stops after QUERY_BUDGET searches; run again to continue.

QUERY_BUDGET = 15               # Maximum searches per enrichment run
QUERY_DELAY = 0.5               # Seconds between searches
ARTWORK_SIZE = 1000             # Pixel size of the album art stored in songs.json

# ========== PLAYBACK ==========
PRESERVE_MUTE = False           # Keep mute on when moving to the next song

# ========== LOGGING SETTINGS ==========
LOG_LEVEL = "INFO"              # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"

# ========== USER AGENT ==========
# Sent with every search request
USER_AGENT = {
    "app_name": "book-soundtrack-enricher",
    "version": "1.0",
    "contact": "your.email@example.com"  # UPDATE THIS
}
