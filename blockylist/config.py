from dotenv import load_dotenv
import os

load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


# Base & data directories
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.getenv("BLOCKYLIST_DATA_DIR", os.path.join(BASE_DIR, "data"))

# Blocklist document store
BLOCKLISTS_FILE = os.path.join(DATA_DIR, "blocklists.json")

# Spotify API constants
SPOTIFY_API_BASE = os.getenv("SPOTIFY_API_BASE", "https://api.spotify.com/v1")

# Bearer token used by the CLI; the HTTP API reads it from the request instead.
SPOTIFY_ACCESS_TOKEN = os.getenv("SPOTIFY_ACCESS_TOKEN")

SCOPES = [
    "user-read-private",
    "user-read-email",
    "playlist-modify-public",
    "playlist-modify-private",
    "user-library-read",
    "playlist-read-private",
    "user-top-read",
]

# Network behaviour
HTTP_TIMEOUT_SECONDS = _env_float("BLOCKYLIST_HTTP_TIMEOUT", 15.0)

# Upper bound on concurrent sub-fetches while building a recommendation pool
RECOMMENDER_MAX_WORKERS = _env_int("BLOCKYLIST_RECOMMENDER_MAX_WORKERS", 10)

# Whole-run deadline for one materialization; 0 disables it
MATERIALIZE_TIMEOUT_SECONDS = _env_float("BLOCKYLIST_MATERIALIZE_TIMEOUT", 300.0)

# Playlists created on Spotify are public unless the caller says otherwise
DEFAULT_PLAYLIST_PUBLIC = True
