from fastapi import FastAPI

from blockylist.api.blocklists.routes import router as blocklists_router
from blockylist.api.health import router as health_router
from blockylist.api.spotify.routes import router as spotify_router
from blockylist.core import configure_logging

configure_logging()

app = FastAPI(
    title="Blockylist API",
    version="0.1.0",
    description="Build Spotify playlists out of podcast and song blocks.",
)

app.include_router(health_router, tags=["health"])

# Blocklist documents and materialization
app.include_router(blocklists_router, prefix="/blocklists", tags=["blocklists"])

# Pickers backing the block editor
app.include_router(spotify_router, prefix="/spotify", tags=["spotify"])
