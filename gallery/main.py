import logging
import mimetypes

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse

from gallery.config import CORS_ORIGINS, LOG_LEVEL, STORAGE_BACKEND
from gallery.routers import artworks, auth
from gallery.storage import InvalidStorageKey, get_storage

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

APP_VERSION = "0.1.0"

app = FastAPI(
    title="Artwork Gallery API",
    description="Image gallery with allow-listed Google sign-in",
    version=APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(artworks.router)


@app.get("/")
async def root():
    return {"message": "Artwork Gallery API", "version": APP_VERSION}


# Serve local artworks when STORAGE_BACKEND=local (paths are /artworks/...)
if STORAGE_BACKEND == "local":
    from gallery.storage.local_storage import LocalStorage

    @app.get("/artworks/{name}")
    async def serve_artwork(name: str, storage: LocalStorage = Depends(get_storage)):
        """Serve a file from the local artworks directory. Name must be directly under the root."""
        try:
            full_path = storage.path_for(name)
        except InvalidStorageKey:
            return PlainTextResponse("Forbidden", status_code=403)
        if not full_path.is_file():
            return PlainTextResponse("Not Found", status_code=404)
        # Anything that is not an image is served as an opaque download
        media_type, _ = mimetypes.guess_type(full_path.name)
        if not media_type or not media_type.startswith("image/"):
            media_type = "application/octet-stream"
        return FileResponse(
            full_path,
            media_type=media_type,
            headers={"X-Content-Type-Options": "nosniff"},
        )
