import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .core.config import settings
from .core.errors import register_exception_handlers
from .db.session import sessionmanager
from .routers import account, channels, comments, health, tags, videos
from .uploads import MediaStore, ScratchStorage

logging.basicConfig(
    stream=sys.stdout, level=logging.DEBUG if settings.debug_logs else logging.INFO
)
logger = logging.getLogger(__name__)

origins = [
    settings.API_ORIGIN,
    "https://localhost:3000",
    "http://localhost:3000",
    "http://localhost:5173",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.scratch_storage = ScratchStorage(
        settings.SCRATCH_DIR,
        max_file_size=settings.MAX_UPLOAD_BYTES,
        max_files=settings.MAX_UPLOAD_FILES,
    ).open()
    app.state.media_store = MediaStore(settings.MEDIA_DIR).open()
    logger.info("Upload directories ready: %s, %s", settings.SCRATCH_DIR, settings.MEDIA_DIR)
    yield
    app.state.scratch_storage.close()
    await sessionmanager.close()


app = FastAPI(title="VidShare API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(dict.fromkeys(origins)),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(account.router, prefix=settings.API_PREFIX)
app.include_router(videos.router, prefix=settings.API_PREFIX)
app.include_router(channels.router, prefix=settings.API_PREFIX)
app.include_router(comments.router, prefix=settings.API_PREFIX)
app.include_router(tags.router, prefix=settings.API_PREFIX)
app.include_router(health.router)

app.mount("/media", StaticFiles(directory=settings.MEDIA_DIR, check_dir=False), name="media")


@app.get("/")
async def root():
    return {"message": "VidShare API"}
