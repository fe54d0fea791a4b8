import sys
from pathlib import Path

# Ensure the api/ directory is on sys.path so submodule imports resolve when
# served as a single file by a serverless runtime.
_api_dir = str(Path(__file__).resolve().parent)
if _api_dir not in sys.path:
    sys.path.insert(0, _api_dir)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routes.bookmarks import router as bookmarks_router

app = FastAPI(title="Smart Bookmark API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(bookmarks_router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
