"""Application configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env so GOOGLE_CLIENT_SECRET and other vars are available
load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_list(name: str, default: str = "") -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Storage: "local" or "supabase"
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")

# Local storage path (used when STORAGE_BACKEND=local)
LOCAL_STORAGE_PATH = Path(os.getenv("LOCAL_STORAGE_PATH", "public/artworks")).resolve()

# Base URL for serving local files (e.g. http://localhost:8000/artworks)
LOCAL_FILES_BASE_URL = os.getenv("LOCAL_FILES_BASE_URL", "").rstrip("/")

# Supabase (used when STORAGE_BACKEND=supabase)
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_BUCKET = os.getenv("SUPABASE_UPLOAD_BUCKET", "artworks")

MAX_FILE_SIZE_IMAGE = int(os.getenv("MAX_FILE_SIZE_IMAGE", 10 * 1024 * 1024))  # 10 MB

# Comma-separated emails allowed to sign in
ALLOWED_EMAILS = os.getenv("ALLOWED_EMAILS", "")

# Google OAuth
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")
GOOGLE_REDIRECT_URI = os.getenv("GOOGLE_REDIRECT_URI", "http://localhost:8000/api/auth/google")
OAUTH_TIMEOUT_SECONDS = float(os.getenv("OAUTH_TIMEOUT_SECONDS", "10"))

# Session (signed JWT in a cookie)
SESSION_SECRET = os.getenv("SESSION_SECRET", "change-me-in-production")
SESSION_ALGORITHM = os.getenv("SESSION_ALGORITHM", "HS256")
SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", "10080"))  # 7 days
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "gallery_session")
SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE")

LOGIN_REDIRECT_PATH = os.getenv("LOGIN_REDIRECT_PATH", "/upload")

CORS_ORIGINS = _env_list("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
