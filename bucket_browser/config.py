"""
config.py — Environment configuration for the bucket browser.
All values are read once at import time.
"""

import os

# --- MinIO / S3 ---
MINIO_ENDPOINT = os.getenv("MINIO_ENDPOINT", "http://minio:9000")
MINIO_PUBLIC_ENDPOINT = os.getenv("MINIO_PUBLIC_ENDPOINT", "")
MINIO_ACCESS_KEY = os.getenv("MINIO_ACCESS_KEY", "minioadmin")
MINIO_SECRET_KEY = os.getenv("MINIO_SECRET_KEY", "minioadmin")
MINIO_REGION = os.getenv("MINIO_REGION", "us-east-1")
BUCKET_NAME = os.getenv("MINIO_BUCKET_NAME", "files")

# --- HTTP ---
ALLOW_ORIGINS = os.getenv("ALLOW_ORIGINS", "http://localhost:5173")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))

# --- Behaviour ---
PRESIGN_TTL_SECONDS = int(os.getenv("PRESIGN_TTL_SECONDS", "3600"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(500 * 1024 * 1024)))
STREAM_CHUNK_SIZE = int(os.getenv("STREAM_CHUNK_SIZE", str(64 * 1024)))
HIDE_SENTINELS = os.getenv("HIDE_SENTINELS", "true").lower() in {"1", "true", "yes", "on"}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def allowed_origins():
    return [o.strip() for o in ALLOW_ORIGINS.split(",") if o.strip()]
