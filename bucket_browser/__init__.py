"""Web file browser over a single S3/MinIO bucket."""

__version__ = "0.1.0"
