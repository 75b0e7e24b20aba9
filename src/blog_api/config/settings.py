"""
Configuration settings for the Blog Posts API
"""

import os
import logging

logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.getenv("ENV", "PROD")  # PROD, QA or TEST
DATABASE_URL = os.getenv("DATABASE_URL", "postgresql://localhost/blog-app")
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "memory://test-blog-app")
PORT = int(os.getenv("PORT", 8080))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Postgres pool sizing
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_COMMAND_TIMEOUT = float(os.getenv("DB_COMMAND_TIMEOUT", 60))

# CORS settings
ALLOWED_ORIGINS = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()]

if ENV not in ("PROD", "QA", "TEST"):
    logger.warning(f"Unknown ENV value '{ENV}' - expected PROD, QA or TEST")

if DB_POOL_MIN_SIZE > DB_POOL_MAX_SIZE:
    raise ValueError("DB_POOL_MIN_SIZE must not exceed DB_POOL_MAX_SIZE")
