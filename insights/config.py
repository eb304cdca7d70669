"""
Tunable constants for ingestion, profiling and the surrounding service.

Heuristic knobs live here (not inline) so their values stay visible and can
be changed without touching the algorithms that use them.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Profiling: only the first N rows are inspected to classify a column.
CLASSIFICATION_SAMPLE_SIZE = 5
NUMERIC_MIN_COUNT = 3
CATEGORICAL_MAX_UNIQUE = 10
CATEGORICAL_MAX_RATIO = 0.7

# Chart limits.
BAR_TOP_N = 10
PIE_TOP_N = 8
LINE_MAX_POINTS = 50
LINE_MIN_POINTS = 2
SCATTER_MAX_POINTS = 100

# Persistence.
STORED_ROW_LIMIT = 1000
PREVIEW_ROWS = 5

# Chat context.
CHAT_SAMPLE_ROWS = 5
CHAT_MAX_TOKENS = 1024
CHAT_MODEL = os.getenv("INSIGHTS_CHAT_MODEL", "llama-3.1-8b-instant")

MAX_UPLOAD_BYTES = int(os.getenv("INSIGHTS_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
CORS_ORIGINS = [o.strip() for o in os.getenv("INSIGHTS_CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("INSIGHTS_LOG_LEVEL", "INFO").upper()
