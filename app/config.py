# app/config.py
"""Environment-driven settings shared by the API, the LLM client and history."""
from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
MODEL = os.getenv("VIBE_PLANNER_MODEL", "gpt-4o-mini")

HISTORY_PATH = os.getenv("VIBE_PLANNER_HISTORY_PATH") or None
try:
    HISTORY_LIMIT = max(1, int(os.getenv("VIBE_PLANNER_HISTORY_LIMIT", "50")))
except ValueError:
    HISTORY_LIMIT = 50

# Map and ride-hailing links are scoped to the city the planner serves.
DEFAULT_CITY = "Accra, Ghana"


def allowed_origins() -> List[str]:
    raw_origins = os.getenv("VIBE_PLANNER_ALLOWED_ORIGINS") or "*"
    origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
    return origins or ["*"]
