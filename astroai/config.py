# config.py
# Environment, logging and upstream endpoints for the AstroAI backend.

import logging
import os
from typing import List

from dotenv import load_dotenv

# -----------------------------------------------------------------------------
# 0. Environment & Logging
# -----------------------------------------------------------------------------
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s [%(levelname)s] %(message)s",
)

# -----------------------------------------------------------------------------
# 1. Configuration
# -----------------------------------------------------------------------------
NASA_API_KEY = os.getenv("NASA_API_KEY", "DEMO_KEY")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
PORT = int(os.getenv("PORT", "5000"))


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# Vite dev server by default
CORS_ORIGINS = _split_origins(
    os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
)

USER_AGENT = "astroai-server/1.0"

# Base URLs
NASA_BASE = "https://api.nasa.gov"
MARS_PHOTOS_BASE = f"{NASA_BASE}/mars-photos/api/v1"
INSIGHT_WEATHER_URL = f"{NASA_BASE}/insight_weather/"
APOD_URL = f"{NASA_BASE}/planetary/apod"
NEO_FEED_URL = f"{NASA_BASE}/neo/rest/v1/feed"
IMAGES_API_BASE = "https://images-api.nasa.gov"
GEMINI_BASE = "https://generativelanguage.googleapis.com/v1beta"

# Mars daily fallback chain
PRIMARY_ROVER = "perseverance"
SECONDARY_ROVER = "curiosity"
MARS_SEARCH_TOPIC = "Mars surface"
# Skips rover selfies, hardware close-ups and mock-ups in the image library.
MARS_IMAGE_EXCLUDE_PATTERN = (
    r"(rover|curiosity|perseverance|opportunity|spirit|self\-?portrait|selfie"
    r"|wheel|mock|mahli|drill|instrument|mastcam)"
)

CHAT_SYSTEM_INSTRUCTION = (
    "You are an AI space expert assistant. Answer clearly and concisely."
)
