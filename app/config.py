import os
from dotenv import load_dotenv

load_dotenv()

GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
PORT = int(os.getenv("PORT", "3001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)
HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", "15"))
PROXY_URL = os.getenv("PROXY_URL", "")

# Site being scraped
TARGET_DOMAIN = os.getenv("TARGET_DOMAIN", "vilaviximoveis.com.br")
NAV_TIMEOUT_MS = int(os.getenv("NAV_TIMEOUT_MS", "30000"))
SETTLE_DELAY_MS = int(os.getenv("SETTLE_DELAY_MS", "3000"))

# Appended to scraped addresses before geocoding: "a,b,c"
GEOCODE_QUALIFIERS = [q.strip() for q in os.getenv("GEOCODE_QUALIFIERS", "ES,Brasil").split(",") if q.strip()]

SELIC_FALLBACK_RATE = float(os.getenv("SELIC_FALLBACK_RATE", "11.75"))
