"""Configuration for the MPN resolver."""

import os

# Server settings
HTTP_PORT = int(os.getenv("HTTP_PORT", "8080"))
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "100"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Rule loading
MPN_RULES_PATH = os.getenv("MPN_RULES_PATH", "")  # Extra JSON rule tables, merged over the bundled ones
MPN_ENABLE_FALLBACK = os.getenv("MPN_ENABLE_FALLBACK", "false").lower() in ("1", "true", "yes", "on")

# Classification cache (0 disables it)
MPN_CLASSIFY_CACHE_SIZE = int(os.getenv("MPN_CLASSIFY_CACHE_SIZE", "0"))
MPN_CLASSIFY_CACHE_TTL = float(os.getenv("MPN_CLASSIFY_CACHE_TTL", "3600"))

# Request limits
MAX_BOM_PARTS = int(os.getenv("MAX_BOM_PARTS", "500"))
MAX_MPN_LENGTH = 100
MAX_TEXT_LENGTH = 2000
