import os
from dotenv import load_dotenv

load_dotenv()


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")

# Hosted model settings
LLM_MODEL = os.getenv("LLM_MODEL", "claude-sonnet-4-5")
LLM_MAX_TOKENS = _get_int("LLM_MAX_TOKENS", 512)
LLM_TIMEOUT_SECONDS = _get_float("LLM_TIMEOUT_SECONDS", 30.0)

DATABASE_PATH = os.getenv("DATABASE_PATH", "tasks.db")

CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
