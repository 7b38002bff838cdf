"""Application settings from environment."""
import os
from functools import lru_cache


@lru_cache
def get_settings() -> "Settings":
    return Settings()


def _float_env(name: str, default: float, low: float, high: float) -> float:
    raw = os.getenv(name, "").strip()
    try:
        return max(low, min(high, float(raw))) if raw else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


class Settings:
    """Central config. Load .env in main/run_api before using. Values are @property so they read env at access time."""

    # Gemini
    @property
    def google_api_key(self) -> str:
        return os.getenv("GOOGLE_API_KEY", "").strip()

    @property
    def gemini_model(self) -> str:
        return (os.getenv("GEMINI_MODEL", "") or "").strip() or "gemini-2.5-flash"

    @property
    def generation_timeout_seconds(self) -> float:
        return _float_env("GENERATION_TIMEOUT_SECONDS", 60.0, 1.0, 600.0)

    # Server
    @property
    def host(self) -> str:
        return os.getenv("HOST", "127.0.0.1").strip()

    @property
    def port(self) -> int:
        return _int_env("PORT", 3001)

    @property
    def frontend_url(self) -> str:
        return os.getenv("FRONTEND_URL", "").strip() or "http://localhost:5173"

    # CORS: comma-separated origins; the first one is the front-end
    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.frontend_url.split(",") if o.strip()]

    # Execution simulation
    @property
    def execution_language(self) -> str:
        return os.getenv("EXECUTION_LANGUAGE", "python").strip()

    @property
    def simulation_max_code_length(self) -> int:
        return max(1, _int_env("SIMULATION_MAX_CODE_LENGTH", 1000))

    @property
    def simulation_delay_seconds(self) -> tuple[float, float]:
        """(min, max) artificial delay; max is never below min."""
        low = max(0, _int_env("SIMULATION_DELAY_MIN_MS", 800)) / 1000
        high = max(0, _int_env("SIMULATION_DELAY_MAX_MS", 1800)) / 1000
        return (low, max(low, high))

    # API
    @property
    def api_title(self) -> str:
        return os.getenv("API_TITLE", "Dotmini AI Lab API").strip()

    @property
    def api_version(self) -> str:
        return os.getenv("API_VERSION", "0.1.0").strip()

    @property
    def log_level(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").strip().upper()
