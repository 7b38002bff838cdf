#!/usr/bin/env python3
"""Run the FastAPI server. Usage: python run_api.py. Set HOST=0.0.0.0 to allow network access."""
import os
from pathlib import Path

# Project root = directory containing this file. Load .env first so env vars are set
# before uvicorn (and the reload worker) start. override=True so .env wins over shell env.
_ROOT = Path(__file__).resolve().parent
_env_path = _ROOT / ".env"
from dotenv import load_dotenv
load_dotenv(_env_path, override=True)

import uvicorn

from dotmini.core.config import get_settings
from dotmini.main import require_api_key

if __name__ == "__main__":
    settings = get_settings()
    require_api_key(settings)
    uvicorn.run(
        "dotmini.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=os.getenv("RELOAD", "0").strip().lower() in ("1", "true", "yes"),
    )
