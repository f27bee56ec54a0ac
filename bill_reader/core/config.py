"""Runtime configuration helpers.

This module centralizes environment-driven runtime switches so the rest of the
codebase can import a single cached Settings instance.

Env vars (optional) and their roles:
        GENERATION_PROVIDER    -> "openai" (default) or "groq"; selects the chat model backend.
        OPENAI_API_KEY         -> Credential for the OpenAI provider (never hard-code secrets).
        GROQ_API_KEY           -> Credential for the Groq provider.
        GENERATION_MODEL       -> Model identifier passed to the provider.
        GENERATION_TIMEOUT_S   -> Per-call timeout; a timed out call fails its workflow stage.
        MAX_FILE_MB            -> Upper bound for accepted PDF uploads.
        UPLOAD_DIR             -> Root directory for transient upload storage.
        DEBUG_GENERATION       -> Verbose prompt/response preview logging.
        FRONTEND_URL           -> Additional allowed CORS origin (deployed client).
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _truthy(raw: str) -> bool:
        return raw in {"1", "true", "True", "yes"}


class Settings:
        """Central runtime switches.

        Values are read once at process start and memoized via get_settings().
        Credentials are not validated here; the generation client checks the key
        for the selected provider when it is built.
        """

        # ---- Generation provider ----
        GENERATION_PROVIDER: str = os.getenv("GENERATION_PROVIDER", "openai").lower()
        OPENAI_API_KEY: str = os.environ.get("OPENAI_API_KEY")
        GROQ_API_KEY: str = os.environ.get("GROQ_API_KEY")
        GENERATION_MODEL: str = os.getenv("GENERATION_MODEL", "gpt-4o-mini")
        GENERATION_TEMPERATURE: float = float(os.getenv("GENERATION_TEMPERATURE", "0.3"))
        GENERATION_MAX_TOKENS: int = int(os.getenv("GENERATION_MAX_TOKENS", "4000"))
        GENERATION_TIMEOUT_S: float = float(os.getenv("GENERATION_TIMEOUT_S", "60"))

        # ---- Upload guards ----
        MAX_FILE_MB: int = int(os.getenv("MAX_FILE_MB", "10"))
        UPLOAD_DIR: Path = Path(os.getenv("UPLOAD_DIR", "uploads"))

        # ---- Prompt size bounds ----
        CLASSIFY_PREFIX_CHARS: int = int(os.getenv("CLASSIFY_PREFIX_CHARS", "9000"))
        ENRICH_PREFIX_CHARS: int = int(os.getenv("ENRICH_PREFIX_CHARS", "8000"))

        # ---- Cross-origin policy ----
        FRONTEND_URL: str = os.environ.get("FRONTEND_URL")
        CORS_ORIGIN_SUFFIX: str = os.getenv("CORS_ORIGIN_SUFFIX", ".github.io")
        LOCAL_ORIGINS: List[str] = [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5000",
                "http://127.0.0.1:5000",
        ]

        # ---- Diagnostics / serving ----
        DEBUG_GENERATION: bool = _truthy(os.getenv("DEBUG_GENERATION", "0"))
        LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        HOST: str = os.getenv("HOST", "0.0.0.0")
        PORT: int = int(os.getenv("PORT", "10000"))

        @property
        def max_upload_bytes(self) -> int:
                return int(self.MAX_FILE_MB * 1024 * 1024)

        @property
        def allowed_origins(self) -> List[str]:
                origins = list(self.LOCAL_ORIGINS)
                if self.FRONTEND_URL:
                        origins.append(self.FRONTEND_URL.rstrip("/"))
                return origins


@lru_cache
def get_settings() -> Settings:
        """Return cached singleton Settings instance.

        Each worker process resolves environment variables once; subsequent
        calls are cheap attribute access.
        """
        return Settings()
