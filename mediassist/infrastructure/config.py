import os
import logging

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


DEFAULT_GEMINI_MODEL = "gemini-3-pro-preview"
DEFAULT_REQUEST_TIMEOUT = 60.0


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception:
            # No secrets.toml outside `streamlit run`
            pass
    # Fallback to environment variables
    return os.environ.get(name, default)


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    @property
    def gemini_api_key(self) -> str | None:
        return get_secret("GEMINI_API_KEY") or get_secret("API_KEY")

    @property
    def gemini_model(self) -> str:
        return get_secret("GEMINI_MODEL", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL

    @property
    def request_timeout(self) -> float:
        raw = get_secret("MEDIASSIST_REQUEST_TIMEOUT")
        if not raw:
            return DEFAULT_REQUEST_TIMEOUT
        try:
            return float(raw)
        except ValueError:
            logger.warning("Invalid MEDIASSIST_REQUEST_TIMEOUT %r; using %s", raw, DEFAULT_REQUEST_TIMEOUT)
            return DEFAULT_REQUEST_TIMEOUT

    @property
    def camera_enabled(self) -> bool:
        return _as_bool(get_secret("MEDIASSIST_CAMERA_ENABLED"), True)
