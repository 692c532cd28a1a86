"""Logging configuration with sensitive data filtering."""

import logging
import re


class SensitiveDataFilter(logging.Filter):
    """Filter to mask credentials in logs."""

    SENSITIVE_PATTERNS = [
        # API keys (GEMINI_API_KEY=..., api_key: ...)
        (r'api[_-]?key["\']?\s*[:=]\s*["\']?([^"\'\s,}]+)', r"api_key=***REDACTED***"),
        # Google API keys embedded in URLs or error messages
        (r"AIza[0-9A-Za-z\-_]{35}", r"***GOOGLE_KEY_REDACTED***"),
        # Bearer tokens in Authorization headers
        (r"Bearer\s+([A-Za-z0-9\-._~+/]+=*)", r"Bearer ***REDACTED***"),
    ]

    def _mask(self, value: str) -> str:
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            value = re.sub(pattern, replacement, value, flags=re.IGNORECASE)
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask sensitive data in the message and its string args."""
        if isinstance(record.msg, str):
            record.msg = self._mask(record.msg)

        if isinstance(record.args, tuple):
            record.args = tuple(
                self._mask(arg) if isinstance(arg, str) else arg for arg in record.args
            )

        return True


def setup_logging(settings) -> None:
    """
    Setup logging configuration with sensitive data filtering.

    Args:
        settings: Application settings instance
    """
    log_level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler()
    handler.addFilter(SensitiveDataFilter())

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[handler],
        force=True,  # Override any existing configuration
    )
