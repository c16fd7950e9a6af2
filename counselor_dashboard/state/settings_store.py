import pytz
import structlog

from counselor_dashboard.config import CURRENCY_SYMBOLS, DEFAULT_CURRENCY, DEFAULT_TIMEZONE, LANGUAGES

logger = structlog.get_logger(__name__)

_DEFAULTS = {
    "currency": DEFAULT_CURRENCY,
    "darkMode": False,
    "language": "en",
    "timezone": DEFAULT_TIMEZONE,
}


class SettingsStore:
    """Display preferences (currency, theme, language, timezone) for this installation."""

    def __init__(self, slot=None):
        self.slot = slot
        self._apply({**_DEFAULTS, **((slot.load() if slot is not None else None) or {})})

    def _apply(self, state: dict) -> None:
        self.currency = state["currency"]
        self.dark_mode = bool(state["darkMode"])
        self.language = state["language"]
        self.timezone = state["timezone"]

    def reset(self) -> None:
        """Back to defaults; the stored slot is removed."""
        if self.slot is not None:
            self.slot.clear()
        self._apply(dict(_DEFAULTS))
        logger.info("settings_reset")

    def _persist(self) -> None:
        if self.slot is None:
            return
        self.slot.save(
            {
                "currency": self.currency,
                "darkMode": self.dark_mode,
                "language": self.language,
                "timezone": self.timezone,
            }
        )

    def set_currency(self, currency: str) -> None:
        if currency not in CURRENCY_SYMBOLS:
            raise ValueError(f"Unsupported currency: {currency!r}")
        self.currency = currency
        self._persist()

    def toggle_dark_mode(self) -> bool:
        self.dark_mode = not self.dark_mode
        self._persist()
        return self.dark_mode

    def set_language(self, language: str) -> None:
        if language not in LANGUAGES:
            raise ValueError(f"Unsupported language: {language!r}")
        self.language = language
        self._persist()

    def set_timezone(self, timezone: str) -> None:
        if timezone not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {timezone!r}")
        self.timezone = timezone
        self._persist()
        logger.info("timezone_changed", timezone=timezone)
