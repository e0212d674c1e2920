from __future__ import annotations

import logging
from typing import Optional

from taskdeck.domain.errors import PersistenceError
from taskdeck.infra.db.kv_memory import KeyValueStorage
from taskdeck.services.signals import PREFERENCES_CHANGED, SignalBus
from taskdeck.services.toasts import ToastFeed

logger = logging.getLogger("taskdeck.preferences")

DARK_MODE_KEY = "darkMode"


class PreferencesStore:
    """Dark mode flag, stored as the strings "true"/"false"."""

    def __init__(self, storage: KeyValueStorage, *, signals: Optional[SignalBus] = None, toasts: Optional[ToastFeed] = None):
        self.storage = storage
        self.signals = signals or SignalBus()
        self.toasts = toasts
        self.dark_mode = False

    async def load(self) -> bool:
        try:
            raw = await self.storage.get(DARK_MODE_KEY)
        except Exception:
            logger.exception("preferences.read_failed", extra={"category": "preferences", "event": "preferences.read_failed"})
            raw = None
        self.dark_mode = raw == "true"
        return self.dark_mode

    async def toggle_dark_mode(self) -> bool:
        self.dark_mode = not self.dark_mode
        try:
            await self.storage.set(DARK_MODE_KEY, "true" if self.dark_mode else "false")
        except Exception as exc:
            self.signals.emit(PREFERENCES_CHANGED)
            if self.toasts:
                self.toasts.error("Could not save your theme preference")
            raise PersistenceError(f"Could not save preferences: {exc}") from exc

        logger.info(
            "preferences.dark_mode",
            extra={"category": "preferences", "event": "preferences.dark_mode", "dark_mode": self.dark_mode},
        )
        self.signals.emit(PREFERENCES_CHANGED)
        if self.toasts:
            self.toasts.info(f"{'Dark' if self.dark_mode else 'Light'} mode activated")
        return self.dark_mode
