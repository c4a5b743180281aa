import logging
import os
from typing import Dict, List

logger = logging.getLogger(__name__)

# --- Locale ---
WEEKDAY_NAMES: Dict[str, List[str]] = {
    "en": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
    "de": ["Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"],
}
DEFAULT_LOCALE = "en"

LOCALE = os.environ.get("SLOT_COMPOSER_LOCALE", DEFAULT_LOCALE)
if LOCALE not in WEEKDAY_NAMES:
    logger.warning(f"Unsupported locale '{LOCALE}', falling back to '{DEFAULT_LOCALE}'.")
    LOCALE = DEFAULT_LOCALE

# --- Slot defaults ---
TIME_FORMAT = "%H:%M"
DEFAULT_SLOT_START = os.environ.get("SLOT_COMPOSER_DEFAULT_START", "09:00")
MAX_END_HOUR = 23

# Single-date dialog opens with this slot
SINGLE_SLOT_START = os.environ.get("SLOT_COMPOSER_SINGLE_START", "09:00")
SINGLE_SLOT_END = os.environ.get("SLOT_COMPOSER_SINGLE_END", "17:00")

# --- Validation ---
# When set, slots whose end time is not after their start time are not emitted.
REJECT_INVERTED_SLOTS = os.environ.get("SLOT_COMPOSER_REJECT_INVERTED", "").lower() in ("1", "true", "yes")
