import logging
from typing import List, Optional

from slot_composer import config

logger = logging.getLogger(__name__)


def weekday_names(locale: Optional[str] = None) -> List[str]:
    """Display names in canonical Monday to Sunday order."""
    return config.WEEKDAY_NAMES.get(locale or config.LOCALE, config.WEEKDAY_NAMES[config.DEFAULT_LOCALE])


def toggle_weekday(selected: List[str], name: str) -> List[str]:
    if name in selected:
        return [w for w in selected if w != name]
    return [*selected, name]


def canonical_order(selected: List[str], locale: Optional[str] = None) -> List[str]:
    """Sorts selected names by their position in the week.

    Names missing from the locale's table sort last, keeping their selection order.
    The web picker sorted them first (indexOf gave -1); either way they are still emitted.
    """
    order = weekday_names(locale)
    return sorted(selected, key=lambda name: order.index(name) if name in order else len(order))
