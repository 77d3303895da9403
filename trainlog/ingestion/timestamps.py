"""Split raw timestamps into the (date, time) session key.

The wall-clock value is kept exactly as the source recorded it; nothing is
converted to UTC, since both exports record local training time.
"""

from __future__ import annotations

from datetime import date, datetime

from loguru import logger

_FALLBACK_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%a %b %d %Y %H:%M:%S",
)


def _parse_datetime(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def split_timestamp(raw: object) -> tuple[str, str] | None:
    """Split a timestamp into ("YYYY-MM-DD", "HH:MM:SS").

    A date without a time of day yields an empty time string.

    Args:
        raw: Timestamp as recorded by the source

    Returns:
        Tuple of (date, time), or None if the value is absent or unparseable
    """
    if not isinstance(raw, str) or not raw.strip():
        return None
    text = raw.strip()

    if len(text) == 10:
        try:
            return date.fromisoformat(text).isoformat(), ""
        except ValueError:
            pass

    parsed = _parse_datetime(text)
    if parsed is None:
        logger.warning(f"Could not parse timestamp: {raw!r}")
        return None
    return parsed.date().isoformat(), parsed.strftime("%H:%M:%S")
