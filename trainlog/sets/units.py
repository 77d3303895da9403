"""Measurement units and conversions.

Raw exports tag efforts either with a bare string ("lb") or with a unit
object ({"abbr": "lb", ...}). Both shapes are folded into ``Unit`` here, at
the ingestion boundary, so conversion code only ever compares enum members.

Canonical units:
- weight: pound
- distance: mile
- time: seconds
- height: inch
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

KG_TO_LB = 2.20462
KM_TO_MI = 0.621371
M_TO_MI = KM_TO_MI / 1000.0
YD_PER_MI = 1760.0
FT_PER_MI = 5280.0
CM_PER_IN = 2.54


class Unit(StrEnum):
    """Unit tag attached to a raw effort value."""

    REPS = "reps"
    LB = "lb"
    KG = "kg"
    MI = "mi"
    KM = "km"
    M = "m"
    YD = "yd"
    FT = "ft"
    SEC = "sec"
    MIN = "min"
    IN = "in"
    CM = "cm"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, tag: Any) -> Unit:
        """Fold any raw unit representation into a ``Unit``.

        Args:
            tag: A string tag, a mapping carrying an ``abbr`` key, or None

        Returns:
            Matching unit, or ``Unit.UNKNOWN`` when the tag is not recognised
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, dict):
            tag = tag.get("abbr") or tag.get("name")
        if not isinstance(tag, str):
            return cls.UNKNOWN
        return _UNIT_ALIASES.get(tag.strip().lower(), cls.UNKNOWN)

    @property
    def is_weight(self) -> bool:
        return self in {Unit.LB, Unit.KG}

    @property
    def is_distance(self) -> bool:
        return self in {Unit.MI, Unit.KM, Unit.M, Unit.YD, Unit.FT}

    @property
    def is_time(self) -> bool:
        return self in {Unit.SEC, Unit.MIN}

    @property
    def is_height(self) -> bool:
        return self in {Unit.IN, Unit.CM}


_UNIT_ALIASES: dict[str, Unit] = {
    "reps": Unit.REPS,
    "rep": Unit.REPS,
    "lb": Unit.LB,
    "lbs": Unit.LB,
    "pound": Unit.LB,
    "pounds": Unit.LB,
    "kg": Unit.KG,
    "kgs": Unit.KG,
    "kilogram": Unit.KG,
    "kilograms": Unit.KG,
    "mi": Unit.MI,
    "mile": Unit.MI,
    "miles": Unit.MI,
    "km": Unit.KM,
    "kilometer": Unit.KM,
    "kilometers": Unit.KM,
    "m": Unit.M,
    "meter": Unit.M,
    "meters": Unit.M,
    "yd": Unit.YD,
    "yds": Unit.YD,
    "yard": Unit.YD,
    "yards": Unit.YD,
    "ft": Unit.FT,
    "feet": Unit.FT,
    "sec": Unit.SEC,
    "secs": Unit.SEC,
    "s": Unit.SEC,
    "second": Unit.SEC,
    "seconds": Unit.SEC,
    "min": Unit.MIN,
    "mins": Unit.MIN,
    "minute": Unit.MIN,
    "minutes": Unit.MIN,
    "in": Unit.IN,
    "inch": Unit.IN,
    "inches": Unit.IN,
    "cm": Unit.CM,
}


def kg_to_lb(value: float) -> float:
    return value * KG_TO_LB


def lb_to_kg(value: float) -> float:
    return value / KG_TO_LB


def km_to_mi(value: float) -> float:
    return value * KM_TO_MI


def to_pounds(value: float, unit: Unit, imperial: float | None = None) -> float:
    """Convert a weight value to pounds.

    A precomputed imperial value supplied by the source wins over the
    multiplication so no extra rounding error is introduced.
    """
    if unit == Unit.KG:
        if imperial:
            return imperial
        return kg_to_lb(value)
    return value


def to_miles(value: float, unit: Unit) -> float:
    """Convert a distance value to miles."""
    if unit == Unit.KM:
        return km_to_mi(value)
    if unit == Unit.M:
        return value * M_TO_MI
    if unit == Unit.YD:
        return value / YD_PER_MI
    if unit == Unit.FT:
        return value / FT_PER_MI
    return value


def to_seconds(value: float, unit: Unit) -> int:
    """Convert a time value to whole seconds."""
    if unit == Unit.MIN:
        return int(round(value * 60))
    return int(value)


def to_inches(value: float, unit: Unit) -> float:
    """Convert a height value to inches."""
    if unit == Unit.CM:
        return value / CM_PER_IN
    return value
