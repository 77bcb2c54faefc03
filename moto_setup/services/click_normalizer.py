"""
Click Normalizer - Converts between adjuster clicks and percentages

All functions are pure. Callers are expected to pass non-negative clicks no
greater than the adjuster's maximum; nothing is clamped.
"""

import math
from typing import Dict, Optional

from moto_setup.models.models import ClickAdjustment, ClickRange

# Typical click ranges by suspension brand, used when a kit is not calibrated
DEFAULT_CLICK_RANGES: Dict[str, ClickRange] = {
    "WP": ClickRange(30, 30, 30, 20, 30),
    "KYB": ClickRange(20, 20, 20, 15, 20),
    "Showa": ClickRange(20, 20, 20, 15, 20),
    "Ohlins": ClickRange(40, 40, 40, 25, 40),
    "Sachs": ClickRange(25, 25, 25, 18, 25),
    "default": ClickRange(25, 25, 25, 20, 25),
}

DIRECTION_OPEN = "open"
DIRECTION_CLOSE = "close"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)"""
    return int(math.floor(value + 0.5))


def clicks_to_percentage(clicks: float, max_clicks: Optional[float]) -> int:
    """
    Convert a click count to a percentage of the adjuster's range.

    Args:
        clicks: Current click count
        max_clicks: Calibration ceiling of the adjuster

    Returns:
        Rounded percentage, or 0 when the adjuster is not calibrated
    """
    if not max_clicks or max_clicks <= 0:
        return 0
    return round_half_up(clicks / max_clicks * 100)


def percentage_to_clicks(percentage: float, max_clicks: Optional[float]) -> int:
    """Convert a percentage back to a click count (0 when not calibrated)"""
    if not max_clicks or max_clicks <= 0:
        return 0
    return round_half_up(percentage / 100 * max_clicks)


def calculate_adjustment(current_clicks: int, target_clicks: int, max_clicks: Optional[int]) -> ClickAdjustment:
    """
    Work out how to go from the current position to a target position.

    Opening means adding clicks; anything else (including no change) is
    reported as closing.
    """
    diff = target_clicks - current_clicks
    return ClickAdjustment(
        clicks=abs(diff),
        direction=DIRECTION_OPEN if diff > 0 else DIRECTION_CLOSE,
        from_percentage=clicks_to_percentage(current_clicks, max_clicks),
        to_percentage=clicks_to_percentage(target_clicks, max_clicks),
    )


def get_default_click_range(brand: Optional[str]) -> ClickRange:
    """Typical click range for a brand, falling back to a generic range"""
    return DEFAULT_CLICK_RANGES.get(brand or "", DEFAULT_CLICK_RANGES["default"])


def get_position_description(percentage: int) -> str:
    if percentage <= 20:
        return "Very soft"
    if percentage <= 40:
        return "Soft"
    if percentage <= 60:
        return "Neutral"
    if percentage <= 80:
        return "Firm"
    return "Very firm"


def get_percentage_zone(percentage: int) -> str:
    """Three-band zone used to color gauges"""
    if percentage <= 33:
        return "soft"
    if percentage <= 66:
        return "medium"
    return "firm"
