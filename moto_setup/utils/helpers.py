"""
Utility functions for MotoSetup
"""

from datetime import datetime

from moto_setup.models.models import ADJUSTER_LABELS, ClickAdjustment


def format_timestamp(timestamp_ms: int) -> str:
    """
    Format epoch milliseconds to readable date string

    Args:
        timestamp_ms: Epoch timestamp in milliseconds

    Returns:
        Formatted date string, or "N/A" for unset timestamps
    """
    if not timestamp_ms:
        return "N/A"
    dt = datetime.fromtimestamp(timestamp_ms / 1000)
    return dt.strftime("%Y-%m-%d %H:%M")


def format_percentage(percentage: int) -> str:
    return f"{percentage}%"


def format_clicks(clicks: int, max_clicks: int = 0) -> str:
    """
    Format a click count, with its range when calibrated

    Returns:
        e.g. "12 / 20 clicks", "12 clicks", "1 click"
    """
    if max_clicks and max_clicks > 0:
        return f"{clicks} / {max_clicks} clicks"
    return f"{clicks} click" if clicks == 1 else f"{clicks} clicks"


def format_adjustment(adjustment: ClickAdjustment) -> str:
    """
    Describe an adjustment for the rider

    Returns:
        e.g. "Open 3 clicks", "Close 1 click", or "No change"
    """
    if adjustment.clicks == 0:
        return "No change"
    unit = "click" if adjustment.clicks == 1 else "clicks"
    return f"{adjustment.direction.capitalize()} {adjustment.clicks} {unit}"


def format_balance(balance: str) -> str:
    """
    Get display label for a balance classification

    Args:
        balance: "front-heavy", "rear-heavy" or "balanced"

    Returns:
        Human readable label
    """
    labels = {
        "front-heavy": "Front-heavy",
        "rear-heavy": "Rear-heavy",
        "balanced": "Balanced",
    }
    return labels.get(balance, balance.capitalize())


def get_adjuster_display_name(adjuster: str) -> str:
    return ADJUSTER_LABELS.get(adjuster, adjuster.replace("_", " ").capitalize())
