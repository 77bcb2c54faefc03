"""
Balance Analyzer - Compares front (fork) and rear (shock) adjuster positions
"""

from typing import List

import pandas as pd

from moto_setup.config import BALANCE_THRESHOLD, EXTREME_SOFT_PERCENTAGE, EXTREME_FIRM_PERCENTAGE
from moto_setup.models.models import ADJUSTERS, ADJUSTER_LABELS, ClickRange, SuspensionBalance
from moto_setup.services.click_normalizer import calculate_adjustment, clicks_to_percentage
from moto_setup.utils.helpers import format_adjustment

FRONT_HEAVY = "front-heavy"
REAR_HEAVY = "rear-heavy"
BALANCED = "balanced"


def classify_balance(diff: float) -> str:
    """Classify a front-minus-rear percentage gap"""
    if diff > BALANCE_THRESHOLD:
        return FRONT_HEAVY
    if diff < -BALANCE_THRESHOLD:
        return REAR_HEAVY
    return BALANCED


def calculate_balance(fork_compression: int,
                      fork_rebound: int,
                      shock_compression_low: int,
                      shock_rebound: int,
                      max_fork_compression: int,
                      max_fork_rebound: int,
                      max_shock_compression_low: int,
                      max_shock_rebound: int) -> SuspensionBalance:
    """
    Classify compression, rebound and overall front/rear balance.

    The rear side uses low-speed shock compression, the adjuster riders touch
    most. Overall balance classifies the mean of the two gaps.
    """
    front_compression = clicks_to_percentage(fork_compression, max_fork_compression)
    front_rebound = clicks_to_percentage(fork_rebound, max_fork_rebound)
    rear_compression = clicks_to_percentage(shock_compression_low, max_shock_compression_low)
    rear_rebound = clicks_to_percentage(shock_rebound, max_shock_rebound)

    compression_diff = front_compression - rear_compression
    rebound_diff = front_rebound - rear_rebound

    return SuspensionBalance(
        front_compression=front_compression,
        front_rebound=front_rebound,
        rear_compression=rear_compression,
        rear_rebound=rear_rebound,
        compression_diff=compression_diff,
        rebound_diff=rebound_diff,
        compression_balance=classify_balance(compression_diff),
        rebound_balance=classify_balance(rebound_diff),
        overall_balance=classify_balance((compression_diff + rebound_diff) / 2),
    )


class BalanceAnalyzer:
    """Balance views over kits and configs"""

    @staticmethod
    def balance_for_settings(settings, ranges: ClickRange) -> SuspensionBalance:
        """
        Balance of a kit's or config's current clicks against a click range

        Args:
            settings: Any object exposing current_clicks(adjuster) (kit or config)
            ranges: Calibration ceilings, usually kit.click_range()
        """
        return calculate_balance(
            settings.current_clicks("fork_compression"),
            settings.current_clicks("fork_rebound"),
            settings.current_clicks("shock_compression_low"),
            settings.current_clicks("shock_rebound"),
            ranges.get("fork_compression"),
            ranges.get("fork_rebound"),
            ranges.get("shock_compression_low"),
            ranges.get("shock_rebound"),
        )

    @staticmethod
    def get_recommendations(balance: SuspensionBalance) -> List[str]:
        """Rider-facing hints derived from a balance classification"""
        recommendations = []

        if balance.compression_balance == FRONT_HEAVY:
            recommendations.append(
                "The fork is firmer than the shock. Try opening front compression or closing the rear."
            )
        elif balance.compression_balance == REAR_HEAVY:
            recommendations.append(
                "The shock is firmer than the fork. Try opening rear compression or closing the front."
            )

        if balance.rebound_balance == FRONT_HEAVY:
            recommendations.append(
                "Front rebound is slower than the rear. This can unsettle the bike on corner exits."
            )
        elif balance.rebound_balance == REAR_HEAVY:
            recommendations.append(
                "Rear rebound is slower than the front. This can hurt stability under braking."
            )

        for label, value in (("Fork", balance.front_compression), ("Shock", balance.rear_compression)):
            if value < EXTREME_SOFT_PERCENTAGE:
                recommendations.append(f"{label} compression at {value}% - very soft position.")
            elif value > EXTREME_FIRM_PERCENTAGE:
                recommendations.append(f"{label} compression at {value}% - very firm position.")

        return recommendations

    @staticmethod
    def compare_setups(current, other, ranges: ClickRange) -> pd.DataFrame:
        """
        Create a per-adjuster comparison between two setups

        Args:
            current: Setup being edited (kit or config)
            other: Setup to compare with
            ranges: Click ranges used for both percentages

        Returns:
            DataFrame with one row per adjuster and the adjustment needed to
            go from the current setup to the other one
        """
        data = []
        for adjuster in ADJUSTERS:
            max_clicks = ranges.get(adjuster)
            current_clicks = current.current_clicks(adjuster)
            other_clicks = other.current_clicks(adjuster)
            adjustment = calculate_adjustment(current_clicks, other_clicks, max_clicks)

            data.append({
                "Adjuster": ADJUSTER_LABELS[adjuster],
                "Current (clicks)": current_clicks,
                "Current (%)": clicks_to_percentage(current_clicks, max_clicks),
                "Compare (clicks)": other_clicks,
                "Compare (%)": clicks_to_percentage(other_clicks, max_clicks),
                "Difference (clicks)": other_clicks - current_clicks,
                "Adjustment": format_adjustment(adjustment),
            })

        return pd.DataFrame(data)
