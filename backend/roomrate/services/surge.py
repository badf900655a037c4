"""Demand-responsive surge multiplier."""

NIGHT_MULTIPLIER = 1.15
MAX_SURGE = 2.0

# (ratio upper bound, multiplier), checked in order
SURGE_TIERS = (
    (1, 1.0),
    (2, 1.1),
    (3, 1.25),
    (5, 1.5),
)


def surge_multiplier(recent_requests: int, available_units: int) -> float:
    """
    Map recent search volume against free inventory to a price multiplier.

    No free units means maximum surge. Otherwise the requests-per-unit ratio
    picks a tier; anything at or above the last bound gets MAX_SURGE.
    """
    if available_units == 0:
        return MAX_SURGE
    available_units = max(available_units, 1)
    ratio = recent_requests / available_units
    for upper_bound, multiplier in SURGE_TIERS:
        if ratio < upper_bound:
            return multiplier
    return MAX_SURGE


def is_night_hour(hour: int) -> bool:
    """21:00 to 03:59 local time."""
    return hour >= 21 or hour < 4


def apply_night_adjustment(multiplier: float, hour: int) -> float:
    if is_night_hour(hour):
        return round(multiplier * NIGHT_MULTIPLIER, 2)
    return multiplier
