"""
Unit conversions.

Distances are stored in meters and elevation gain in meters.
The admin surface accepts miles and feet.
"""

import math

MILES_TO_METERS = 1609.34
FEET_TO_METERS = 0.3048


def round_half_away_from_zero(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero.

    Python's round() uses banker's rounding (round(2.5) == 2),
    which is not what stored metrics should use.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def miles_to_meters(miles: float) -> float:
    return miles * MILES_TO_METERS


def meters_to_miles(meters: float) -> float:
    return meters / MILES_TO_METERS


def feet_to_meters(feet: float) -> float:
    return feet * FEET_TO_METERS


def meters_to_feet(meters: float) -> float:
    return meters / FEET_TO_METERS


def pace_seconds_per_mile(distance_m: float | None, moving_time_s: float | None) -> int | None:
    """
    Average pace in seconds per mile.

    Returns None when distance or time is missing or zero.
    """
    if not distance_m or not moving_time_s:
        return None
    return round_half_away_from_zero(moving_time_s / meters_to_miles(distance_m))
