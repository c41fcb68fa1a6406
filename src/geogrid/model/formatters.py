"""
Label Formatters
Turn a degree value into the text shown on a grid label.
"""
import math


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_degrees(degrees_float: float) -> str:
    """
    Format degrees as "D°[ M′][ S′′]".

    Degrees and minutes are floored, so negative values are carried by the
    degree part (-0.5 -> "-1° 30′"). Zero minutes or seconds are omitted.
    """
    degrees = math.floor(degrees_float)
    minutes_float = (degrees_float - degrees) * 60
    minutes = math.floor(minutes_float)
    minutes_fractional_part = minutes_float - minutes
    seconds = _round_half_up(minutes_fractional_part - math.floor(minutes_fractional_part))

    output = f"{degrees}°"

    if minutes != 0:
        output += f" {minutes}′"

    if seconds != 0:
        output += f" {seconds}′′"

    return output
