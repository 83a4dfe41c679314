"""Element temperature loads."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ElementTemperature:
    """Uniform temperature rise contributed to one element [K]."""
    value: float


def total_temperature(loads):
    """Sum of all temperature contributions (0.0 for none)."""
    return float(sum(load.value for load in loads))
