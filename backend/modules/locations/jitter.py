"""
Coordinate jitter.

Pins that share a location would otherwise sit exactly on top of each
other. The offset is drawn uniformly over the area of a disk: a uniform
angle and a radius of ``radius * sqrt(u)``. Using ``radius * u`` instead
would crowd offsets toward the center.
"""

import math
import random
from typing import Optional


def jitter(
    longitude: float,
    latitude: float,
    radius: float,
    rng: Optional[random.Random] = None,
) -> tuple[float, float]:
    """
    Offset a coordinate by a random point inside a disk.

    Args:
        longitude: Original longitude in degrees
        latitude: Original latitude in degrees
        radius: Disk radius in degrees (0 returns the input unchanged)
        rng: Random source; pass a seeded ``random.Random`` for repeatable output

    Returns:
        (longitude, latitude) with the offset applied
    """
    if radius < 0:
        raise ValueError("Jitter radius must be non-negative")
    if radius == 0:
        return longitude, latitude

    rng = rng or random
    angle = rng.random() * 2 * math.pi
    distance = radius * math.sqrt(rng.random())

    return (
        longitude + math.cos(angle) * distance,
        latitude + math.sin(angle) * distance,
    )


def clamp_coordinates(longitude: float, latitude: float) -> tuple[float, float]:
    """Pull a jittered coordinate back inside the valid ranges."""
    return (
        min(180.0, max(-180.0, longitude)),
        min(90.0, max(-90.0, latitude)),
    )
