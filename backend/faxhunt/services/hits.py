import math


def resolve(shot, target, hit_radius) -> bool:
    """True when ``shot`` lands within ``hit_radius`` of ``target``.

    Both points are ``(x, y)`` pairs; the edge of the circle counts as a hit.
    """
    return math.hypot(shot[0] - target[0], shot[1] - target[1]) <= hit_radius
