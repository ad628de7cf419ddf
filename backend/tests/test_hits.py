import math
import random

from faxhunt.services.hits import resolve


def test_shot_at_center_always_hits():
    rng = random.Random(5)
    for _ in range(200):
        target = (rng.uniform(0, 1024), rng.uniform(0, 600))
        assert resolve(target, target, rng.uniform(0.001, 50))


def test_shot_outside_radius_always_misses():
    rng = random.Random(6)
    for _ in range(200):
        target = (rng.uniform(0, 1024), rng.uniform(0, 600))
        radius = rng.uniform(1, 50)
        angle = rng.uniform(0, 2 * math.pi)
        distance = radius * 1.01 + rng.uniform(0, 100)
        shot = (target[0] + distance * math.cos(angle), target[1] + distance * math.sin(angle))
        assert not resolve(shot, target, radius)


def test_edge_of_radius_counts_as_hit():
    assert resolve((415, 300), (400, 300), 15)
    assert resolve((409, 312), (400, 300), 15)
    assert not resolve((416, 300), (400, 300), 15)


def test_symmetric():
    assert resolve((10, 10), (20, 20), 15) == resolve((20, 20), (10, 10), 15)
