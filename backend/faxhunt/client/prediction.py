import math
import random
from collections import deque
from typing import List, Optional, Tuple

Point = Tuple[float, float]

MIN_SAMPLES = 3


def _clamp(value, low, high):
    return min(max(value, low), high)


class VelocityPredictor:
    """Estimates where the target will be from recent noisy samples.

    Keeps the last ``max_samples`` ``(timestamp, x, y)`` readings. The
    velocity estimate is the mean of the velocities between consecutive
    samples; pairs whose timestamps do not increase are skipped.
    """

    def __init__(self, max_samples=5, bounds=(0.0, 0.0, 1024.0, 600.0)):
        self.samples = deque(maxlen=max_samples)
        self.bounds = bounds

    def __len__(self):
        return len(self.samples)

    def add(self, timestamp: float, x: float, y: float) -> None:
        self.samples.append((timestamp, x, y))

    def clear(self) -> None:
        self.samples.clear()

    def velocity(self) -> Optional[Point]:
        total_vx = total_vy = 0.0
        count = 0
        ordered = list(self.samples)
        for (t0, x0, y0), (t1, x1, y1) in zip(ordered, ordered[1:]):
            dt = t1 - t0
            if dt <= 0:
                continue
            total_vx += (x1 - x0) / dt
            total_vy += (y1 - y0) / dt
            count += 1
        if count == 0:
            return None
        return total_vx / count, total_vy / count

    def predict(self, lead: float) -> Optional[Point]:
        """Position ``lead`` seconds after the newest sample, or None.

        None means there is not enough data yet: fewer than three samples,
        or no pair of samples with a positive time step.
        """
        if len(self.samples) < MIN_SAMPLES:
            return None
        velocity = self.velocity()
        if velocity is None:
            return None
        _, last_x, last_y = self.samples[-1]
        min_x, min_y, max_x, max_y = self.bounds
        return (
            _clamp(round(last_x + velocity[0] * lead), min_x, max_x),
            _clamp(round(last_y + velocity[1] * lead), min_y, max_y),
        )


def spread_shots(point: Point, count=5, radius=30.0, rng=None,
                 bounds=(0.0, 0.0, 1024.0, 600.0)) -> List[Point]:
    """Scatter ``count`` aim points within ``radius`` of ``point``."""
    rng = rng or random
    min_x, min_y, max_x, max_y = bounds
    shots = []
    for _ in range(count):
        angle = rng.random() * 2 * math.pi
        distance = rng.random() * radius
        shots.append((
            _clamp(round(point[0] + distance * math.cos(angle)), min_x, max_x),
            _clamp(round(point[1] + distance * math.sin(angle)), min_y, max_y),
        ))
    return shots
