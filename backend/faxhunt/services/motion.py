import math
import random

from faxhunt.models import Rect, Target


class MotionSimulator:
    """Advances the target one fixed step per tick.

    Velocity is redrawn at random now and then so the motion looks
    irregular; every random draw comes from ``rng`` so a seeded generator
    reproduces a session exactly.
    """

    def __init__(self, bounds: Rect, min_speed=20, max_speed=60,
                 change_probability=0.05, start=(400.0, 300.0), rng=None):
        self.bounds = bounds
        self.min_speed = min_speed
        self.max_speed = max_speed
        self.change_probability = change_probability
        self.start = start
        self.rng = rng or random.Random()
        self.target = Target(*start)
        self.respawn()

    def random_velocity(self) -> int:
        velocity = 0
        while velocity == 0:
            velocity = math.floor((self.rng.random() - 0.5) * 2 * self.max_speed)
            # Sign is random, magnitude is at least min_speed
            if abs(velocity) < self.min_speed:
                velocity = int(math.copysign(self.min_speed, velocity)) if velocity else 0
        return velocity

    def respawn(self) -> None:
        self.target.x, self.target.y = self.start
        self.target.vx = self.random_velocity()
        self.target.vy = self.random_velocity()

    def _clamp_speed(self, v):
        return max(-self.max_speed, min(self.max_speed, v))

    def tick(self):
        t = self.target
        if self.rng.random() < self.change_probability:
            t.vx = self.random_velocity()
            t.vy = self.random_velocity()

        t.vx = self._clamp_speed(t.vx)
        t.vy = self._clamp_speed(t.vy)

        t.x, t.y = self.bounds.clamp(t.x + t.vx, t.y + t.vy)

        # Reflect only when the clamp landed exactly on an edge
        if t.x == self.bounds.min_x or t.x == self.bounds.max_x:
            t.vx = -t.vx
        if t.y == self.bounds.min_y or t.y == self.bounds.max_y:
            t.vy = -t.vy
        return t.position
