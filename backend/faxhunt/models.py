from enum import Enum
from dataclasses import dataclass
from flask_login import UserMixin
import random
import uuid


class GameStatus(str, Enum):
    ACTIVE = 'active'
    ENDED = 'ended'


@dataclass(frozen=True)
class Rect:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def contains(self, x, y):
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def clamp(self, x, y):
        return (
            max(self.min_x, min(self.max_x, x)),
            max(self.min_y, min(self.max_y, y)),
        )


def random_color(rng=random):
    """Random ``#RRGGBB`` color."""
    return '#' + ''.join(rng.choice('0123456789ABCDEF') for _ in range(6))


class Player(UserMixin):
    """A joined player. Flask-Login identifies it by its bearer token."""

    def __init__(self, name, color, token=None):
        self.name = name
        self.color = color
        self.token = token or str(uuid.uuid4())

    def get_id(self):
        return self.token

    def to_dict(self):
        return {
            'username': self.name,
            'color': self.color,
        }

    def __repr__(self):
        return f"<Player {self.name}>"


class Target:
    def __init__(self, x, y, vx=0, vy=0):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy

    @property
    def position(self):
        return (self.x, self.y)

    def to_dict(self):
        return {'x': self.x, 'y': self.y}
