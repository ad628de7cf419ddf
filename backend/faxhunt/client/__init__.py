"""Clients for the game feed: a smoothing viewer and a predictive aiming bot."""

from .aimbot import AimBot, AimClient, AimClientError, RateLimited
from .interpolation import Interpolator
from .prediction import VelocityPredictor, spread_shots
from .viewer import Viewer

__all__ = [
    'AimBot',
    'AimClient',
    'AimClientError',
    'Interpolator',
    'RateLimited',
    'VelocityPredictor',
    'Viewer',
    'spread_shots',
]
