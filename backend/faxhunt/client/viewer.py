import logging
import time
from functools import partial

from pydantic import ValidationError

from faxhunt.events import EVENT_NAMES, GameOver, GameReset, NewShot, ObjectPosition, UserListUpdate, from_wire
from .interpolation import Interpolator

logger = logging.getLogger(__name__)

SHOT_LIFETIME = 1.0  # seconds a shot stays on screen
START_POSITION = (400.0, 300.0)


class Viewer:
    """Client-side mirror of the broadcast feed.

    Feed it Socket.IO events (``handle``) and call ``frame`` once per render
    tick to get the smoothed target position and the shots still visible.
    """

    def __init__(self, clock=time.monotonic, window=0.1):
        self.clock = clock
        self.interpolator = Interpolator(START_POSITION, window=window, now=clock())
        self.shots = []
        self.active = True
        self.winner = None
        self.players = []

    def attach(self, sio) -> None:
        """Subscribe to every game event on a ``socketio.Client``."""
        for name in EVENT_NAMES:
            sio.on(name, partial(self.handle, name))

    def handle(self, name, data=None) -> None:
        try:
            event = from_wire(name, data)
        except (ValidationError, TypeError):
            logger.warning(f"[viewer] dropping malformed {name} event: {data!r}")
            return
        self.apply(event)

    def apply(self, event) -> None:
        now = self.clock()
        if isinstance(event, ObjectPosition):
            self.interpolator.update(event.x, event.y, now)
        elif isinstance(event, NewShot):
            self.shots.append((now, event))
        elif isinstance(event, GameOver):
            self.active = False
            self.winner = event.winner
            logger.info(f"[viewer] game over, winner={event.winner}")
        elif isinstance(event, GameReset):
            self.active = True
            self.winner = None
            self.shots = []
            self.interpolator.snap(*START_POSITION, now)
        elif isinstance(event, UserListUpdate):
            self.players = [p.username for p in event.players]
        else:
            raise TypeError(f"unhandled event {event!r}")

    def visible_shots(self, now=None):
        now = self.clock() if now is None else now
        self.shots = [(at, shot) for at, shot in self.shots if now - at < SHOT_LIFETIME]
        return [shot for _, shot in self.shots]

    def frame(self, now=None) -> dict:
        now = self.clock() if now is None else now
        x, y = self.interpolator.step(now)
        return {
            'target': {'x': x, 'y': y} if self.active else None,
            'shots': self.visible_shots(now),
            'winner': self.winner,
            'players': list(self.players),
        }
