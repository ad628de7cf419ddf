import logging
import math
import random
import threading
import time
from typing import Dict, List, Optional

from faxhunt.errors import CapacityError, ValidationError
from faxhunt.events import GameOver, GameReset, NewShot, ObjectPosition, PlayerInfo, UserListUpdate
from faxhunt.models import GameStatus, Player, Rect, random_color
from .hits import resolve
from .motion import MotionSimulator
from .rate_limit import SlidingWindowLimiter
from .scheduler import ResetTicket

logger = logging.getLogger(__name__)

MIN_HIT_RADIUS = 10


def _is_number(value) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # JSON integers can be wider than any float
        return False


class GameSession:
    """The single authoritative game: target, players, status and winner.

    Routes, socket handlers and background loops all receive this object;
    every state change is announced through ``broadcaster``.
    """

    def __init__(self, motion: MotionSimulator, limiter: SlidingWindowLimiter, broadcaster,
                 scheduler, playfield: Rect, max_players=10, hit_radius=20.0,
                 auto_reset_delay=20.0, noise=10.0, rng=None, clock=time.time):
        self.motion = motion
        self.limiter = limiter
        self.broadcaster = broadcaster
        self.scheduler = scheduler
        self.playfield = playfield
        self.max_players = max_players
        self.hit_radius = hit_radius
        self.auto_reset_delay = auto_reset_delay
        self.noise = noise
        self.rng = rng or random.Random()
        self.clock = clock

        self.status = GameStatus.ACTIVE
        self.winner: Optional[str] = None
        self.players: Dict[str, Player] = {}
        self._pending_reset: Optional[ResetTicket] = None
        # Serializes mutations when Socket.IO falls back to real threads
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config, broadcaster, scheduler):
        rng = random.Random(config.get('RANDOM_SEED'))
        motion = MotionSimulator(
            Rect(config['TARGET_MIN_X'], config['TARGET_MIN_Y'], config['TARGET_MAX_X'], config['TARGET_MAX_Y']),
            min_speed=config['MIN_SPEED'],
            max_speed=config['MAX_SPEED'],
            change_probability=config['DIRECTION_CHANGE_PROBABILITY'],
            rng=rng,
        )
        return cls(
            motion,
            SlidingWindowLimiter(config['RATE_LIMITS']),
            broadcaster,
            scheduler,
            Rect(0, 0, config['PLAYFIELD_WIDTH'], config['PLAYFIELD_HEIGHT']),
            max_players=config['MAX_PLAYERS'],
            hit_radius=config['TARGET_AREA'],
            auto_reset_delay=config['AUTO_RESET_DELAY_SEC'],
            noise=config['TARGET_NOISE'],
            rng=rng,
        )

    # ---- queries ----

    @property
    def is_active(self) -> bool:
        return self.status == GameStatus.ACTIVE

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    @property
    def position(self):
        return self.motion.target.position

    def player_for_token(self, token) -> Optional[Player]:
        return self.players.get(token)

    def player_named(self, name) -> Optional[Player]:
        for player in self.players.values():
            if player.name == name:
                return player
        return None

    def roster(self) -> List[dict]:
        return [p.to_dict() for p in self.players.values()]

    def snapshot(self) -> ObjectPosition:
        x, y = self.position
        return ObjectPosition(x=x, y=y)

    def noisy_position(self, position=None) -> dict:
        """Position with uniform jitter of total width ``noise`` on each axis."""
        x, y = position or self.position
        return {
            'x': x + (self.rng.random() * self.noise - self.noise / 2),
            'y': y + (self.rng.random() * self.noise - self.noise / 2),
        }

    def admit(self, identity, endpoint):
        return self.limiter.admit(str(identity), endpoint, self.clock())

    # ---- transitions ----

    def join(self, name):
        """Register ``name`` or return its existing assignment.

        Returns ``(player, created)``. Raises ``CapacityError`` only when a
        new player would exceed the roster cap.
        """
        with self._lock:
            existing = self.player_named(name)
            if existing:
                return existing, False
            if self.is_full:
                raise CapacityError(CapacityError.default_message)
            player = Player(name, random_color(self.rng))
            self.players[player.token] = player
            logger.info(f"[join] player={name} players={len(self.players)}")
            self.publish_roster()
            return player, True

    def fire(self, player: Player, x, y) -> dict:
        with self._lock:
            if not self.is_active:
                return {'message': 'Game Over', 'success': False}
            if not (_is_number(x) and _is_number(y)) or not self.playfield.contains(x, y):
                raise ValidationError('Invalid shot coordinates')

            shot = NewShot(x=x, y=y, username=player.name, color=player.color,
                           timestamp=int(self.clock() * 1000))
            self.broadcaster.publish(shot)

            hit = resolve((x, y), self.position, self.hit_radius)
            if hit:
                self._win(player)
                return {'message': 'Target hit! You won the game!', 'success': True, 'hit': True}
            return {'message': 'Missed the target', 'success': True, 'hit': False}

    def _win(self, player: Player) -> None:
        self.status = GameStatus.ENDED
        self.winner = player.name
        logger.info(f"[win] player={player.name} at={self.position}")
        self.broadcaster.publish(GameOver(winner=player.name))

        ticket = ResetTicket()
        self._pending_reset = ticket
        self.scheduler.call_later(self.auto_reset_delay, self._auto_reset, ticket)

    def _auto_reset(self, ticket: ResetTicket) -> None:
        with self._lock:
            if ticket.cancelled or ticket is not self._pending_reset:
                logger.info("[reset-skip] auto-reset superseded")
                return
            if self.is_active and self.winner is None:
                logger.info("[reset-skip] already active")
                return
            self.reset(reason='auto')

    def reset(self, reason='manual') -> None:
        with self._lock:
            if self._pending_reset is not None:
                self._pending_reset.cancel()
                self._pending_reset = None
            self.players.clear()
            self.limiter.clear()
            self.winner = None
            self.status = GameStatus.ACTIVE
            self.motion.respawn()
            logger.info(f"[reset] reason={reason}")
            self.broadcaster.publish(GameReset())

    def tick(self):
        """Advance the target and push its position. Frozen while ended."""
        with self._lock:
            if not self.is_active:
                return None
            self.motion.tick()
            self.broadcaster.publish(self.snapshot())
            return self.position

    def configure(self, speed=None, area=None) -> dict:
        if speed is not None and not _is_number(speed):
            raise ValidationError('Invalid speed configuration')
        if area is not None and not _is_number(area):
            raise ValidationError('Invalid area configuration')
        with self._lock:
            if speed is not None:
                self.motion.max_speed = max(self.motion.min_speed, speed)
            if area is not None:
                self.hit_radius = max(MIN_HIT_RADIUS, area)
            logger.info(f"[configure] max_speed={self.motion.max_speed} radius={self.hit_radius}")
            return {'speed': self.motion.max_speed, 'area': self.hit_radius}

    def publish_roster(self) -> None:
        self.broadcaster.publish(UserListUpdate(players=[PlayerInfo(**p) for p in self.roster()]))
