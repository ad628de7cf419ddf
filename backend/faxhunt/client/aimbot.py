"""Automated aiming client.

The bot joins, polls the noisy ``/api/target`` endpoint, predicts where the
target is heading and fires a small cluster of shots around that point.
Every network step has a fixed attempt budget and the whole run a fixed
round budget, so ``AimBot.run`` always terminates.
"""

import logging
import random
import time
from enum import Enum

import httpx

from .prediction import VelocityPredictor, spread_shots

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER = 5


class AimClientError(Exception):
    """Raised when the game server answers with an error status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class RateLimited(AimClientError):
    """Raised on 429; ``retry_after`` is the server's hint in seconds."""

    def __init__(self, retry_after, message='Too many requests'):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class AimClient:
    """Thin synchronous wrapper over the game's HTTP API."""

    def __init__(self, base_url='http://localhost:3000', timeout=5.0, transport=None):
        self.base_url = base_url.rstrip('/')
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)
        self.token = None
        self.username = None
        self.color = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self._client.close()

    def _headers(self):
        return {'Authorization': f"Bearer {self.token}"} if self.token else {}

    @staticmethod
    def _check(response: httpx.Response) -> dict:
        if response.status_code == 429:
            try:
                retry_after = int(response.headers.get('Retry-After', DEFAULT_RETRY_AFTER))
            except ValueError:
                retry_after = DEFAULT_RETRY_AFTER
            raise RateLimited(retry_after)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not response.is_success:
            message = body.get('error') if isinstance(body, dict) else None
            raise AimClientError(message or f"HTTP {response.status_code}", response.status_code)
        return body

    def join(self, client_id, secret) -> dict:
        body = self._check(self._client.post('/api/join', json={'clientId': client_id, 'secret': secret}))
        if not body.get('token'):
            raise AimClientError('join response carried no token')
        self.token = body['token']
        self.username = body.get('username')
        self.color = body.get('color')
        return body

    def target_position(self):
        body = self._check(self._client.get('/api/target', headers=self._headers()))
        x, y = body.get('x'), body.get('y')
        if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
            raise AimClientError(f"invalid position values: x={x}, y={y}")
        return x, y

    def fire(self, x, y) -> dict:
        return self._check(self._client.post('/api/fire', json={'x': x, 'y': y}, headers=self._headers()))


class BotState(str, Enum):
    JOIN = 'join'
    POLL = 'poll'
    FIRE = 'fire'
    COOLDOWN = 'cooldown'
    DONE = 'done'


class AimBot:
    def __init__(self, client: AimClient, client_id, secret, predictor=None, lead=0.4,
                 shots=5, spread=30.0, shot_pause=0.1, cooldown=2.0, max_attempts=5,
                 base_backoff=1.0, max_backoff=8.0, max_rounds=100,
                 bounds=(0.0, 0.0, 1024.0, 600.0), rng=None, clock=time.monotonic, sleep=time.sleep):
        self.client = client
        self.client_id = client_id
        self.secret = secret
        self.predictor = predictor or VelocityPredictor(bounds=bounds)
        self.lead = lead
        self.shots = shots
        self.spread = spread
        self.shot_pause = shot_pause
        self.cooldown = cooldown
        self.max_attempts = max_attempts
        self.base_backoff = base_backoff
        self.max_backoff = max_backoff
        self.max_rounds = max_rounds
        self.bounds = bounds
        self.rng = rng or random.Random()
        self.clock = clock
        self.sleep = sleep

        self.state = BotState.JOIN
        self.outcome = None
        self.rounds = 0
        self.shots_fired = 0

    def _attempt(self, action, label):
        """Call ``action`` up to ``max_attempts`` times; None when all fail."""
        backoff = self.base_backoff
        for attempt in range(1, self.max_attempts + 1):
            try:
                return action()
            except RateLimited as exc:
                wait = exc.retry_after
                logger.info(f"[{label}] rate limited, waiting {wait}s ({attempt}/{self.max_attempts})")
            except (AimClientError, httpx.HTTPError) as exc:
                wait = backoff
                backoff = min(backoff * 2, self.max_backoff)
                logger.warning(f"[{label}] failed: {exc} ({attempt}/{self.max_attempts})")
            if attempt < self.max_attempts:
                self.sleep(wait)
        logger.error(f"[{label}] giving up after {self.max_attempts} attempts")
        return None

    def _finish(self, outcome):
        self.outcome = outcome
        self.state = BotState.DONE

    def step(self) -> BotState:
        if self.state == BotState.JOIN:
            joined = self._attempt(lambda: self.client.join(self.client_id, self.secret), 'join')
            if joined is None:
                self._finish('join-failed')
            else:
                logger.info(f"[join] playing as {self.client.username} ({self.client.color})")
                self.state = BotState.POLL
        elif self.state == BotState.POLL:
            position = self._attempt(self.client.target_position, 'target')
            if position is None:
                self._finish('target-unavailable')
            else:
                self.predictor.add(self.clock(), *position)
                self.state = BotState.FIRE
        elif self.state == BotState.FIRE:
            self._fire_cluster()
            if self.state != BotState.DONE:
                self.state = BotState.COOLDOWN
        elif self.state == BotState.COOLDOWN:
            self.rounds += 1
            if self.rounds >= self.max_rounds:
                self._finish('out-of-rounds')
            else:
                self.sleep(self.cooldown)
                self.state = BotState.POLL
        return self.state

    def _fire_cluster(self):
        aim = self.predictor.predict(self.lead)
        if aim is None:
            logger.info(f"[predict] not enough data yet ({len(self.predictor)} samples)")
            return
        for x, y in spread_shots(aim, self.shots, self.spread, self.rng, self.bounds):
            try:
                result = self.client.fire(x, y)
            except RateLimited as exc:
                logger.info(f"[fire] rate limited, waiting {exc.retry_after}s")
                self.sleep(exc.retry_after)
                return
            except (AimClientError, httpx.HTTPError) as exc:
                logger.warning(f"[fire] request failed: {exc}")
            else:
                self.shots_fired += 1
                logger.info(f"[fire] ({x}, {y}): {result.get('message')}")
                if result.get('hit') is True:
                    self._finish('won')
                    return
                if result.get('success') is False:
                    self._finish('game-over')
                    return
            self.sleep(self.shot_pause)

    def run(self):
        while self.state != BotState.DONE:
            self.step()
        return self.outcome
