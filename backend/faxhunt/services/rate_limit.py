import math
from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class Admission:
    allowed: bool
    retry_after: int = 0


ALLOW = Admission(True)


class SlidingWindowLimiter:
    """Per (identity, endpoint) sliding-window admission control.

    ``rules`` maps an endpoint key to ``(window_ms, max_requests)``. Each
    check prunes timestamps that fell out of the trailing window before
    counting, so the budget frees up one request at a time instead of
    resetting at fixed boundaries.
    """

    def __init__(self, rules: Dict[str, Tuple[int, int]], sweep_every=256):
        self.rules = dict(rules)
        self.sweep_every = sweep_every
        self._windows: Dict[Tuple[str, str], List[float]] = {}
        self._calls = 0

    def admit(self, identity: str, endpoint: str, now: float) -> Admission:
        """Record a request at ``now`` (seconds) if the window has room."""
        rule = self.rules.get(endpoint)
        if rule is None:
            return ALLOW
        window_ms, max_requests = rule
        now_ms = now * 1000.0
        self._calls += 1
        if self.sweep_every and self._calls % self.sweep_every == 0:
            self.sweep(now)
        key = (identity, endpoint)
        window = [t for t in self._windows.get(key, ()) if now_ms - t < window_ms]
        self._windows[key] = window

        if len(window) >= max_requests:
            if not window:
                # Zero budget: nothing to remember for this key
                del self._windows[key]
                return Admission(False, max(1, math.ceil(window_ms / 1000.0)))
            retry_after = math.ceil((window_ms - (now_ms - window[0])) / 1000.0)
            return Admission(False, max(1, retry_after))

        window.append(now_ms)
        return ALLOW

    def sweep(self, now: float) -> int:
        """Drop keys whose whole history fell out of their window.

        Keeps memory bounded by the identities seen recently rather than
        every identity ever seen. Returns the number of keys removed.
        """
        now_ms = now * 1000.0
        stale = []
        for key, window in self._windows.items():
            rule = self.rules.get(key[1])
            if rule is None or not window or now_ms - window[-1] >= rule[0]:
                stale.append(key)
        for key in stale:
            del self._windows[key]
        return len(stale)

    def key_count(self) -> int:
        return len(self._windows)

    def live_count(self, identity: str, endpoint: str) -> int:
        return len(self._windows.get((identity, endpoint), ()))

    def clear(self) -> None:
        self._windows.clear()
