class Interpolator:
    """Smooths discrete authoritative positions into continuous motion.

    Each frame moves the rendered point towards the latest authoritative
    point by ``min(elapsed / window, 1)`` of the remaining distance, where
    ``elapsed`` is the time since that authoritative point arrived. Once a
    full window has passed the rendered point sits exactly on it.

    Times are in seconds; ``window`` defaults to 100 ms.
    """

    def __init__(self, start=(400.0, 300.0), window=0.1, now=0.0):
        self.window = window
        self.rendered = tuple(start)
        self.authoritative = tuple(start)
        self.received_at = now

    def update(self, x, y, now):
        self.authoritative = (x, y)
        self.received_at = now

    def snap(self, x, y, now):
        """Jump both points to ``(x, y)``, e.g. after a game reset."""
        self.rendered = (x, y)
        self.update(x, y, now)

    def blend_factor(self, now) -> float:
        if self.window <= 0:
            return 1.0
        elapsed = max(0.0, now - self.received_at)
        return min(elapsed / self.window, 1.0)

    def step(self, now):
        alpha = self.blend_factor(now)
        if alpha >= 1.0:
            self.rendered = self.authoritative
        else:
            rx, ry = self.rendered
            ax, ay = self.authoritative
            self.rendered = (rx + (ax - rx) * alpha, ry + (ay - ry) * alpha)
        return self.rendered
