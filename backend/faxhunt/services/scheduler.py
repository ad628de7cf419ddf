import logging

from faxhunt import socketio

logger = logging.getLogger(__name__)


class ResetTicket:
    """Cancellation token for one scheduled auto-reset."""

    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Runs a callback after a delay on a background task.

    ``spawn`` and ``sleep`` default to the Socket.IO helpers, so under
    eventlet/gevent the wait is a cooperative yield. With ``manual=True``
    nothing runs on its own: calls queue up in ``pending`` until
    ``run_pending()`` is called (used in TESTING).
    """

    def __init__(self, spawn=None, sleep=None, manual=False):
        self._spawn = spawn or socketio.start_background_task
        self._sleep = sleep or socketio.sleep
        self.manual = manual
        self.pending = []

    def call_later(self, delay, fn, *args):
        if self.manual:
            self.pending.append((delay, fn, args))
            return

        def _runner():
            if delay > 0:
                self._sleep(delay)
            try:
                fn(*args)
            except Exception:
                logger.exception(f"[timer-fail] {getattr(fn, '__name__', fn)}")

        self._spawn(_runner)

    def run_pending(self) -> int:
        calls, self.pending = self.pending, []
        for _delay, fn, args in calls:
            fn(*args)
        return len(calls)


def start_background_loops(app, session):
    """Start the position tick and the periodic roster broadcast."""
    tick_sec = int(app.config.get('TICK_INTERVAL_MS', 50)) / 1000.0
    roster_sec = float(app.config.get('ROSTER_INTERVAL_SEC', 10))

    def _tick_loop():
        while True:
            socketio.sleep(tick_sec)
            try:
                session.tick()
            except Exception:
                app.logger.exception("[tick] position update failed")

    def _roster_loop():
        while True:
            socketio.sleep(roster_sec)
            try:
                session.publish_roster()
            except Exception:
                app.logger.exception("[roster] broadcast failed")

    app.logger.info(f"[loops] tick={tick_sec}s roster={roster_sec}s")
    socketio.start_background_task(_tick_loop)
    socketio.start_background_task(_roster_loop)
