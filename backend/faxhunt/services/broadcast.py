import logging
from typing import Callable, List, Set

from faxhunt.events import to_wire

logger = logging.getLogger(__name__)


class Broadcaster:
    """Fans game events out to every connected viewer.

    ``emit`` has the signature of ``SocketIO.emit``. Each viewer is emitted
    to separately so one broken connection cannot keep the event from the
    others; a viewer whose emit raises is logged and dropped.
    """

    def __init__(self, emit: Callable, namespace: str = '/'):
        self._emit = emit
        self.namespace = namespace
        self._viewers: Set[str] = set()

    @property
    def viewer_count(self) -> int:
        return len(self._viewers)

    def attach(self, sid: str) -> None:
        self._viewers.add(sid)

    def detach(self, sid: str) -> None:
        self._viewers.discard(sid)

    def send_to(self, sid: str, event) -> bool:
        name, data = to_wire(event)
        try:
            self._emit(name, data, to=sid, namespace=self.namespace)
        except Exception:
            logger.warning(f"[broadcast] dropping viewer {sid} after failed {name}", exc_info=True)
            self.detach(sid)
            return False
        return True

    def publish(self, event) -> List[str]:
        """Send ``event`` to all viewers; returns the sids that failed."""
        failed = []
        for sid in list(self._viewers):
            if not self.send_to(sid, event):
                failed.append(sid)
        return failed
