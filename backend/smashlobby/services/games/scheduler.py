import logging
from typing import Callable

logger = logging.getLogger(__name__)


class BackgroundScheduler:
    """Run one-shot callbacks after a delay on Socket.IO background tasks.

    Works under whichever async mode the ``socketio`` instance picked
    (threading, eventlet, gevent). Timers are never cancelled; the
    callbacks themselves decide whether they are stale.
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def __call__(self, delay: float, callback: Callable[[], None]) -> None:
        def _runner():
            if delay > 0:
                self.socketio.sleep(delay)
            try:
                callback()
            except Exception:
                logger.exception(f"[timer-error] callback={callback!r}")

        self.socketio.start_background_task(_runner)
