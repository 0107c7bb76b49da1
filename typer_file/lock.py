import logging
import threading

from .errors import ContentionError

logger = logging.getLogger(__name__)


class HandleLock:
    """
    Exclusive lock guarding one resolved handle.

    Other threads block until the holder releases, unless ``blocking`` is
    false, in which case a held lock raises ``ContentionError``. The holding
    thread asking again always raises, because waiting on itself would never
    return.
    """

    def __init__(self, name: str = "handle"):
        self.name = name
        self._lock = threading.Lock()
        self._owner: int | None = None

    def __repr__(self):
        return f"HandleLock({self.name!r}, locked={self.locked()})"

    def locked(self) -> bool:
        return self._lock.locked()

    def acquire(self, blocking: bool = True) -> None:
        me = threading.get_ident()
        if self._owner == me:
            raise ContentionError(f"{self.name} is already locked by this thread")
        if not self._lock.acquire(blocking=False):
            if not blocking:
                raise ContentionError(f"{self.name} is locked by another thread")
            logger.debug("waiting for %s", self.name)
            self._lock.acquire()
        self._owner = me

    def release(self) -> None:
        self._owner = None
        self._lock.release()


STDIN_LOCK = HandleLock("<stdin>")
STDOUT_LOCK = HandleLock("<stdout>")
