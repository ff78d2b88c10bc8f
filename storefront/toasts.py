"""
File de notifications éphémères.
- show() ajoute un Toast (id unique) et programme sa suppression après `duration` ms
- remove() est idempotent; clear() vide la file et annule les minuteries
- ordre d'insertion conservé, pas de fusion des doublons
Les minuteries s'exécutent sur des threads: la liste est protégée par un verrou.
"""
import itertools
import threading
from typing import Dict, Optional, Tuple

from .models import Toast, ToastType


DEFAULT_DURATION_MS = 4000


class ToastQueue:
    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._toasts: Tuple[Toast, ...] = ()
        self._timers: Dict[int, threading.Timer] = {}

    @property
    def toasts(self) -> Tuple[Toast, ...]:
        with self._lock:
            return self._toasts

    def __len__(self) -> int:
        return len(self.toasts)

    def show(self, message: str, type: str = ToastType.INFO.value, duration: Optional[int] = None) -> int:
        """Affiche un toast; duration en ms (None => DEFAULT_DURATION_MS, 0 => expire aussitôt)."""
        if duration is None:
            duration = DEFAULT_DURATION_MS
        toast = Toast(id=next(self._ids), message=message, type=ToastType(type).value, duration=duration)
        timer = threading.Timer(duration / 1000.0, self.remove, args=(toast.id,))
        timer.daemon = True
        with self._lock:
            self._toasts = self._toasts + (toast,)
            self._timers[toast.id] = timer
        timer.start()
        return toast.id

    def remove(self, toast_id: int) -> None:
        with self._lock:
            self._toasts = tuple(t for t in self._toasts if t.id != toast_id)
            timer = self._timers.pop(toast_id, None)
        if timer is not None and timer is not threading.current_thread():
            timer.cancel()

    def clear(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._toasts = ()
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    def success(self, message: str, duration: Optional[int] = None) -> int:
        return self.show(message, ToastType.SUCCESS.value, duration)

    def error(self, message: str, duration: Optional[int] = None) -> int:
        return self.show(message, ToastType.ERROR.value, duration)

    def warning(self, message: str, duration: Optional[int] = None) -> int:
        return self.show(message, ToastType.WARNING.value, duration)

    def info(self, message: str, duration: Optional[int] = None) -> int:
        return self.show(message, ToastType.INFO.value, duration)
