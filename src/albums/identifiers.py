"""Album identifier generation."""

from __future__ import annotations

import secrets
import string
import threading
import time

from core.constants import ALBUM_ID_PREFIX, ALBUM_ID_SUFFIX_LENGTH


class AlbumIdGenerator:
    """Generate stable album ids.

    Ids are a fixed prefix, a strictly increasing microsecond stamp and a
    random mixed-case alphabetic suffix, e.g. ``a1760000000000000QbXrTa``.
    """

    def __init__(self, suffix_length: int = ALBUM_ID_SUFFIX_LENGTH) -> None:
        self._suffix_length = suffix_length
        self._last_stamp = 0
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Return a new album id."""
        with self._lock:
            stamp = max(time.time_ns() // 1000, self._last_stamp + 1)
            self._last_stamp = stamp
        suffix = "".join(
            secrets.choice(string.ascii_letters) for _ in range(self._suffix_length)
        )
        return f"{ALBUM_ID_PREFIX}{stamp}{suffix}"
