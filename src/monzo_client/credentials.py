"""Thread-safe holder for the client's current access token."""

import threading

from monzo_client.models import AccessToken


class TokenCell:
    """Single-writer, multi-reader cell holding an immutable AccessToken.

    Readers always see a complete token, either the one before a swap or the
    one after it. The cell does not hold callers back while a refresh is in
    flight: a request that read the old token may still be sent with it.
    """

    def __init__(self, token: AccessToken | None = None) -> None:
        self._lock = threading.Lock()
        self._token = token

    def get(self) -> AccessToken | None:
        """Return the current token snapshot."""
        with self._lock:
            return self._token

    def swap(self, token: AccessToken | None) -> AccessToken | None:
        """Replace the current token and return the previous one."""
        with self._lock:
            previous = self._token
            self._token = token
            return previous

    def clear(self) -> None:
        """Drop the current token."""
        self.swap(None)
