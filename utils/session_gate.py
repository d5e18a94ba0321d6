"""All-or-nothing access gate backed by a client-side persisted store.

The persisted value is not a bare boolean: a successful login stores a
signed, time-limited token scoped to the gate (``site`` or ``admin``). The
gate derives its state from that token when constructed and again whenever
:meth:`SessionGate.refresh` is called, which is the hook for "the store may
have been changed by another context".
"""
from __future__ import annotations

import secrets
from typing import Callable, MutableMapping, Optional

from itsdangerous import BadSignature, URLSafeTimedSerializer

SCOPES = ("site", "admin")


class SessionGate:
    def __init__(
        self,
        scope: str,
        store: MutableMapping,
        secret_key: str,
        max_age: Optional[int] = None,
    ):
        if scope not in SCOPES:
            raise ValueError(f"Unknown gate scope: {scope!r}")
        self.scope = scope
        self.store = store
        self.max_age = max_age
        self._serializer = URLSafeTimedSerializer(secret_key, salt=f"session-gate:{scope}")
        self._authenticated = False
        self.refresh()

    @property
    def store_key(self) -> str:
        return f"{self.scope}_auth"

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def _token_is_valid(self, token) -> bool:
        if not token or not isinstance(token, str):
            return False
        try:
            payload = self._serializer.loads(token, max_age=self.max_age)
        except BadSignature:
            # SignatureExpired is a BadSignature too
            return False
        return isinstance(payload, dict) and payload.get("scope") == self.scope

    def refresh(self) -> bool:
        """Re-read the persisted token and update the state from it."""
        token = self.store.get(self.store_key)
        self._authenticated = self._token_is_valid(token)
        if token and not self._authenticated:
            self.store.pop(self.store_key, None)
        return self._authenticated

    def login(self, password: str, checker: Callable[[str], bool]) -> bool:
        """Ask ``checker`` to verify ``password``; persist a token on success.

        A failed check leaves the current state untouched.
        """
        if not checker(password):
            return False
        token = self._serializer.dumps({"scope": self.scope, "nonce": secrets.token_hex(8)})
        self.store[self.store_key] = token
        self._authenticated = True
        return True

    def logout(self) -> None:
        self.store.pop(self.store_key, None)
        self._authenticated = False
