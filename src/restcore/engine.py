"""Process-wide transport engine shared by every client."""

from __future__ import annotations

import ssl
import threading

import certifi

from .errors import TransportCode, TransportError


class TransportEngine:
    """Reference counted owner of the default trust store.

    The trust store is loaded when the first client acquires the engine and
    dropped when the last one releases it. Both transitions happen under a
    single lock so no thread sees a half initialized engine.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._count = 0
        self._ca_bundle: str | None = None
        self._ssl_context: ssl.SSLContext | None = None

    @property
    def count(self) -> int:
        return self._count

    @property
    def initialized(self) -> bool:
        return self._ssl_context is not None

    def acquire(self) -> None:
        with self._lock:
            if self._count == 0:
                self._ca_bundle = certifi.where()
                self._ssl_context = ssl.create_default_context(cafile=self._ca_bundle)
            self._count += 1

    def release(self) -> None:
        with self._lock:
            if self._count == 0:
                return
            self._count -= 1
            if self._count == 0:
                self._ssl_context = None
                self._ca_bundle = None

    @property
    def ca_bundle(self) -> str:
        bundle = self._ca_bundle
        if bundle is None:
            raise TransportError(TransportCode.FAILED_INIT, "Transport engine is not initialized")
        return bundle

    def default_ssl_context(self) -> ssl.SSLContext:
        context = self._ssl_context
        if context is None:
            raise TransportError(TransportCode.FAILED_INIT, "Transport engine is not initialized")
        return context


engine = TransportEngine()


__all__ = ["TransportEngine", "engine"]
