"""HTTP transports used for sending scan requests."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

from requests import PreparedRequest, Response
from requests.adapters import BaseAdapter, HTTPAdapter

from dalfox.models import Options

__all__ = ["DefaultTransport", "create_default_transport", "get_transport"]

logger = logging.getLogger(__name__)


class DefaultTransport(HTTPAdapter):
    """Adapter that skips certificate checks, closes every connection and
    applies a connect timeout and an optional proxy."""

    def __init__(self, timeout: float | None = None, proxy: str | None = None) -> None:
        super().__init__(max_retries=0)
        self.timeout = timeout
        self.proxy = proxy

    def send(self, request: PreparedRequest, **kwargs: Any) -> Response:
        """Send ``request`` with this transport's settings applied."""
        request.headers["Connection"] = "close"
        kwargs["verify"] = False
        if kwargs.get("timeout") is None and self.timeout:
            kwargs["timeout"] = (self.timeout, None)
        if self.proxy:
            kwargs["proxies"] = {"http": self.proxy, "https": self.proxy}
        return super().send(request, **kwargs)


def create_default_transport(timeout_seconds: int) -> DefaultTransport:
    """Return a default transport whose connect timeout is ``timeout_seconds``."""
    return DefaultTransport(timeout=timeout_seconds or None)


def _validate_proxy(address: str) -> str:
    parts = urlsplit(address)
    parts.port  # raises ValueError for a malformed port
    return address


def get_transport(options: Options) -> BaseAdapter:
    """Return the transport to use for ``options``.

    A custom transport wins over the default one. A proxy is applied only to a
    :class:`DefaultTransport`; an invalid proxy address is logged and ignored.
    """
    if options.custom_transport is not None:
        transport = options.custom_transport
    else:
        transport = create_default_transport(options.timeout)

    if options.proxy_address:
        if isinstance(transport, DefaultTransport):
            try:
                transport.proxy = _validate_proxy(options.proxy_address)
            except ValueError as err:
                logger.error("not running %s from proxy option", err)
        else:
            logger.warning(
                "Custom transport is not a DefaultTransport, proxy settings will not be applied"
            )
    return transport