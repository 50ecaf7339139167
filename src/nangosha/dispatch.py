"""Method-name routing for decoded JSON-RPC messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, TypeAlias

from nangosha.messages import JSONValue, Message, Request, RequestId

logger = logging.getLogger(__name__)

RequestHandler: TypeAlias = Callable[[Request], JSONValue]
NotificationHandler: TypeAlias = Callable[[Message], None]
SilentReason: TypeAlias = Literal["notification", "unknown-method"]


@dataclass(frozen=True)
class Reply:
    id: RequestId
    result: JSONValue


@dataclass(frozen=True)
class Silent:
    """No response is written for this message."""

    method: str
    reason: SilentReason


Outcome: TypeAlias = Reply | Silent


@dataclass(frozen=True)
class _Route:
    handler: Callable[..., JSONValue]
    replies: bool


class Dispatcher:
    """Routes messages to handlers registered per method name.

    Unregistered methods are dropped without a response. Request handlers
    always produce a ``Reply`` (``None`` results included) when the incoming
    message carries an id; notification handlers never do.
    """

    def __init__(self) -> None:
        self._routes: dict[str, _Route] = {}

    def request(self, method: str) -> Callable[[RequestHandler], RequestHandler]:
        def _register(handler: RequestHandler) -> RequestHandler:
            self._routes[method] = _Route(handler=handler, replies=True)
            return handler

        return _register

    def notification(
        self, method: str
    ) -> Callable[[NotificationHandler], NotificationHandler]:
        def _register(handler: NotificationHandler) -> NotificationHandler:
            self._routes[method] = _Route(handler=handler, replies=False)
            return handler

        return _register

    @property
    def methods(self) -> list[str]:
        return list(self._routes)

    def dispatch(self, message: Message) -> Outcome:
        route = self._routes.get(message.method)
        if route is None:
            return Silent(method=message.method, reason="unknown-method")
        logger.debug("dispatching %s", message.method)
        result = route.handler(message)
        if not route.replies or not isinstance(message, Request):
            return Silent(method=message.method, reason="notification")
        return Reply(id=message.id, result=result)
