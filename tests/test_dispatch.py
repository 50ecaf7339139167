from __future__ import annotations

from nangosha.dispatch import Dispatcher, Reply, Silent
from nangosha.messages import Notification, Request


def test_unknown_method_is_dropped_without_calling_anything() -> None:
    dispatcher = Dispatcher()
    calls: list[str] = []

    @dispatcher.request("known")
    def _known(message):
        calls.append(message.method)
        return {}

    outcome = dispatcher.dispatch(Request(id=1, method="workspace/unknown"))
    assert outcome == Silent(method="workspace/unknown", reason="unknown-method")
    assert calls == []


def test_request_handler_reply_carries_request_id() -> None:
    dispatcher = Dispatcher()
    dispatcher.request("echo")(lambda message: {"params": message.params})
    outcome = dispatcher.dispatch(Request(id="a-1", method="echo", params=[1]))
    assert outcome == Reply(id="a-1", result={"params": [1]})


def test_request_handler_returning_none_still_replies() -> None:
    dispatcher = Dispatcher()
    dispatcher.request("nothing")(lambda message: None)
    assert dispatcher.dispatch(Request(id=9, method="nothing")) == Reply(id=9, result=None)


def test_notification_handler_never_replies() -> None:
    dispatcher = Dispatcher()
    seen: list[object] = []
    dispatcher.notification("note")(lambda message: seen.append(message.params))
    assert dispatcher.dispatch(Notification(method="note", params={"x": 1})) == Silent(
        method="note", reason="notification"
    )
    # An id on a notification-style method does not earn a response either.
    assert dispatcher.dispatch(Request(id=2, method="note", params={"x": 2})) == Silent(
        method="note", reason="notification"
    )
    assert seen == [{"x": 1}, {"x": 2}]


def test_notification_sent_to_request_handler_gets_no_reply() -> None:
    dispatcher = Dispatcher()
    dispatcher.request("ask")(lambda message: 42)
    assert isinstance(dispatcher.dispatch(Notification(method="ask")), Silent)


def test_registration_returns_handler_and_lists_methods() -> None:
    dispatcher = Dispatcher()

    def handler(message):
        return None

    assert dispatcher.request("a")(handler) is handler
    dispatcher.notification("b")(handler)
    assert dispatcher.methods == ["a", "b"]
