# tests/unit/test_notifier.py
"""针对通知分发器的单元测试。"""

from trans_desk.notifier import Notification, NotificationKind, Notifier


def _notification() -> Notification:
    return Notification(
        kind=NotificationKind.ENGINE_UNREACHABLE, message="down", error="timeout"
    )


def test_subscribers_receive_notifications_until_unsubscribed() -> None:
    notifier = Notifier()
    received: list[Notification] = []
    unsubscribe = notifier.subscribe(received.append)

    notifier.notify(_notification())
    unsubscribe()
    unsubscribe()
    notifier.notify(_notification())

    assert len(received) == 1
    assert received[0].error == "timeout"


def test_failing_subscriber_does_not_block_others() -> None:
    notifier = Notifier()
    received: list[Notification] = []

    def broken(_: Notification) -> None:
        raise RuntimeError("ui gone")

    notifier.subscribe(broken)
    notifier.subscribe(received.append)
    notifier.notify(_notification())

    assert [n.kind for n in received] == [NotificationKind.ENGINE_UNREACHABLE]
