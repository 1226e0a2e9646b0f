import asyncio
from datetime import datetime

from app.services.notifier import NullNotifier, WSManager


class FakeSocket:
    def __init__(self, fail=False):
        self.accepted = False
        self.fail = fail
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("connection closed")
        self.sent.append(data)


async def settle(rounds=5):
    for _ in range(rounds):
        await asyncio.sleep(0.01)


def test_null_notifier_accepts_anything():
    notifier = NullNotifier()
    assert notifier.broadcast_to_dashboards("alert:new", {"id": 1}) is None
    assert notifier.send_to_user(1, "alert:new") is None


def test_broadcast_without_subscribers_or_loop_is_silent():
    manager = WSManager()
    manager.broadcast_to_dashboards("alert:new", {"id": 1})
    manager.send_to_user("7", "alert:new", {"id": 1})
    assert manager.subscriber_count() == 0


def test_broadcast_reaches_dashboards_and_drops_dead_sockets():
    async def scenario():
        manager = WSManager()
        good, dead, guard = FakeSocket(), FakeSocket(fail=True), FakeSocket()
        await manager.connect_dashboard(good)
        await manager.connect_dashboard(dead)
        await manager.connect_user(guard, 7)

        manager.broadcast_to_dashboards("alert:new", {"id": 1, "at": datetime(2026, 3, 1, 9, 0)})
        await settle()

        assert good.accepted and guard.accepted
        assert good.sent == [{"event": "alert:new", "data": {"id": 1, "at": "2026-03-01T09:00:00"}}]
        assert guard.sent == []
        assert dead not in manager.dashboards
        assert manager.subscriber_count() == 2

    asyncio.run(scenario())


def test_send_to_user_targets_only_that_channel():
    async def scenario():
        manager = WSManager()
        dashboard, guard, other = FakeSocket(), FakeSocket(), FakeSocket()
        await manager.connect_dashboard(dashboard)
        await manager.connect_user(guard, "7")
        await manager.connect_user(other, "8")

        manager.send_to_user(7, "alert:new", {"id": 3})
        await settle()

        assert guard.sent == [{"event": "alert:new", "data": {"id": 3}}]
        assert other.sent == [] and dashboard.sent == []

    asyncio.run(scenario())


def test_broadcast_from_worker_thread_does_not_block():
    async def scenario():
        manager = WSManager()
        dashboard = FakeSocket()
        await manager.connect_dashboard(dashboard)

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, manager.broadcast_to_dashboards, "dashboard:refresh", None)
        await settle()

        assert dashboard.sent == [{"event": "dashboard:refresh", "data": None}]

    asyncio.run(scenario())


def test_unserializable_payload_is_dropped_quietly():
    async def scenario():
        manager = WSManager()
        dashboard = FakeSocket()
        await manager.connect_dashboard(dashboard)

        manager.broadcast_to_dashboards("alert:new", object())
        await settle()

        assert dashboard.sent == []

    asyncio.run(scenario())


def test_disconnect_removes_empty_user_channels():
    async def scenario():
        manager = WSManager()
        guard = FakeSocket()
        await manager.connect_user(guard, "9")
        manager.disconnect(guard)
        assert manager.user_channels == {}

    asyncio.run(scenario())
