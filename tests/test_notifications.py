"""Tests for auto-dismissing notifications."""

import asyncio

import pytest

from services.notifications import Notifier


class TestNotifier:

    @pytest.mark.asyncio
    async def test_show_then_auto_dismiss(self):
        changes = []
        notifier = Notifier(on_change=changes.append, duration=0.01)

        shown = notifier.show("Workout saved!")
        assert notifier.current == shown
        assert shown.is_error is False

        await asyncio.sleep(0.05)

        assert notifier.current is None
        assert changes == [shown, None]

    @pytest.mark.asyncio
    async def test_newer_notification_replaces_and_restarts_timer(self):
        changes = []
        notifier = Notifier(on_change=changes.append, duration=0.05)

        first = notifier.show("First")
        await asyncio.sleep(0.03)
        second = notifier.show("Second", is_error=True)
        await asyncio.sleep(0.03)

        assert notifier.current == second
        assert second.id != first.id

        await asyncio.sleep(0.05)
        assert notifier.current is None
        assert changes == [first, second, None]

    @pytest.mark.asyncio
    async def test_close_cancels_pending_dismissal(self):
        changes = []
        notifier = Notifier(on_change=changes.append, duration=0.01)
        notifier.show("Bye")

        notifier.close()
        await asyncio.sleep(0.03)

        assert len(changes) == 1

    def test_default_duration_comes_from_settings(self):
        assert Notifier().duration == 3.0

    def test_to_dict(self):
        from services.notifications import Notification

        assert Notification(1, "Saved", False).to_dict() == {"id": 1, "message": "Saved", "is_error": False}
