from __future__ import annotations

from reentry import DeliveryManager, ManagerSnapshot, kind

CLOSED = kind("closed")
DISPOSED = kind("disposed")


class TestSnapshot:
    def test_root_region_only(self, manager: DeliveryManager):
        manager.register(CLOSED)
        snapshot = manager.snapshot()

        assert isinstance(snapshot, ManagerSnapshot)
        assert len(snapshot.regions) == 1
        assert snapshot.depth == 0
        assert snapshot.current.kinds == (CLOSED,)
        assert dict(snapshot.current.pending_counts) == {}

    def test_regions_listed_root_first(self, manager: DeliveryManager):
        manager.register(CLOSED)
        manager.register(CLOSED)
        token = manager.enter_suspension()
        manager.register(DISPOSED)
        manager.raise_(CLOSED)

        snapshot = manager.snapshot()

        assert [region.depth for region in snapshot.regions] == [0, 1]
        assert dict(snapshot.regions[0].pending_counts) == {CLOSED: 2}
        assert snapshot.current.kinds == (DISPOSED,)
        assert snapshot.pending_kinds() == frozenset({CLOSED})

        manager.unregister(DISPOSED)
        manager.leave_suspension(token)

    def test_snapshot_is_not_affected_by_later_changes(self, manager: DeliveryManager):
        manager.register(CLOSED)
        snapshot = manager.snapshot()
        manager.raise_(CLOSED)
        manager.register(DISPOSED)

        assert snapshot.current.entries[0].pending is False
        assert snapshot.current.kinds == (CLOSED,)

    def test_format_marks_pending_entries(self, manager: DeliveryManager):
        manager.register(CLOSED)
        manager.register(DISPOSED)
        manager.raise_(DISPOSED)
        token = manager.enter_suspension()

        assert manager.snapshot().format() == (
            "region 0: [Kind('closed'), Kind('disposed')*]\nregion 1: []"
        )
        manager.leave_suspension(token)
