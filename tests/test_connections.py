from floorsync.connections import ConnectionRegistry


def test_set_role_joins_role_room() -> None:
    registry = ConnectionRegistry()
    waiter = registry.open()
    cashier = registry.open()

    registry.set_role(waiter.id, "waiter")
    registry.set_role(cashier.id, "cashier")

    assert waiter.role == "waiter"
    assert [s.id for s in registry.members("waiter")] == [waiter.id]
    assert [s.id for s in registry.members("cashier")] == [cashier.id]


def test_changing_role_keeps_previous_room() -> None:
    registry = ConnectionRegistry()
    session = registry.open()

    registry.set_role(session.id, "waiter")
    registry.set_role(session.id, "cashier")

    assert session.role == "cashier"
    assert session.rooms == {"waiter", "cashier"}
    assert registry.members("waiter") == [session]


def test_identify_overwrites_profile() -> None:
    registry = ConnectionRegistry()
    session = registry.open()

    registry.identify(session.id, {"name": "Ana"})
    registry.identify(session.id, {"name": "Luis", "terminal": "T2"})

    assert session.profile == {"name": "Luis", "terminal": "T2"}


def test_join_and_leave_rooms() -> None:
    registry = ConnectionRegistry()
    a = registry.open()
    b = registry.open()

    registry.join(a.id, "kitchen")
    registry.join(b.id, "kitchen")
    registry.leave(a.id, "kitchen")

    assert registry.members("kitchen") == [b]
    registry.leave(b.id, "kitchen")
    assert registry.members("kitchen") == []
    registry.leave(b.id, "kitchen")


def test_remove_is_idempotent_and_clears_rooms() -> None:
    registry = ConnectionRegistry()
    session = registry.open()
    registry.set_role(session.id, "waiter")

    assert registry.remove(session.id) is session
    assert registry.remove(session.id) is None
    assert registry.get(session.id) is None
    assert registry.members("waiter") == []
    assert len(registry) == 0


def test_device_ids_include_session_and_tracked_devices() -> None:
    registry = ConnectionRegistry()
    session = registry.open()

    registry.track_device(session.id, "W1")
    registry.track_device(session.id, "W1")
    registry.track_device(session.id, session.id)
    registry.track_device(session.id, "T6")
    registry.untrack_device("T6")

    assert session.device_ids() == [session.id, "W1"]


def test_device_has_a_single_owner() -> None:
    registry = ConnectionRegistry()
    stale = registry.open()
    fresh = registry.open()

    registry.track_device(stale.id, "W1")
    registry.track_device(fresh.id, "W1")

    assert stale.device_ids() == [stale.id]
    assert fresh.device_ids() == [fresh.id, "W1"]


def test_release_drops_claims_of_every_session() -> None:
    registry = ConnectionRegistry()
    owner = registry.open()
    other = registry.open()
    registry.track_device(owner.id, "K1")
    registry.track_device(owner.id, "K2")

    registry.untrack_device("K1")

    assert owner.devices == ["K2"]
    assert other.devices == []
