from datetime import datetime, timedelta

from app.constants.tracking import AlertType
from app.db.crud import alert as alert_crud
from app.db.models.alert import Alert


def test_create_alert_is_idempotent_while_open(db, make_guard, make_site, make_shift):
    shift = make_shift(make_guard(), make_site())

    first = alert_crud.create_alert(db, shift.id, AlertType.IDLE, "stationary")
    second = alert_crud.create_alert(db, shift.id, "idle", "a different message")

    assert first.id == second.id
    assert second.message == "stationary"
    assert db.query(Alert).filter(Alert.shift_id == shift.id).count() == 1


def test_alert_types_are_deduplicated_independently(db, make_guard, make_shift):
    shift = make_shift(make_guard())

    idle = alert_crud.create_alert(db, shift.id, AlertType.IDLE, "idle")
    oob = alert_crud.create_alert(db, shift.id, AlertType.OUT_OF_BOUNDS, "left")

    assert idle.id != oob.id
    assert {a.type for a in alert_crud.get_open_alerts_for_shift(db, shift.id)} == {"idle", "out_of_bounds"}


def test_resolved_alert_allows_a_new_one(db, make_guard, make_shift):
    shift = make_shift(make_guard())

    first = alert_crud.create_alert(db, shift.id, AlertType.IDLE, "idle")
    resolved = alert_crud.resolve_alert(db, first.id)
    assert resolved.resolved_at is not None

    second = alert_crud.create_alert(db, shift.id, AlertType.IDLE, "idle again")
    assert second.id != first.id
    assert second.resolved_at is None


def test_resolve_unknown_alert_returns_none(db):
    assert alert_crud.resolve_alert(db, 9999) is None


def test_racing_insert_returns_existing_open_alert(db, make_guard, make_shift, monkeypatch):
    shift = make_shift(make_guard())
    winner = alert_crud.create_alert(db, shift.id, AlertType.OUT_OF_BOUNDS, "winner")

    real_lookup = alert_crud.get_open_alert
    calls = []

    def stale_lookup(session, shift_id, alert_type):
        # The first read happens before the competing insert became visible
        calls.append(alert_type)
        if len(calls) == 1:
            return None
        return real_lookup(session, shift_id, alert_type)

    monkeypatch.setattr(alert_crud, "get_open_alert", stale_lookup)

    loser = alert_crud.create_alert(db, shift.id, AlertType.OUT_OF_BOUNDS, "loser")

    assert loser.id == winner.id
    assert len(calls) == 2
    assert db.query(Alert).filter(Alert.resolved_at == None).count() == 1


def test_list_alerts_filters_and_enriches(db, make_guard, make_site, make_shift):
    guard = make_guard("Maria Santos")
    site = make_site("North Pier")
    shift = make_shift(guard, site)
    siteless = make_shift(make_guard("Pedro Reyes"), status="completed")

    idle = alert_crud.create_alert(db, shift.id, AlertType.IDLE, "idle")
    oob = alert_crud.create_alert(db, shift.id, AlertType.OUT_OF_BOUNDS, "left")
    sos = alert_crud.create_alert(db, siteless.id, AlertType.SOS, "help")
    alert_crud.resolve_alert(db, oob.id)

    everything = alert_crud.list_alerts(db)
    assert {a.id for a in everything} == {idle.id, oob.id, sos.id}

    open_only = alert_crud.list_alerts(db, resolved=False)
    assert {a.id for a in open_only} == {idle.id, sos.id}

    resolved_only = alert_crud.list_alerts(db, resolved=True)
    assert [a.id for a in resolved_only] == [oob.id]

    idle_only = alert_crud.list_alerts(db, alert_type=AlertType.IDLE)
    assert [a.id for a in idle_only] == [idle.id]
    assert idle_only[0].shift.guard_name == "Maria Santos"
    assert idle_only[0].shift.site_name == "North Pier"

    sos_only = alert_crud.list_alerts(db, alert_type="sos")
    assert sos_only[0].shift.site_name == "Unknown Site"


def test_list_alerts_is_newest_first_and_paged(db, make_guard, make_shift):
    shift = make_shift(make_guard())
    base = datetime(2026, 3, 1, 9, 0, 0)
    for i in range(105):
        db.add(Alert(
            shift_id=shift.id,
            type="signal_lost",
            message=f"lost {i}",
            created_at=base + timedelta(minutes=i),
            resolved_at=base + timedelta(minutes=i, seconds=30),
        ))
    db.commit()

    page = alert_crud.list_alerts(db)

    assert len(page) == 100
    assert page[0].message == "lost 104"
    assert [a.created_at for a in page] == sorted((a.created_at for a in page), reverse=True)


def test_count_unresolved(db, make_guard, make_shift):
    assert alert_crud.count_unresolved_alerts(db) == 0

    first = make_shift(make_guard())
    second = make_shift(make_guard())
    alert_crud.create_alert(db, first.id, AlertType.IDLE, "idle")
    alert_crud.create_alert(db, second.id, AlertType.IDLE, "idle")
    resolved = alert_crud.create_alert(db, second.id, AlertType.SOS, "help")
    alert_crud.resolve_alert(db, resolved.id)

    assert alert_crud.count_unresolved_alerts(db) == 2
