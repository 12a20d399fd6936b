from datetime import date, datetime

import pytest

from backend.errors import RenderingPrerequisiteError
from backend.event_placer import EventPlacer, SegmentKind
from backend.event_store import (
    CalendarEvent, EventStore, InvalidEventError, Outcome,
)
from backend.month_grid import MonthGridCache


@pytest.fixture
def grids():
    return MonthGridCache(first_day_of_week=0, base_row_height=20)


@pytest.fixture
def store(grids):
    return EventStore(EventPlacer(), grids)


def _options(**kwargs):
    options = {'title': "Meeting", 'start_date': datetime(2024, 2, 14, 9)}
    options.update(kwargs)
    return options


class TestFromOptions:

    def test_default_duration_is_one_hour(self):
        event = CalendarEvent.from_options(_options(start_date=datetime(2024, 2, 14, 10)), "a")
        assert event.finish == datetime(2024, 2, 14, 11)

    def test_duration_sets_finish(self):
        event = CalendarEvent.from_options(_options(start_date=datetime(2024, 2, 14, 23, 30), duration=30), "a")
        assert event.finish == datetime(2024, 2, 14, 23, 59)
        assert event.date_range().first_day == event.date_range().last_day

    def test_finish_at_midnight_stays_on_previous_day(self):
        event = CalendarEvent.from_options(
            _options(start_date=datetime(2024, 2, 10, 9), finish_date=datetime(2024, 2, 11, 0, 0)), "a"
        )
        assert event.finish == datetime(2024, 2, 10, 23, 59)
        assert len(event.date_range()) == 1

    def test_zero_length_event_at_midnight_is_kept(self):
        midnight = datetime(2024, 2, 10)
        event = CalendarEvent.from_options(_options(start_date=midnight, finish_date=midnight), "a")
        assert event.finish == midnight

    def test_iso_strings_are_accepted(self):
        event = CalendarEvent.from_options(
            _options(start_date="2024-02-10T09:00", finish_date="2024-02-12T10:00"), "a"
        )
        assert event.start == datetime(2024, 2, 10, 9)
        assert event.finish == datetime(2024, 2, 12, 10)

    def test_plain_date_starts_at_midnight(self):
        event = CalendarEvent.from_options(_options(start_date=date(2024, 2, 10)), "a")
        assert event.start == datetime(2024, 2, 10)

    @pytest.mark.parametrize("options", [
        {'start_date': datetime(2024, 2, 14, 9)},
        {'title': "No start"},
        _options(start_date="not a date"),
        _options(start_date=12345),
        _options(duration=-5),
        _options(duration="60"),
        _options(finish_date=datetime(2024, 2, 13, 9)),
    ])
    def test_invalid_options(self, options):
        with pytest.raises(InvalidEventError):
            CalendarEvent.from_options(options, "a")


class TestEventStore:

    def test_add_places_event(self, store, grids):
        result = store.add(_options(event_id="m1"))

        assert result
        assert result.outcome is Outcome.OK
        assert result.event.id == "m1"
        assert len(result.placements) == 1
        assert grids.get("2024-02").has_event("m1")
        assert "m1" in store

    def test_generated_ids_are_unique(self, store):
        ids = {store.add(_options()).event.id for _ in range(20)}
        assert len(ids) == 20
        assert len(store) == 20

    def test_invalid_add_changes_nothing(self, store, grids):
        result = store.add(_options(duration=-1))

        assert not result
        assert result.outcome is Outcome.INVALID
        assert result.message
        assert len(store) == 0
        assert len(grids) == 0

    def test_delete_removes_all_placements(self, store, grids):
        store.add(_options(event_id="x", start_date=datetime(2024, 1, 30, 9), finish_date=datetime(2024, 2, 2, 9)))

        result = store.delete("x")

        assert result
        assert "x" not in store
        for grid in grids:
            assert not grid.has_event("x")

    def test_delete_unknown_id(self, store):
        result = store.delete("missing")
        assert result.outcome is Outcome.NOT_FOUND
        assert not result

    def test_update_changes_finish(self, store, grids):
        store.add(_options(event_id="x", finish_date=datetime(2024, 2, 14, 10)))

        result = store.update("x", {'finish_date': datetime(2024, 2, 15, 10)})

        assert result
        assert store.get("x").finish == datetime(2024, 2, 15, 10)
        placements = [p for p in grids.get("2024-02").placed_events() if p.event_id == "x"]
        assert len(placements) == 1
        assert placements[0].kind == SegmentKind.SPAN
        assert placements[0].span == 2

    def test_update_duration_recomputes_finish(self, store):
        store.add(_options(event_id="x", finish_date=datetime(2024, 2, 14, 10)))

        store.update("x", {'duration': 90})

        assert store.get("x").finish == datetime(2024, 2, 14, 10, 30)

    def test_update_keeps_unchanged_fields(self, store):
        store.add(_options(event_id="x", title="Keep me", repeat_title=True))

        store.update("x", {'start_date': datetime(2024, 2, 14, 8)})

        event = store.get("x")
        assert event.title == "Keep me"
        assert event.repeat_title is True

    def test_invalid_update_leaves_event(self, store, grids):
        store.add(_options(event_id="x"))

        result = store.update("x", {'finish_date': datetime(2020, 1, 1)})

        assert result.outcome is Outcome.INVALID
        assert store.get("x").start == datetime(2024, 2, 14, 9)
        assert grids.get("2024-02").has_event("x")

    def test_update_unknown_id_leaves_store_unchanged(self, store, grids):
        store.add(_options(event_id="kept", finish_date=datetime(2024, 2, 14, 10)))
        before = store.get("kept")
        placements_before = list(grids.get("2024-02").placed_events())

        result = store.update("missing", {'title': "x"})

        assert result.outcome is Outcome.NOT_FOUND
        assert len(store) == 1
        assert store.get("kept") is before
        assert list(grids.get("2024-02").placed_events()) == placements_before

    def test_integer_id_round_trip(self, store, grids):
        assert store.add(_options(event_id=5))

        assert 5 in store
        assert store.get(5).id == "5"
        assert store.update(5, {'title': "Renamed"})
        assert store.get("5").title == "Renamed"
        assert store.delete(5)
        assert len(store) == 0
        assert not grids.get("2024-02").has_event("5")

    def test_failed_placement_stores_nothing(self):
        class MarchWithoutLaterWeeks(MonthGridCache):
            def get_or_build(self, year, month):
                grid = super().get_or_build(year, month)
                if month == 3:
                    grid.rows = grid.rows[:1]
                return grid

        grids = MarchWithoutLaterWeeks(first_day_of_week=0, base_row_height=20)
        store = EventStore(EventPlacer(), grids)
        options = _options(event_id="long", start_date=datetime(2024, 2, 28, 9), finish_date=datetime(2024, 3, 20, 9))

        with pytest.raises(RenderingPrerequisiteError):
            store.add(options)

        assert "long" not in store
        assert len(store) == 0
        for grid in grids:
            assert not grid.has_event("long")
        assert grids.get("2024-02").rows[4].height == 20

    def test_events_in_month(self, store):
        store.add(_options(event_id="jan", start_date=datetime(2024, 1, 30, 9), finish_date=datetime(2024, 2, 2, 9)))
        store.add(_options(event_id="mar", start_date=datetime(2024, 3, 5, 9)))

        assert [e.id for e in store.events_in_month(2024, 2)] == ["jan"]
        assert [e.id for e in store.events_in_month(2024, 3)] == ["mar"]

    def test_stores_do_not_share_state(self, grids):
        first = EventStore(EventPlacer(), grids)
        second = EventStore(EventPlacer(), MonthGridCache())

        first.add(_options(event_id="only-first"))

        assert "only-first" not in second
        assert len(second) == 0
