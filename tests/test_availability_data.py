"""Tests for customer-side availability reads."""

from datetime import date

from booking_widget.data.availability import (
    fetch_active_services,
    fetch_available_dates,
    fetch_date_details,
    fetch_month_availability,
)


class TestFetchAvailableDates:
    def test_only_open_non_overridden_dates(self, seeded):
        result = fetch_available_dates(seeded.db, "2030-06-01", "2030-06-30")
        assert result.success
        assert [d.date for d in result.data] == ["2030-06-15"]

    def test_range_is_inclusive(self, seeded):
        result = fetch_available_dates(seeded.db, "2030-06-15", "2030-06-15")
        assert len(result.data) == 1

    def test_range_excludes_outside_dates(self, seeded):
        result = fetch_available_dates(seeded.db, "2030-07-01", "2030-07-31")
        assert result.success
        assert result.data == []

    def test_results_ordered_by_date(self, db):
        db.add("date_availability", date="2030-06-20", is_open=True)
        db.add("date_availability", date="2030-06-02", is_open=True)
        result = fetch_available_dates(db, date(2030, 6, 1), date(2030, 6, 30))
        assert [d.date for d in result.data] == ["2030-06-02", "2030-06-20"]

    def test_failure_returns_readable_error(self, seeded):
        seeded.db.fail("date_availability", message="JWT expired")
        result = fetch_available_dates(seeded.db, "2030-06-01", "2030-06-30")
        assert not result.success
        assert result.error == "JWT expired"
        assert result.data is None


class TestFetchMonthAvailability:
    def test_window_spans_following_months(self, db):
        db.add("date_availability", date="2030-06-03", is_open=True)
        db.add("date_availability", date="2030-08-31", is_open=True)
        db.add("date_availability", date="2030-09-01", is_open=True)
        result = fetch_month_availability(db, date(2030, 6, 20), months_ahead=2)
        assert [d.date for d in result.data] == ["2030-06-03", "2030-08-31"]


class TestFetchDateDetails:
    def test_open_date_details(self, seeded):
        result = fetch_date_details(seeded.db, "2030-06-15")
        assert result.success
        details = result.data
        assert details.date.id == "date-open"
        assert [s.id for s in details.time_slots] == ["slot-9", "slot-11"]
        assert [s.name for s in details.services] == ["Full Detail"]

    def test_full_slot_hidden_even_if_flag_left_on(self, seeded):
        slot = seeded.db.get("time_slots", "slot-11")
        slot["current_bookings"] = 1
        result = fetch_date_details(seeded.db, "2030-06-15")
        assert [s.id for s in result.data.time_slots] == ["slot-9"]

    def test_closed_date_has_nothing_to_book(self, seeded):
        result = fetch_date_details(seeded.db, "2030-06-16")
        assert result.success
        assert result.data is None

    def test_override_date_has_nothing_to_book(self, seeded):
        result = fetch_date_details(seeded.db, "2030-06-17")
        assert result.success
        assert result.data is None

    def test_unconfigured_date_has_nothing_to_book(self, seeded):
        result = fetch_date_details(seeded.db, "2030-06-18")
        assert result.success
        assert result.data is None

    def test_no_linked_services(self, seeded):
        seeded.db.tables["service_date_availability"].clear()
        result = fetch_date_details(seeded.db, "2030-06-15")
        assert result.data.services == []

    def test_slot_query_failure(self, seeded):
        seeded.db.fail("time_slots", "select", message="connection reset")
        result = fetch_date_details(seeded.db, "2030-06-15")
        assert not result.success
        assert result.error == "connection reset"


class TestFetchActiveServices:
    def test_inactive_services_excluded_and_sorted(self, seeded):
        result = fetch_active_services(seeded.db)
        assert [s.name for s in result.data] == ["Ceramic Coating", "Full Detail"]
