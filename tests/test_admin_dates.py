"""Tests for admin date management."""

from booking_widget.data.admin_dates import (
    create_or_update_date,
    delete_date,
    fetch_dates,
    save_date_configuration,
    set_override,
    toggle_date_open,
)
from booking_widget.schemas.availability_schema import DateAvailabilityInput, ServiceSetting


class TestFetchDates:
    def test_includes_closed_and_overridden(self, seeded):
        result = fetch_dates(seeded.db, "2030-06-01", "2030-06-30")
        assert [d.date for d in result.data] == ["2030-06-15", "2030-06-16", "2030-06-17"]

    def test_failure(self, seeded):
        seeded.db.fail("date_availability")
        result = fetch_dates(seeded.db, "2030-06-01", "2030-06-30")
        assert not result.success
        assert result.error == "boom"


class TestCreateOrUpdateDate:
    def test_inserts_new_date(self, db):
        result = create_or_update_date(
            db, DateAvailabilityInput(date="2030-07-01", is_open=True, start_time="09:00", end_time="17:00")
        )
        assert result.success
        assert result.data.start_time == "09:00:00"
        assert result.data.end_time == "17:00:00"
        assert len(db.tables["date_availability"]) == 1

    def test_updates_existing_date_in_place(self, seeded):
        result = create_or_update_date(
            seeded.db,
            DateAvailabilityInput(date="2030-06-15", is_open=False, max_bookings_per_day=4),
        )
        assert result.success
        assert result.data.id == "date-open"
        row = seeded.db.get("date_availability", "date-open")
        assert row["is_open"] is False
        assert row["max_bookings_per_day"] == 4
        assert len(seeded.db.tables["date_availability"]) == 3

    def test_blank_hours_stored_as_null(self, seeded):
        create_or_update_date(seeded.db, DateAvailabilityInput(date="2030-06-15", is_open=True))
        row = seeded.db.get("date_availability", "date-open")
        assert row["start_time"] is None
        assert row["end_time"] is None

    def test_write_failure(self, db):
        db.fail("date_availability", "insert", message="permission denied")
        result = create_or_update_date(db, DateAvailabilityInput(date="2030-07-01", is_open=True))
        assert not result.success
        assert result.error == "permission denied"


class TestToggleAndOverride:
    def test_toggle_open(self, seeded):
        assert toggle_date_open(seeded.db, "date-closed", True).success
        assert seeded.db.get("date_availability", "date-closed")["is_open"] is True

    def test_setting_override_closes_date(self, seeded):
        assert set_override(seeded.db, "date-open", True, "Flooded bay").success
        row = seeded.db.get("date_availability", "date-open")
        assert row["is_override"] is True
        assert row["override_reason"] == "Flooded bay"
        assert row["is_open"] is False

    def test_clearing_override_keeps_open_flag(self, seeded):
        assert set_override(seeded.db, "date-override", False, "ignored").success
        row = seeded.db.get("date_availability", "date-override")
        assert row["is_override"] is False
        assert row["override_reason"] is None
        assert row["is_open"] is True

    def test_delete(self, seeded):
        assert delete_date(seeded.db, "date-closed").success
        assert seeded.db.get("date_availability", "date-closed") is None


class TestSaveDateConfiguration:
    def test_override_saves_date_closed(self, seeded):
        result = save_date_configuration(
            seeded.db,
            DateAvailabilityInput(date="2030-06-15", is_open=True),
            is_override=True,
            override_reason="Staff sick",
        )
        assert result.success
        assert result.data.is_override
        assert not result.data.is_open
        row = seeded.db.get("date_availability", "date-open")
        assert row["is_open"] is False
        assert row["override_reason"] == "Staff sick"

    def test_replaces_service_list(self, seeded):
        result = save_date_configuration(
            seeded.db,
            DateAvailabilityInput(date="2030-06-15", is_open=True),
            services=[
                ServiceSetting(service_id="svc-ceramic", is_available=True),
                ServiceSetting(service_id="svc-detail", is_available=False),
            ],
        )
        assert result.success
        links = [
            row["service_id"]
            for row in seeded.db.tables["service_date_availability"]
            if row["date_availability_id"] == "date-open"
        ]
        assert links == ["svc-ceramic"]

    def test_service_failure_reported(self, seeded):
        seeded.db.fail("service_date_availability", "delete", message="timeout")
        result = save_date_configuration(
            seeded.db,
            DateAvailabilityInput(date="2030-06-15", is_open=True),
            services=[ServiceSetting(service_id="svc-detail", is_available=True)],
        )
        assert not result.success
        assert result.error == "timeout"
