"""Tests for the admin service catalog and per-date service availability."""

from booking_widget.data.admin_service_availability import (
    bulk_set_services_for_date,
    fetch_service_availability,
    set_service_for_date,
)
from booking_widget.data.admin_services import (
    create_service,
    delete_service,
    fetch_services,
    search_services,
    toggle_service_active,
    update_service,
)
from booking_widget.schemas.availability_schema import ServiceSetting
from booking_widget.schemas.catalog_schema import ServiceInput, ServiceUpdate


class TestServiceCatalog:
    def test_fetch_all_sorted(self, seeded):
        result = fetch_services(seeded.db)
        assert [s.name for s in result.data] == ["Ceramic Coating", "Full Detail", "Waxing"]

    def test_fetch_active_only(self, seeded):
        result = fetch_services(seeded.db, include_inactive=False)
        assert "Waxing" not in [s.name for s in result.data]

    def test_create(self, db):
        result = create_service(db, ServiceInput(name="Interior Clean", price=80, duration_minutes=90))
        assert result.success
        assert result.data.name == "Interior Clean"
        assert result.data.active

    def test_partial_update_leaves_other_fields(self, seeded):
        assert update_service(seeded.db, "svc-detail", ServiceUpdate(price=175)).success
        row = seeded.db.get("services", "svc-detail")
        assert row["price"] == 175
        assert row["name"] == "Full Detail"

    def test_empty_update_skips_request(self, seeded):
        assert update_service(seeded.db, "svc-detail", ServiceUpdate()).success
        assert ("services", "update") not in seeded.db.calls

    def test_toggle_active(self, seeded):
        service = fetch_services(seeded.db).data[-1]
        assert toggle_service_active(seeded.db, service).success
        assert seeded.db.get("services", "svc-retired")["active"] is True

    def test_delete_failure(self, seeded):
        seeded.db.fail("services", "delete", message="violates foreign key constraint")
        result = delete_service(seeded.db, "svc-detail")
        assert not result.success
        assert result.error == "violates foreign key constraint"

    def test_search_by_name_or_category(self, seeded):
        services = fetch_services(seeded.db).data
        assert [s.id for s in search_services(services, "detail")] == ["svc-detail"]
        assert [s.id for s in search_services(services, "PROTECT")] == ["svc-ceramic"]
        assert len(search_services(services, "  ")) == 3


class TestServiceDateAvailability:
    def test_fetch_links(self, seeded):
        result = fetch_service_availability(seeded.db, "date-open")
        assert len(result.data) == 3

    def test_set_updates_existing_link(self, seeded):
        assert set_service_for_date(seeded.db, "svc-ceramic", "date-open", True).success
        links = fetch_service_availability(seeded.db, "date-open").data
        ceramic = [link for link in links if link.service_id == "svc-ceramic"]
        assert len(ceramic) == 1
        assert ceramic[0].is_available

    def test_set_inserts_missing_link(self, seeded):
        assert set_service_for_date(seeded.db, "svc-detail", "date-closed", True).success
        assert len(fetch_service_availability(seeded.db, "date-closed").data) == 1

    def test_bulk_replace_keeps_only_enabled(self, seeded):
        result = bulk_set_services_for_date(
            seeded.db,
            "date-open",
            [
                ServiceSetting(service_id="svc-detail", is_available=False),
                ServiceSetting(service_id="svc-ceramic", is_available=True),
            ],
        )
        assert result.success
        links = fetch_service_availability(seeded.db, "date-open").data
        assert [link.service_id for link in links] == ["svc-ceramic"]

    def test_bulk_replace_with_nothing_enabled(self, seeded):
        assert bulk_set_services_for_date(seeded.db, "date-open", []).success
        assert fetch_service_availability(seeded.db, "date-open").data == []
        assert ("service_date_availability", "insert") not in seeded.db.calls
