"""Hosted table names and the relation selects used against them."""

DATE_AVAILABILITY = "date_availability"
TIME_SLOTS = "time_slots"
SERVICES = "services"
SERVICE_DATE_AVAILABILITY = "service_date_availability"
BOOKINGS = "bookings"
ADMIN_USERS = "admin_users"

AVAILABILITY_TABLES = (DATE_AVAILABILITY, TIME_SLOTS, SERVICE_DATE_AVAILABILITY)

# Booking joined with its slot (and the slot's date) and its service.
BOOKING_WITH_DETAILS = (
    "*, time_slot:time_slots(*, date_availability:date_availability(*)), "
    "service:services(*)"
)
