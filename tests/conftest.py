"""Shared test fixtures and an in-memory stand-in for the hosted client."""

import asyncio
import copy
import itertools
import uuid
from types import SimpleNamespace
from typing import Any, Callable, Optional

import pytest

from booking_widget.data.auth import AuthSession
from booking_widget.schemas.booking_schema import BookingFormData
from booking_widget.wizard.flow import BookingFlow
from booking_widget.wizard.state_machine import BookingWizard


class FakeAPIError(Exception):
    """Mimics the hosted client's error shape (``message`` / ``details``)."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


TABLE_DEFAULTS: dict[str, dict[str, Any]] = {
    "date_availability": {
        "is_open": False,
        "start_time": None,
        "end_time": None,
        "max_bookings_per_day": None,
        "is_override": False,
        "override_reason": None,
    },
    "time_slots": {"max_bookings": 1, "current_bookings": 0, "is_available": True},
    "services": {
        "description": None,
        "duration_minutes": 60,
        "price": 0.0,
        "category": None,
        "active": True,
    },
    "service_date_availability": {"is_available": True},
    "bookings": {"status": "confirmed", "customer_phone": None, "notes": None},
    "admin_users": {"role": "admin"},
}


def _split_top_level(columns: str) -> list[str]:
    parts, depth, current = [], 0, ""
    for char in columns:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        parts.append(current.strip())
    return parts


def _embedded_relations(columns: str) -> list[tuple[str, str, str]]:
    """``alias:table(cols)`` items as ``(alias, table, cols)``."""
    relations = []
    for item in _split_top_level(columns):
        if "(" not in item:
            continue
        head, inner = item.split("(", 1)
        alias, _, table = head.partition(":")
        relations.append((alias.strip(), (table or alias).strip(), inner[:-1]))
    return relations


class FakeQuery:
    """Chainable query builder over ``FakeSupabase`` tables."""

    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self._db = db
        self._table = table
        self._op = "select"
        self._columns = "*"
        self._payload: Any = None
        self._filters: list[Callable[[dict], bool]] = []
        self._order: list[tuple[str, bool]] = []
        self._limit: Optional[int] = None

    def select(self, columns: str = "*") -> "FakeQuery":
        self._op, self._columns = "select", columns
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self._op, self._payload = "insert", payload
        return self

    def update(self, payload: dict) -> "FakeQuery":
        self._op, self._payload = "update", payload
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) is not None and row[column] <= value)
        return self

    def in_(self, column: str, values: list) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order.append((column, desc))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def _matching(self) -> list[dict]:
        return [row for row in self._db.tables[self._table] if all(f(row) for f in self._filters)]

    def execute(self) -> SimpleNamespace:
        self._db.calls.append((self._table, self._op))
        failure = self._db.failures.get((self._table, self._op)) or self._db.failures.get(
            (self._table, None)
        )
        if failure is not None:
            raise failure
        return SimpleNamespace(data=getattr(self, f"_execute_{self._op}")())

    def _execute_select(self) -> list[dict]:
        rows = self._matching()
        for column, desc in reversed(self._order):
            rows.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        if self._limit is not None:
            rows = rows[: self._limit]
        return [self._db.embed(self._table, row, self._columns) for row in rows]

    def _execute_insert(self) -> list[dict]:
        payload = self._payload if isinstance(self._payload, list) else [self._payload]
        return [copy.deepcopy(self._db.add(self._table, **row)) for row in payload]

    def _execute_update(self) -> list[dict]:
        rows = self._matching()
        for row in rows:
            row.update(copy.deepcopy(self._payload))
        return [copy.deepcopy(row) for row in rows]

    def _execute_delete(self) -> list[dict]:
        rows = self._matching()
        self._db.tables[self._table] = [
            row for row in self._db.tables[self._table] if row not in rows
        ]
        return [copy.deepcopy(row) for row in rows]


class FakeAuth:
    """Password sign-in and auth-change listeners."""

    def __init__(self) -> None:
        self._users: dict[str, tuple[str, SimpleNamespace]] = {}
        self._listeners: list[Callable] = []
        self.session: Optional[SimpleNamespace] = None
        self.sign_out_calls = 0

    def register(self, email: str, password: str, user_id: Optional[str] = None) -> SimpleNamespace:
        user = SimpleNamespace(id=user_id or str(uuid.uuid4()), email=email)
        self._users[email] = (password, user)
        return user

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event, self.session)

    def sign_in_with_password(self, credentials: dict) -> SimpleNamespace:
        stored = self._users.get(credentials["email"])
        if stored is None or stored[0] != credentials["password"]:
            raise FakeAPIError("Invalid login credentials")
        self.session = SimpleNamespace(user=stored[1])
        self._notify("SIGNED_IN")
        return SimpleNamespace(user=stored[1], session=self.session)

    def sign_out(self) -> None:
        self.sign_out_calls += 1
        self.session = None
        self._notify("SIGNED_OUT")

    def get_session(self) -> Optional[SimpleNamespace]:
        return self.session

    def on_auth_state_change(self, callback: Callable) -> SimpleNamespace:
        self._listeners.append(callback)
        return SimpleNamespace(unsubscribe=lambda: self._listeners.remove(callback))

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


class FakeSupabase:
    """In-memory tables behind the ``client.table(...)`` query API."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict]] = {name: [] for name in TABLE_DEFAULTS}
        self.failures: dict[tuple[str, Optional[str]], Exception] = {}
        self.calls: list[tuple[str, str]] = []
        self.auth = FakeAuth()
        self._clock = itertools.count(1)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def add(self, table: str, **values: Any) -> dict:
        row = {**TABLE_DEFAULTS[table], **copy.deepcopy(values)}
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", f"2030-01-01T00:00:{next(self._clock):05d}")
        self.tables[table].append(row)
        return row

    def get(self, table: str, row_id: str) -> Optional[dict]:
        return next((row for row in self.tables[table] if row["id"] == row_id), None)

    def fail(self, table: str, op: Optional[str] = None, message: str = "boom") -> None:
        self.failures[(table, op)] = FakeAPIError(message)

    def embed(self, table: str, row: dict, columns: str) -> dict:
        result = copy.deepcopy(row)
        for alias, related_table, inner in _embedded_relations(columns):
            related = self.get(related_table, row.get(f"{alias}_id"))
            result[alias] = self.embed(related_table, related, inner) if related else None
        return result


class FakeChannel:
    def __init__(self, name: str) -> None:
        self.name = name
        self.handlers: list[tuple[str, Callable]] = []
        self.subscribed = False
        self.pending: list[Any] = []

    def on_postgres_changes(self, event: str, callback: Callable, table: str = "*",
                            schema: str = "public", filter: Optional[str] = None) -> "FakeChannel":
        self.handlers.append((table, callback))
        return self

    async def subscribe(self, callback: Optional[Callable] = None) -> "FakeChannel":
        self.subscribed = True
        return self

    @property
    def tables(self) -> list[str]:
        return [table for table, _ in self.handlers]

    def emit(self, table: str, payload: Optional[dict] = None) -> None:
        for handler_table, handler in self.handlers:
            if handler_table == table:
                scheduled = handler(payload or {"eventType": "UPDATE", "table": table})
                if scheduled is not None:
                    self.pending.append(scheduled)

    async def settle(self) -> None:
        """Wait for every refresh the emitted changes scheduled."""
        if self.pending:
            await asyncio.wait(self.pending)
        self.pending.clear()


class FakeAsyncClient:
    def __init__(self) -> None:
        self.channels: list[FakeChannel] = []
        self.removed: list[FakeChannel] = []

    def channel(self, name: str) -> FakeChannel:
        channel = FakeChannel(name)
        self.channels.append(channel)
        return channel

    async def remove_channel(self, channel: FakeChannel) -> None:
        self.removed.append(channel)


# --- Fixtures ---

OPEN_DATE = "2030-06-15"
CLOSED_DATE = "2030-06-16"
OVERRIDE_DATE = "2030-06-17"


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def seeded(db):
    """An open date with three slots, a closed date and an overridden one."""
    open_day = db.add(
        "date_availability", id="date-open", date=OPEN_DATE, is_open=True,
        start_time="09:00:00", end_time="12:00:00",
    )
    db.add("date_availability", id="date-closed", date=CLOSED_DATE, is_open=False)
    db.add(
        "date_availability", id="date-override", date=OVERRIDE_DATE, is_open=True,
        is_override=True, override_reason="Power outage",
    )

    db.add("time_slots", id="slot-11", date_availability_id="date-open",
           start_time="11:00:00", end_time="12:00:00", max_bookings=1)
    db.add("time_slots", id="slot-9", date_availability_id="date-open",
           start_time="09:00:00", end_time="10:00:00", max_bookings=2)
    db.add("time_slots", id="slot-10", date_availability_id="date-open",
           start_time="10:00:00", end_time="11:00:00", max_bookings=1,
           current_bookings=1, is_available=False)

    db.add("services", id="svc-detail", name="Full Detail", price=150.0, category="Detailing")
    db.add("services", id="svc-ceramic", name="Ceramic Coating", price=400.0, category="Protection")
    db.add("services", id="svc-retired", name="Waxing", active=False)

    db.add("service_date_availability", date_availability_id="date-open", service_id="svc-detail")
    db.add("service_date_availability", date_availability_id="date-open",
           service_id="svc-ceramic", is_available=False)
    db.add("service_date_availability", date_availability_id="date-open", service_id="svc-retired")
    return SimpleNamespace(db=db, date_id=open_day["id"])


@pytest.fixture
def wizard():
    return BookingWizard()


@pytest.fixture
def flow(seeded):
    return BookingFlow(seeded.db)


@pytest.fixture
def auth_session(db):
    return AuthSession(db)


@pytest.fixture
def async_client():
    return FakeAsyncClient()


@pytest.fixture
def valid_form():
    return BookingFormData(
        customer_name="Jane Doe",
        customer_email="jane@example.com",
        customer_phone="0412 345 678",
        notes="Blue hatchback",
    )
