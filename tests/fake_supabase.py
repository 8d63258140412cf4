"""
In-memory stand-in for the supabase Client used by the tests.

Covers the query-builder subset the services call. Each execute() runs under
one lock, so a filtered update behaves like a single-row UPDATE ... WHERE in
Postgres: two racing compare-and-swap writes cannot both match.
"""

import copy
import re
import threading
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace


class FakeAPIError(Exception):
    """Raised where PostgREST would answer with an error."""


# CHECK constraints from supabase/schema.sql the tests rely on
CHECKS = {
    "equipment": [("quantity", lambda v: v is None or v >= 0, "equipment_quantity_check")],
    "issues": [("quantity_issued", lambda v: v is None or v > 0, "issues_quantity_issued_check")],
}


class FakeResponse:
    def __init__(self, data):
        self.data = data
        self.count = len(data)


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.payload = None
        self.on_conflict = "id"
        self.filters = []
        self.orders = []
        self._limit = None
        self._offset = 0

    # Actions

    def select(self, columns="*", **kwargs):
        self.action = "select"
        self.columns = columns
        return self

    def insert(self, payload, **kwargs):
        self.action = "insert"
        self.payload = payload
        return self

    def upsert(self, payload, on_conflict="id", **kwargs):
        self.action = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def update(self, payload, **kwargs):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self, **kwargs):
        self.action = "delete"
        return self

    # Filters

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def gt(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) > value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lt(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) < value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def is_(self, column, value):
        expected = None if value in (None, "null") else value
        self.filters.append(lambda row: row.get(column) is expected)
        return self

    def ilike(self, column, pattern):
        regex = re.compile(
            "^" + ".*".join(re.escape(part) for part in pattern.split("%")) + "$",
            re.IGNORECASE | re.DOTALL
        )
        self.filters.append(lambda row: row.get(column) is not None and bool(regex.match(str(row.get(column)))))
        return self

    # Modifiers

    def order(self, column, desc=False, **kwargs):
        self.orders.append((column, desc))
        return self

    def limit(self, count):
        self._limit = count
        return self

    def offset(self, count):
        self._offset = count
        return self

    def execute(self):
        with self.db.lock:
            self.db.check_failure(self.table, self.action)
            rows = self.db.tables.setdefault(self.table, [])
            handler = getattr(self, f"_execute_{self.action}")
            return FakeResponse(handler(rows))

    # Execution

    def _matches(self, row):
        return all(check(row) for check in self.filters)

    def _project(self, row):
        if self.columns.strip() == "*":
            return copy.deepcopy(row)
        names = [name.strip() for name in self.columns.split(",")]
        return {name: copy.deepcopy(row.get(name)) for name in names}

    def _execute_select(self, rows):
        selected = [row for row in rows if self._matches(row)]
        for column, desc in reversed(self.orders):
            selected.sort(
                key=lambda row: (row.get(column) is None, row.get(column) if row.get(column) is not None else 0),
                reverse=desc
            )
        selected = selected[self._offset:]
        if self._limit is not None:
            selected = selected[:self._limit]
        return [self._project(row) for row in selected]

    def _new_row(self, payload):
        row = copy.deepcopy(payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.db.now())
        self.db.validate(self.table, row)
        return row

    def _execute_insert(self, rows):
        payloads = self.payload if isinstance(self.payload, list) else [self.payload]
        new_rows = [self._new_row(payload) for payload in payloads]
        rows.extend(new_rows)
        return copy.deepcopy(new_rows)

    def _execute_upsert(self, rows):
        payloads = self.payload if isinstance(self.payload, list) else [self.payload]
        keys = [key.strip() for key in self.on_conflict.split(",")]
        written = []
        for payload in payloads:
            existing = next(
                (row for row in rows if all(row.get(k) == payload.get(k) for k in keys)),
                None
            )
            if existing is not None:
                candidate = {**existing, **copy.deepcopy(payload)}
                self.db.validate(self.table, candidate)
                existing.update(copy.deepcopy(payload))
                written.append(copy.deepcopy(existing))
            else:
                row = self._new_row(payload)
                rows.append(row)
                written.append(copy.deepcopy(row))
        return written

    def _execute_update(self, rows):
        matched = [row for row in rows if self._matches(row)]
        for row in matched:
            self.db.validate(self.table, {**row, **self.payload})
        for row in matched:
            row.update(copy.deepcopy(self.payload))
        return [copy.deepcopy(row) for row in matched]

    def _execute_delete(self, rows):
        removed = [row for row in rows if self._matches(row)]
        self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
        return copy.deepcopy(removed)


class FakeAuth:
    def __init__(self, db):
        self.db = db
        self.users = {}
        self.tokens = {}

    def create_user(self, email, password="secret123", full_name=None):
        user = SimpleNamespace(
            id=str(uuid.uuid4()),
            email=email,
            user_metadata={"full_name": full_name} if full_name else {},
            password=password,
        )
        self.users[email] = user
        return user

    def token_for(self, user):
        token = f"token-{uuid.uuid4().hex}"
        self.tokens[token] = user
        return token

    def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.users:
            raise FakeAPIError("User already registered")
        metadata = credentials.get("options", {}).get("data", {})
        user = self.create_user(email, credentials["password"], metadata.get("full_name"))
        return SimpleNamespace(user=user, session=None)

    def sign_in_with_password(self, credentials):
        user = self.users.get(credentials["email"])
        if user is None or user.password != credentials["password"]:
            raise FakeAPIError("Invalid login credentials")
        session = SimpleNamespace(access_token=self.token_for(user))
        return SimpleNamespace(user=user, session=session)

    def get_user(self, jwt=None):
        user = self.tokens.get(jwt)
        if user is None:
            raise FakeAPIError("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def sign_out(self):
        return None


class FakeSupabase:
    def __init__(self):
        self.lock = threading.RLock()
        self.tables = {}
        self.auth = FakeAuth(self)
        self._failures = []
        self._clock = datetime.now(timezone.utc)

    def table(self, name):
        return FakeQuery(self, name)

    def now(self):
        # Strictly increasing so newest-first ordering is deterministic
        self._clock += timedelta(microseconds=1)
        return self._clock.isoformat()

    def rows(self, name):
        return copy.deepcopy(self.tables.get(name, []))

    def fail_next(self, table, action, message="connection reset by peer"):
        """Make the next matching execute() raise, like a dropped connection."""
        self._failures.append((table, action, message))

    def check_failure(self, table, action):
        for index, (t, a, message) in enumerate(self._failures):
            if t == table and a == action:
                del self._failures[index]
                raise FakeAPIError(message)

    def validate(self, table, row):
        for column, predicate, name in CHECKS.get(table, []):
            if not predicate(row.get(column)):
                raise FakeAPIError(f'new row for relation "{table}" violates check constraint "{name}"')
