"""
Shared fixtures.

The app runs with TestConfig and an in-memory stand-in for the Supabase
client: tables are lists of dicts, queries support the chain the record
store uses (select/eq/order/limit/insert/update/delete/execute), storage
uploads are recorded, and auth accepts the tokens registered in ``users``.
"""

import copy
import uuid
from types import SimpleNamespace

import pytest

from wildscout import create_app
from wildscout.services import supabase_client
from wildscout.utils.cache import clear_all_catalog_cache

USER_ID = "11111111-1111-4111-8111-111111111111"
OTHER_USER_ID = "22222222-2222-4222-8222-222222222222"
TOKEN = "valid-token"


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.filters = []
        self.order_by = []
        self.row_limit = None
        self.mode = "select"
        self.payload = None
        self.count_mode = None

    def select(self, columns="*", count=None):
        self.count_mode = count
        return self

    def insert(self, data):
        self.mode, self.payload = "insert", data
        return self

    def update(self, fields):
        self.mode, self.payload = "update", fields
        return self

    def delete(self):
        self.mode = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by.append((column, desc))
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def _matches(self, row):
        return all(row.get(col) == value for col, value in self.filters)

    def execute(self):
        if self.table in self.db.failing:
            raise Exception(f"connection refused ({self.table})")

        rows = self.db.tables.setdefault(self.table, [])

        if self.mode == "insert":
            row = dict(self.payload)
            row.setdefault("id", str(uuid.uuid4()))
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)], count=None)

        if self.mode == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(copy.deepcopy(row))
            return SimpleNamespace(data=updated, count=None)

        if self.mode == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=removed, count=None)

        result = [copy.deepcopy(row) for row in rows if self._matches(row)]
        for column, desc in reversed(self.order_by):
            result.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        count = len(result) if self.count_mode == "exact" else None
        if self.row_limit is not None:
            result = result[:self.row_limit]
        return SimpleNamespace(data=result, count=count)


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, file_bytes, file_options=None):
        if self.storage.fail:
            raise Exception("storage unavailable")
        self.storage.uploads.append((self.name, path, file_bytes, file_options))
        return SimpleNamespace(path=path)


class FakeStorage:
    def __init__(self):
        self.uploads = []
        self.fail = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeUser:
    def __init__(self, data):
        self.data = data

    def model_dump(self):
        return dict(self.data)


class FakeAuth:
    def __init__(self):
        self.users = {}
        self.sessions = []

    def get_user(self, token):
        user = self.users.get(token)
        return SimpleNamespace(user=FakeUser(user) if user else None)

    def set_session(self, access_token, refresh_token):
        self.sessions.append((access_token, refresh_token))
        return self.get_user(access_token)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failing = set()
        self.storage = FakeStorage()
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture(autouse=True)
def _fresh_catalog_cache():
    clear_all_catalog_cache()
    yield
    clear_all_catalog_cache()


@pytest.fixture
def fake_db():
    db = FakeSupabase()
    db.auth.users[TOKEN] = {"id": USER_ID, "email": "forager@example.com"}
    return db


@pytest.fixture
def app(fake_db):
    app = create_app("wildscout.config.TestConfig")
    supabase_client.set_clients(fake_db)
    yield app
    supabase_client.set_clients(None)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def ajax_headers(auth_headers):
    return {**auth_headers, "X-Requested-With": "XMLHttpRequest"}
