from datetime import datetime, timezone

import pytest

from greenlux import db


class FakeCollection:
    def __init__(self):
        self.docs = []
        self.filters = []

    def insert_one(self, doc):
        self.docs.append(dict(doc))

    def find(self, query):
        self.filters.append(query)
        return iter([dict(d) for d in self.docs])


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


@pytest.fixture
def fake_db():
    return FakeDatabase()


def test_connect_db_selects_application_database():
    database = db.connect_db("mongodb://localhost:27017")
    try:
        assert database.name == "amitdb"
    finally:
        database.client.close()


def test_insert_photodiode_data_round_trip(fake_db):
    before = datetime.now(timezone.utc)
    db.insert_photodiode_data(fake_db, 512.5)
    after = datetime.now(timezone.utc)

    docs = db.get_all_photodiode_data(fake_db)
    assert len(docs) == 1
    assert docs[0]["photodiode_value"] == 512.5
    assert before <= docs[0]["timestamp"] <= after
    assert list(docs[0]) == ["photodiode_value", "timestamp"]


def test_photodiode_data_goes_to_its_collection(fake_db):
    db.insert_photodiode_data(fake_db, 10)
    assert "photodiode_data" in fake_db.collections
    assert "newton_raphson_results" not in fake_db.collections
    assert isinstance(fake_db.collections["photodiode_data"].docs[0]["photodiode_value"], float)


def test_get_all_uses_empty_filter(fake_db):
    db.insert_photodiode_data(fake_db, 1.0)
    db.get_all_photodiode_data(fake_db)
    assert fake_db.collections["photodiode_data"].filters == [{}]


def test_get_all_on_empty_collection(fake_db):
    assert db.get_all_photodiode_data(fake_db) == []
    assert db.get_all_newton_raphson_results(fake_db) == []


def test_insert_newton_raphson_result_round_trip(fake_db):
    db.insert_newton_raphson_result(fake_db, 42.125, [1.0, 20.0, 42.125])
    db.insert_newton_raphson_result(fake_db, 7.0, [])

    docs = db.get_all_newton_raphson_results(fake_db)
    assert [d["akar_terakhir"] for d in docs] == [42.125, 7.0]
    assert docs[0]["riwayat_iterasi"] == [1.0, 20.0, 42.125]
    assert docs[1]["riwayat_iterasi"] == []
    assert all(d["timestamp"].tzinfo is not None for d in docs)


def test_history_accepts_any_iterable(fake_db):
    db.insert_newton_raphson_result(fake_db, 3.0, (x for x in [1, 2, 3]))
    docs = db.get_all_newton_raphson_results(fake_db)
    assert docs[0]["riwayat_iterasi"] == [1.0, 2.0, 3.0]