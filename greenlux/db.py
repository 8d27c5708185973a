"""Storage of photodiode readings and Newton-Raphson results in MongoDB."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

from pymongo import MongoClient
from pymongo.database import Database

DEFAULT_URI = "mongodb://localhost:27017"
DATABASE_NAME = "amitdb"
PHOTODIODE_COLLECTION = "photodiode_data"
NEWTON_RAPHSON_COLLECTION = "newton_raphson_results"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def connect_db(uri: str = DEFAULT_URI) -> Database:
    """Return the application's database on the server at ``uri``."""
    client: MongoClient = MongoClient(uri)
    return client[DATABASE_NAME]


def insert_photodiode_data(db: Any, photodiode_value: float) -> None:
    """Store one photodiode reading with the current time."""
    db[PHOTODIODE_COLLECTION].insert_one(
        {"photodiode_value": float(photodiode_value), "timestamp": _now()}
    )


def get_all_photodiode_data(db: Any) -> list[dict[str, Any]]:
    """Every stored photodiode reading, in the order the server returns them."""
    return list(db[PHOTODIODE_COLLECTION].find({}))


def insert_newton_raphson_result(
    db: Any, akar: float, iterations_history: Iterable[float]
) -> None:
    """Store a Newton-Raphson root and its iteration history with the current time."""
    db[NEWTON_RAPHSON_COLLECTION].insert_one(
        {
            "akar_terakhir": float(akar),
            "riwayat_iterasi": [float(v) for v in iterations_history],
            "timestamp": _now(),
        }
    )


def get_all_newton_raphson_results(db: Any) -> list[dict[str, Any]]:
    """Every stored Newton-Raphson result, in the order the server returns them."""
    return list(db[NEWTON_RAPHSON_COLLECTION].find({}))