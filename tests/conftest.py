# tests/conftest.py
from __future__ import annotations

import copy
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from db.connection import Database, QueryError
from handlers.shareholder_handler import get_repository
from main import create_app
from models.shareholder import Shareholder
from repositories.shareholder_repo import DuplicateKeyError
from services.shareholder_service import ShareholderService


class InMemoryShareholderRepository:
    """Dict-backed stand-in for ShareholderRepository with the same contract."""

    def __init__(self) -> None:
        self.rows: dict[str, Shareholder] = {}
        self.fail_with: QueryError | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def add(self, shareholder: Shareholder) -> Shareholder:
        self._check()
        if shareholder.fn_id in self.rows:
            raise DuplicateKeyError(shareholder.fn_id)
        shareholder.version = 1
        self.rows[shareholder.fn_id] = copy.deepcopy(shareholder)
        return copy.deepcopy(shareholder)

    def list_all(self) -> list[Shareholder]:
        self._check()
        ordered = sorted(self.rows.values(), key=lambda s: (s.name_english, s.fn_id))
        return [copy.deepcopy(s) for s in ordered]

    def exists(self, fn_id: str) -> bool:
        self._check()
        return fn_id in self.rows

    def update(
        self, shareholder: Shareholder, target_fn_id: str, expected_version: int
    ) -> Shareholder | None:
        self._check()
        current = self.rows.get(target_fn_id)
        if current is None or current.version != expected_version:
            return None
        if shareholder.fn_id != target_fn_id and shareholder.fn_id in self.rows:
            raise DuplicateKeyError(shareholder.fn_id)
        updated = copy.deepcopy(shareholder)
        updated.version = current.version + 1
        del self.rows[target_fn_id]
        self.rows[updated.fn_id] = updated
        return copy.deepcopy(updated)

    def delete(self, fn_id: str) -> bool:
        self._check()
        return self.rows.pop(fn_id, None) is not None


def _valid_form(**overrides: str) -> dict[str, str]:
    """A valid create submission; keyword arguments replace fields."""
    form = {
        "intent": "create",
        "fn_id": "ABC123",
        "name_amharic": "ጄን ዶ",
        "name_english": "Jane Doe",
        "city": "Addis Ababa",
        "subcity": "Bole",
        "wereda": "03",
        "house_number": "1234",
        "phone_1": "+251911000000",
        "phone_2": "",
        "email": "jane@example.com",
        "nationality": "Ethiopian",
        "share_will": "10.5",
        "share_amount": "100",
        "share_price": "",
        "attendance": "",
        "receipt_number": "R-001",
        "certificate_number": "",
        "taken_certificate": "",
        "error_1": "",
        "error_2": "",
        "error_3": "",
        "comment_1": "",
        "comment_2": "",
    }
    form.update(overrides)
    return form


@pytest.fixture()
def make_form():
    """Factory for valid form submissions."""
    return _valid_form


@pytest.fixture()
def repo() -> InMemoryShareholderRepository:
    return InMemoryShareholderRepository()


@pytest.fixture()
def service(repo: InMemoryShareholderRepository) -> ShareholderService:
    return ShareholderService(repo)  # type: ignore[arg-type]


@pytest.fixture()
def database() -> MagicMock:
    return MagicMock(spec=Database)


@pytest.fixture()
def client(
    repo: InMemoryShareholderRepository, database: MagicMock
) -> Generator[TestClient, None, None]:
    """TestClient whose routes use the in-memory repository."""
    app = create_app(database=database, init_schema=False)
    app.dependency_overrides[get_repository] = lambda: repo
    with TestClient(app) as c:
        yield c
