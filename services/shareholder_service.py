"""
services/shareholder_service.py
-------------------------------
Business logic for the shareholder registry page.

Read path:
    Fetch every record ordered by name. A storage failure is reported
    as an error on the result, never disguised as an empty registry.

Write path:
    1. Read the `intent` discriminator (create / update / delete).
    2. Validate the submitted fields.
    3. Check key uniqueness / version token against the repository.
    4. Persist and return an ActionResult for the handler to render.
"""

from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from db.connection import QueryError
from models.shareholder import Shareholder
from repositories.shareholder_repo import DuplicateKeyError, ShareholderRepository
from services.validation import (
    ValidationError,
    clean,
    parse_version,
    validate_shareholder,
)
from utils.logger import get_logger

logger = get_logger(__name__)

DUPLICATE_KEY_MESSAGE = "FN ID already exists"
NOT_FOUND_MESSAGE = "Shareholder not found"
STALE_VERSION_MESSAGE = "Shareholder was modified by another submission"


@dataclass
class ListResult:
    """Outcome of the read path: the records, or why they are unavailable."""
    records: list[Shareholder] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ActionResult:
    """Outcome of one form submission."""
    success: bool
    status: int = 200
    fn_id: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None

    @classmethod
    def rejected(cls, error: str, status: int = 400, details: Optional[str] = None) -> "ActionResult":
        return cls(success=False, status=status, error=error, details=details)

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "fn_id": self.fn_id}
        payload = {"error": self.error}
        if self.details:
            payload["details"] = self.details
        return payload


class ShareholderService:
    """Validates submissions and dispatches them to the repository."""

    def __init__(self, repo: ShareholderRepository):
        self.repo = repo
        self._actions: dict[str, Callable[[Mapping], ActionResult]] = {
            "create": self.create,
            "update": self.update,
            "delete": self.delete,
        }

    # ── READ ──────────────────────────────────────────────

    def list_shareholders(self) -> ListResult:
        try:
            return ListResult(records=self.repo.list_all())
        except QueryError as e:
            logger.error(f"Failed to load shareholders: {e}")
            return ListResult(error="Shareholders could not be loaded from the database")

    # ── WRITE ─────────────────────────────────────────────

    def submit(self, form: Mapping[str, Optional[str]]) -> ActionResult:
        """
        Handle one form submission.

        Args:
            form: Submitted fields, including `intent`.

        Returns:
            ActionResult with status 200 on success, 400 for validation
            and duplicate keys, 404/409 for update conflicts, 500 for
            database failures.
        """
        intent = clean(form.get("intent"))
        action = self._actions.get(intent)
        if action is None:
            return ActionResult.rejected("Invalid intent")

        try:
            return action(form)
        except ValidationError as e:
            return ActionResult.rejected(e.message)
        except DuplicateKeyError:
            return ActionResult.rejected(DUPLICATE_KEY_MESSAGE)
        except QueryError as e:
            logger.error(f"Failed to {intent} shareholder: {e}")
            return ActionResult.rejected("Database error", status=500, details=str(e))

    def create(self, form: Mapping[str, Optional[str]]) -> ActionResult:
        shareholder = validate_shareholder(form)
        if self.repo.exists(shareholder.fn_id):
            return ActionResult.rejected(DUPLICATE_KEY_MESSAGE)
        saved = self.repo.add(shareholder)
        return ActionResult(success=True, fn_id=saved.fn_id)

    def update(self, form: Mapping[str, Optional[str]]) -> ActionResult:
        shareholder = validate_shareholder(form)
        expected_version = parse_version(form.get("version"))
        # old_fn_id is sent when the key itself was edited in the form
        target = clean(form.get("old_fn_id")) or shareholder.fn_id

        if target != shareholder.fn_id and self.repo.exists(shareholder.fn_id):
            return ActionResult.rejected(DUPLICATE_KEY_MESSAGE)

        updated = self.repo.update(shareholder, target, expected_version)
        if updated is None:
            if not self.repo.exists(target):
                return ActionResult.rejected(NOT_FOUND_MESSAGE, status=404)
            return ActionResult.rejected(
                STALE_VERSION_MESSAGE,
                status=409,
                details="Reload the page to see the latest values.",
            )
        return ActionResult(success=True, fn_id=updated.fn_id)

    def delete(self, form: Mapping[str, Optional[str]]) -> ActionResult:
        """Delete by key; a missing row still counts as success."""
        fn_id = clean(form.get("old_fn_id")) or clean(form.get("fn_id"))
        if not fn_id:
            return ActionResult.rejected("FN ID is required")
        if not self.repo.delete(fn_id):
            logger.info(f"Delete of unknown shareholder {fn_id} ignored")
        return ActionResult(success=True, fn_id=fn_id)
