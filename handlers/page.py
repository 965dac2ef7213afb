"""
handlers/page.py
----------------
HTML rendering for the registry page: a create form, the error banner,
and one editable form per shareholder. Every value is escaped.
"""

from html import escape
from typing import Mapping, Optional

from models.shareholder import (
    COLUMNS,
    DECIMAL_FIELDS,
    FN_ID_LENGTH,
    OPTIONAL_TEXT_FIELDS,
    REQUIRED_TEXT_FIELDS,
    Shareholder,
)
from services.shareholder_service import ListResult

_STYLE = """
body { font-family: sans-serif; background: #111827; color: #e5e7eb; margin: 2rem; }
section { background: #1f2937; border: 1px solid #374151; border-radius: 8px; padding: 1.5rem; margin-bottom: 2rem; }
.grid { display: grid; grid-template-columns: repeat(3, 1fr); gap: 0.75rem; }
label { display: block; font-size: 0.85rem; color: #d1d5db; }
input { width: 100%; padding: 0.4rem; background: #374151; color: #fff; border: 1px solid #4b5563; border-radius: 4px; }
.error { background: #7f1d1d; border: 1px solid #b91c1c; padding: 0.75rem; border-radius: 6px; margin-bottom: 1rem; }
.record { border: 1px solid #4b5563; border-radius: 6px; padding: 1rem; margin-bottom: 1rem; }
button { margin-top: 0.75rem; padding: 0.5rem 1rem; border: 0; border-radius: 4px; color: #fff; background: #2563eb; }
button.delete { background: #dc2626; }
"""


def _input(name: str, label: str, value: str = "", required: bool = False, extra: str = "") -> str:
    req = " required" if required else ""
    return (
        f'<div><label>{escape(label)}'
        f'<input name="{name}" value="{escape(value)}"{req}{extra}></label></div>'
    )


def _fields(values: Mapping[str, object]) -> str:
    """Inputs for every editable field, pre-filled from `values`."""
    def value(name: str) -> str:
        raw = values.get(name)
        return "" if raw is None else str(raw)

    parts = [_input("fn_id", "FN ID", value("fn_id"), True, f' maxlength="{FN_ID_LENGTH}"')]
    parts += [_input(n, label, value(n), True) for n, label in REQUIRED_TEXT_FIELDS]
    parts += [
        _input(n, label, value(n), required, ' type="number" step="0.01" min="0"')
        for n, label, required in DECIMAL_FIELDS
    ]
    attendance = str(values.get("attendance") or "").strip().lower()
    checked = " checked" if attendance in ("1", "true", "on", "yes") else ""
    parts.append(
        f'<div><label>Attendance<input type="checkbox" name="attendance" value="1"{checked}></label></div>'
    )
    parts += [_input(n, label, value(n)) for n, label in OPTIONAL_TEXT_FIELDS]
    return '<div class="grid">' + "".join(parts) + "</div>"


def _as_values(record: Shareholder) -> dict:
    values = {name: getattr(record, name) for name in COLUMNS}
    values["attendance"] = "1" if record.attendance else ""
    return values


def _record_form(record: Shareholder) -> str:
    return (
        '<div class="record"><form method="post" action="/">'
        f'<input type="hidden" name="old_fn_id" value="{escape(record.fn_id)}">'
        f'<input type="hidden" name="version" value="{record.version}">'
        f"{_fields(_as_values(record))}"
        '<button type="submit" name="intent" value="update">Update</button> '
        '<button type="submit" name="intent" value="delete" class="delete" '
        "onclick=\"return confirm('Are you sure you want to delete this shareholder?')\">"
        "Delete</button>"
        "</form></div>"
    )


def render_index(
    result: ListResult,
    error: Optional[str] = None,
    details: Optional[str] = None,
    submitted: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Render the whole registry page.

    Args:
        result: Read-path outcome; its error takes the place of the list.
        error: Rejection message from the last submission, if any.
        details: Secondary detail for `error`.
        submitted: Values of a rejected create submission, put back
            into the create form so nothing typed is lost.
    """
    banner = ""
    if error:
        extra = f"<div>{escape(details)}</div>" if details else ""
        banner = f'<div class="error"><strong>{escape(error)}</strong>{extra}</div>'

    if not result.ok:
        listing = f'<div class="error">{escape(result.error)}</div>'
    elif not result.records:
        listing = (
            "<h3>No shareholders yet</h3>"
            "<p>Add your first shareholder using the form above.</p>"
        )
    else:
        listing = "".join(_record_form(r) for r in result.records)

    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        "<title>Shareholders Registry</title>"
        f"<style>{_STYLE}</style></head><body>"
        "<h1>Shareholders Registry</h1>"
        "<section><h2>Create New Shareholder</h2>"
        f"{banner}"
        '<form method="post" action="/">'
        f"{_fields(submitted or {})}"
        '<button type="submit" name="intent" value="create">Add Shareholder</button>'
        "</form></section>"
        "<section><h2>Shareholders</h2>"
        f"<p>Total shareholders: {len(result.records)}</p>"
        f"{listing}</section>"
        "</body></html>"
    )
