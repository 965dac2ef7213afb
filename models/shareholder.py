"""
models/shareholder.py
---------------------
Domain model for a shareholder registry entry, plus the field catalogue
shared by validation, persistence and the HTML forms.
"""

from dataclasses import asdict, dataclass, fields
from decimal import Decimal

FN_ID_LENGTH = 6

# Share columns are NUMERIC(14,2)
SHARE_DECIMAL_PLACES = 2
SHARE_MAX_VALUE = Decimal("999999999999.99")

# (field name, human label) for text that must be non-empty after trimming
REQUIRED_TEXT_FIELDS: list[tuple[str, str]] = [
    ("name_amharic", "Name (Amharic)"),
    ("name_english", "Name (English)"),
    ("city", "City"),
    ("subcity", "Subcity"),
    ("wereda", "Wereda"),
    ("house_number", "House number"),
    ("phone_1", "Phone 1"),
    ("email", "Email"),
    ("nationality", "Nationality"),
]

# Free text that may be left empty
OPTIONAL_TEXT_FIELDS: list[tuple[str, str]] = [
    ("phone_2", "Phone 2"),
    ("receipt_number", "Receipt number"),
    ("certificate_number", "Certificate number"),
    ("taken_certificate", "Taken certificate"),
    ("error_1", "Error 1"),
    ("error_2", "Error 2"),
    ("error_3", "Error 3"),
    ("comment_1", "Comment 1"),
    ("comment_2", "Comment 2"),
]

# Non-negative decimals; `required` ones may not be left empty
DECIMAL_FIELDS: list[tuple[str, str, bool]] = [
    ("share_will", "Share will", True),
    ("share_amount", "Share amount", False),
    ("share_price", "Share price", False),
]


@dataclass
class Shareholder:
    """
    One row of the shareholders table.

    Attributes:
        fn_id: 6-character business key, unique across the registry.
        name_amharic / name_english: Holder name in both scripts.
        city, subcity, wereda, house_number: Postal address.
        phone_1, phone_2, email: Contact details (phone_2 optional).
        nationality: Holder nationality.
        share_will, share_amount, share_price: Non-negative decimals.
        attendance: Whether the holder attended the assembly.
        version: Compare-and-swap token, bumped on every update.
        receipt_number ... comment_2: Free-text annotations.
    """
    fn_id: str
    name_amharic: str
    name_english: str
    city: str
    subcity: str
    wereda: str
    house_number: str
    phone_1: str
    email: str
    nationality: str
    share_will: Decimal
    phone_2: str = ""
    share_amount: Decimal = Decimal("0")
    share_price: Decimal = Decimal("0")
    attendance: bool = False
    version: int = 1
    receipt_number: str = ""
    certificate_number: str = ""
    taken_certificate: str = ""
    error_1: str = ""
    error_2: str = ""
    error_3: str = ""
    comment_1: str = ""
    comment_2: str = ""

    @classmethod
    def from_row(cls, row: dict) -> "Shareholder":
        """Build a Shareholder from a database row, ignoring extra columns."""
        values = {name: row[name] for name in COLUMNS if name in row}
        for name, _, _ in DECIMAL_FIELDS:
            if values.get(name) is not None:
                values[name] = Decimal(str(values[name]))
        return cls(**values)

    def to_dict(self) -> dict:
        """JSON-friendly representation (decimals become floats)."""
        data = asdict(self)
        for name, _, _ in DECIMAL_FIELDS:
            data[name] = float(data[name])
        return data

    def __str__(self) -> str:
        return f"{self.fn_id} | {self.name_english} | {self.share_will}"


# Table columns in declaration order, used by INSERT/UPDATE
COLUMNS: tuple[str, ...] = tuple(f.name for f in fields(Shareholder))
