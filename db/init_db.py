"""
db/init_db.py
-------------
Creates the shareholders table if it does not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import Database
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- One row per shareholder, keyed by the 6-character FN ID
CREATE TABLE IF NOT EXISTS shareholders (
    fn_id               CHAR(6) PRIMARY KEY,
    name_amharic        VARCHAR(200) NOT NULL,
    name_english        VARCHAR(200) NOT NULL,
    city                VARCHAR(100) NOT NULL,
    subcity             VARCHAR(100) NOT NULL,
    wereda              VARCHAR(50)  NOT NULL,
    house_number        VARCHAR(50)  NOT NULL,
    phone_1             VARCHAR(30)  NOT NULL,
    phone_2             VARCHAR(30)  NOT NULL DEFAULT '',
    email               VARCHAR(320) NOT NULL,
    nationality         VARCHAR(100) NOT NULL,
    share_will          NUMERIC(14,2) NOT NULL CHECK (share_will >= 0),
    share_amount        NUMERIC(14,2) NOT NULL DEFAULT 0 CHECK (share_amount >= 0),
    share_price         NUMERIC(14,2) NOT NULL DEFAULT 0 CHECK (share_price >= 0),
    attendance          BOOLEAN NOT NULL DEFAULT FALSE,
    version             INT NOT NULL DEFAULT 1,
    receipt_number      VARCHAR(100) NOT NULL DEFAULT '',
    certificate_number  VARCHAR(100) NOT NULL DEFAULT '',
    taken_certificate   VARCHAR(100) NOT NULL DEFAULT '',
    error_1             TEXT NOT NULL DEFAULT '',
    error_2             TEXT NOT NULL DEFAULT '',
    error_3             TEXT NOT NULL DEFAULT '',
    comment_1           TEXT NOT NULL DEFAULT '',
    comment_2           TEXT NOT NULL DEFAULT '',
    created_at          TIMESTAMPTZ DEFAULT NOW()
);

-- Listing is always ordered by the English name
CREATE INDEX IF NOT EXISTS idx_shareholders_name_english ON shareholders(name_english);
"""


def create_tables(database: Database) -> None:
    """
    Execute the schema SQL on the given database.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    database.query(SCHEMA_SQL)
    logger.info("Database schema initialized successfully.")


if __name__ == "__main__":
    db = Database.from_config()
    db.open()
    try:
        create_tables(db)
    finally:
        db.close()
    print("Database schema created successfully.")
