# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# STATUS: Tests - Fixtures shared across compiler and driver tests
# PURPOSE: Account schema used for golden DDL and end-to-end runs
# CREATED: 17 OCT 2026
# ============================================================================

import copy

import pytest

EMAIL_CHECK = "email IS NULL OR email REGEXP '^[^@]+@[^@]+[.][^@]{2,}$'"
PHONE_CHECK = "phone IS NULL OR phone REGEXP '^[0-9]{8,16}$'"

ACCOUNT = {
    "type": "Account",
    "table": "Account",
    "properties": {
        "id": {
            "type": "integer",
            "primaryKey": True,
            "description": "Unique identifier, auto-generated. It's the primary key.",
        },
        "inserted": {
            "type": "date",
            "dateOn": "insert",
            "index": ["inserted"],
            "description": "Timestamp when current record is inserted",
        },
        "updated": {
            "type": "date",
            "dateOn": "update",
            "index": ["updated"],
            "description": "Timestamp when current record is updated",
        },
        "etag": {"type": "string", "maxLength": 1024, "description": "Possible ETag"},
        "comments": {"type": "string", "maxLength": 8192, "description": "General comments"},
        "country": {"type": "string", "maxLength": 16, "default": "US", "description": "Country code"},
        "email": {"type": "string", "unique": True, "constraint": EMAIL_CHECK, "description": "Main email"},
        "established": {"type": "date", "maxLength": 6, "minimum": "2020-01-01", "description": "Established on"},
        "enabled": {"type": "boolean", "default": True, "description": "Whether it is enabled"},
        "externalId": {"type": "string", "maxLength": 512, "unique": True, "description": "External ID"},
        "phone": {"type": "string", "constraint": PHONE_CHECK, "description": "Phone number"},
        "name": {"type": "string", "maxLength": 256, "unique": True, "description": "Descriptive name"},
        "preferences": {
            "type": "object",
            "default": {"wrap": True, "minAge": 18},
            "description": "General options",
        },
        "valueList": {
            "type": "array",
            "as": "JSON_EXTRACT(preferences, '$.*')",
            "index": ["id", "valueList", "enabled"],
        },
    },
    "required": ["country", "enabled", "name", "preferences"],
    "fullText": ["comments", "country", "phone", "name"],
}


@pytest.fixture
def account_schema():
    """Account schema as loaded from JSON (a fresh copy per test)."""
    return copy.deepcopy(ACCOUNT)
