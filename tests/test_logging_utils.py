import pytest

from newsdesk.logging_utils import _is_sensitive_field, redact_database_url


def test_database_password_is_masked():
    redacted = redact_database_url("postgresql://newsdesk:hunter2@db:5432/newsdesk")
    assert "hunter2" not in redacted
    assert redacted.startswith("postgresql://newsdesk:***@db:5432")


def test_unparseable_url_is_not_echoed():
    assert "garbage" not in redact_database_url("garbage with spaces")


@pytest.mark.parametrize(
    ("field", "sensitive"),
    [
        ("article.title", False),
        ("event.location", False),
        ("database_url", True),
        ("api_token", True),
    ],
)
def test_sensitive_fields(field: str, sensitive: bool):
    assert _is_sensitive_field(field) is sensitive
