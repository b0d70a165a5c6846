import uuid
from urllib.parse import parse_qs, urlparse

from accounts.domain import services as domain_services
from accounts.domain.services import (
    CERTIFICATION_EMAIL_SUBJECT,
    build_certification_email,
    build_certification_url,
    current_millis,
    secure_compare,
)


def test_certification_codes_are_uuid4_and_unique(monkeypatch):
    # the autouse fixture makes codes deterministic; undo it here
    monkeypatch.undo()
    codes = {domain_services.generate_certification_code() for _ in range(50)}
    assert len(codes) == 50
    for code in codes:
        assert uuid.UUID(code).version == 4


def test_secure_compare_behavior():
    assert secure_compare("abcd", "abcd") is True
    assert secure_compare("abcd", "abce") is False
    assert secure_compare("", "") is True
    assert secure_compare("a", "") is False
    assert secure_compare("é", "é") is True
    assert secure_compare("é", "e") is False


def test_current_millis_is_positive_epoch_millis():
    now = current_millis()
    # after 2020-01-01 in milliseconds
    assert now > 1_577_836_800_000


def test_certification_url_points_at_verify_route():
    url = build_certification_url("http://localhost:8080/", 7, "code-1")
    parsed = urlparse(url)
    assert parsed.netloc == "localhost:8080"
    assert parsed.path == "/v1/users/7/verify"
    assert parse_qs(parsed.query) == {"certification_code": ["code-1"]}


def test_certification_email_contains_link():
    subject, body = build_certification_email("http://svc", 3, "xyz")
    assert subject == CERTIFICATION_EMAIL_SUBJECT
    assert body.startswith(
        "Please click the following link to certify your email address: "
    )
    assert "http://svc/v1/users/3/verify?certification_code=xyz" in body
