import pytest

from data_enricher.validation.pii import PII_PLACEHOLDERS, PIIDetector


@pytest.fixture(scope="module")
def detector():
    return PIIDetector()


def test_email_redacted_with_placeholder(detector):
    result = detector.scan("contact me at a@b.com", redact=True)
    assert result.has_pii
    assert result.pii_types == ["email"]
    assert result.redacted_text == "contact me at [EMAIL_REDACTED]"
    assert result.redactions[0].matches == 1


def test_categories_reported_in_fixed_order(detector):
    text = "SSN 123-45-6789, write to jane.doe@example.org"
    assert detector.scan(text).pii_types == ["email", "ssn"]


def test_phone_and_card_detected(detector):
    assert "phone" in detector.scan("call (555) 123-4567 tonight").pii_types
    result = detector.scan("card 4111 1111 1111 1111 on file", redact=True)
    assert "credit_card" in result.pii_types
    assert "4111" not in result.redacted_text
    assert PII_PLACEHOLDERS["credit_card"] in result.redacted_text


def test_every_match_of_a_category_is_replaced(detector):
    result = detector.scan("a@b.com and c@d.org", redact=True)
    assert result.redacted_text == "[EMAIL_REDACTED] and [EMAIL_REDACTED]"
    assert result.redactions[0].matches == 2


def test_no_redacted_text_without_request_or_match(detector):
    assert detector.scan("contact me at a@b.com", redact=False).redacted_text is None
    clean = detector.scan("nothing sensitive in here", redact=True)
    assert clean.has_pii is False
    assert clean.pii_types == []
    assert clean.redacted_text is None


def test_original_text_not_mutated(detector):
    text = "mail a@b.com"
    detector.scan(text, redact=True)
    assert text == "mail a@b.com"


def test_redaction_is_idempotent(detector):
    text = "Reach me at a@b.com or 555-123-4567, SSN 123-45-6789"
    once = detector.redact(text)
    assert detector.scan(once).has_pii is False
    assert detector.redact(once) == once


def test_placeholders_do_not_match_any_pattern(detector):
    for placeholder in PII_PLACEHOLDERS.values():
        assert detector.scan(placeholder).pii_types == []


def test_categories_property(detector):
    assert detector.categories == ["email", "phone", "ssn", "credit_card"]


def test_whitespace_adjacent_matches_each_get_a_placeholder(detector):
    emails = detector.scan("a@b.com c@d.org", redact=True)
    assert emails.redacted_text == "[EMAIL_REDACTED] [EMAIL_REDACTED]"
    assert emails.redactions[0].matches == 2

    phones = detector.scan("555-123-4567 555-987-6543", redact=True)
    assert phones.redacted_text == "[PHONE_REDACTED] [PHONE_REDACTED]"
