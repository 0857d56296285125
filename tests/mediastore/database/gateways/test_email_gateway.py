"""Tests for EmailGateway against an embedded database."""

from datetime import timedelta

import pytest

from mediastore.database.gateways import AdminDatabase, EmailGateway
from mediastore.models import DeliveryStatus, Email


@pytest.fixture
def emails(admin_database: AdminDatabase) -> EmailGateway:
    assert admin_database.admin is not None
    return admin_database.admin.emails


@pytest.fixture
def sample_email() -> Email:
    return Email(
        subject="Your order has shipped",
        sender="orders@example.com",
        body="<p>It is on its way.</p>",
        recipients=["customer@example.com", "copy@example.com"],
    )


class TestEmailGateway:
    """Test email persistence."""

    def test_add_and_get_by_id(self, emails: EmailGateway, sample_email: Email) -> None:
        emails.add(sample_email)

        stored = emails.get_by_id(sample_email.id)

        assert stored is not None
        assert stored.subject == "Your order has shipped"
        assert stored.sender == "orders@example.com"
        assert stored.body == "<p>It is on its way.</p>"
        assert stored.recipients == ["customer@example.com", "copy@example.com"]
        assert stored.status == DeliveryStatus.NEW
        assert stored.provider is None
        assert stored.created_date == sample_email.created_date

    def test_add_duplicate_is_ignored(
        self, emails: EmailGateway, sample_email: Email
    ) -> None:
        emails.add(sample_email)
        emails.add(sample_email)

        assert emails.count() == 1

    def test_update(self, emails: EmailGateway, sample_email: Email) -> None:
        emails.add(sample_email)
        sample_email.status = DeliveryStatus.SENT
        sample_email.provider = "ses"
        sample_email.message_id = "0100018b-abcd"
        sample_email.updated_date = sample_email.created_date + timedelta(seconds=3)

        emails.update(sample_email)

        stored = emails.get_by_id(sample_email.id)
        assert stored is not None
        assert stored.status == DeliveryStatus.SENT
        assert stored.provider == "ses"
        assert stored.message_id == "0100018b-abcd"
        assert stored.updated_date == sample_email.updated_date

    def test_error_message_is_stored_in_attributes(
        self, emails: EmailGateway, sample_email: Email
    ) -> None:
        emails.add(sample_email)
        sample_email.status = DeliveryStatus.FAILED
        sample_email.error_message = "Mailbox unavailable"

        emails.update(sample_email)

        stored = emails.get_by_id(sample_email.id)
        assert stored is not None
        assert stored.error_message == "Mailbox unavailable"

    def test_list_all_ordered_by_creation(self, emails: EmailGateway) -> None:
        older = Email(subject="first")
        newer = Email(subject="second", created_date=older.created_date + timedelta(hours=1))
        newer.status = DeliveryStatus.SENT
        emails.add(newer)
        emails.add(older)

        assert [email.subject for email in emails.list_all()] == ["first", "second"]
        assert [email.id for email in emails.list_all(DeliveryStatus.SENT)] == [newer.id]
        assert emails.list_all(DeliveryStatus.BOUNCED) == []

    def test_delete(self, emails: EmailGateway, sample_email: Email) -> None:
        emails.add(sample_email)

        emails.delete(sample_email)

        assert emails.count() == 0
        assert emails.get_by_id(sample_email.id) is None
