import pytest

from homeservices.core.errors import EmailAlreadyExists
from homeservices.db.models import Role, User
from homeservices.services.auth_service import AuthService
from homeservices.services.otp_service import OtpService


@pytest.fixture
def auth(db, tokens, hasher, identity, sender, settings):
    return AuthService(db, tokens, hasher, identity, OtpService(db, sender, settings))


def test_register_creates_unverified_user(auth, sender):
    result = auth.register("ana@example.com", "longenough", "Ana Lima")

    assert result.user.role is Role.USER
    assert result.user.is_email_verified is False
    assert result.verification_email_sent is True
    assert sender.last_code_for("ana@example.com") is not None


def test_concurrent_registration_loses_to_the_unique_email(auth, identity, db, monkeypatch):
    create_user = identity.create_user

    def racing_create_user(email, password, full_name):
        # the other registration for this email commits first
        db.add(User(external_uid="uid-winner", email=email, full_name="Winner", role=Role.USER))
        db.commit()
        return create_user(email, password, full_name)

    monkeypatch.setattr(identity, "create_user", racing_create_user)

    with pytest.raises(EmailAlreadyExists):
        auth.register("ana@example.com", "longenough", "Ana Lima")

    users = db.query(User).filter(User.email == "ana@example.com").all()
    assert [u.external_uid for u in users] == ["uid-winner"]
