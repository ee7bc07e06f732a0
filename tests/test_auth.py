"""
Тесты сервиса аутентификации.
"""

from datetime import timedelta

from conftest import ADMIN_PASSWORD
from storefront.core.auth import AuthService
from storefront.db.database import SessionLocal


def test_password_hashing():
    hashed = AuthService.get_password_hash(ADMIN_PASSWORD)

    assert hashed != ADMIN_PASSWORD
    assert AuthService.verify_password(ADMIN_PASSWORD, hashed)
    assert not AuthService.verify_password("wrong", hashed)


def test_token_roundtrip():
    token = AuthService.create_access_token({"sub": "user-1"})

    assert AuthService.verify_token(token)["sub"] == "user-1"


def test_expired_or_forged_token():
    expired = AuthService.create_access_token(
        {"sub": "user-1"}, expires_delta=timedelta(minutes=-1)
    )

    assert AuthService.verify_token(expired) is None
    assert AuthService.verify_token("garbage") is None


def test_find_user(create_user):
    create_user("admin")

    with SessionLocal() as db:
        assert AuthService.find_user(db, "admin").username == "admin"
        assert AuthService.find_user(db, "admin@admin.com").username == "admin"
        assert AuthService.find_user(db, " ADMIN ").username == "admin"
        assert AuthService.find_user(db, "ADMIN@admin.com") is None
        assert AuthService.find_user(db, "") is None
