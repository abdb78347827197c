"""Tests for the credential store, auth strategies and account flows."""

import pytest
from sqlalchemy import func, select

from foodvan.auth.exceptions import (
    AccountExists,
    InvalidCredentials,
    PersistenceError,
    Unauthorized,
    WeakPassword,
)
from foodvan.auth.strategies import BearerStrategy, SessionStrategy
from foodvan.models import Customer, Vendor
from foodvan.services.accounts.service import AccountService
from foodvan.services.accounts.store import CredentialStore
from foodvan.services.security import PasswordHasher, PasswordPolicy, TokenIssuer
from foodvan.services.sessions import MockSessionStore


@pytest.fixture
def issuer():
    return TokenIssuer(secret="unit-secret")


@pytest.fixture
def sessions():
    return MockSessionStore()


@pytest.fixture
def customers(db, issuer, sessions):
    return AccountService(
        store=CredentialStore(db, Customer),
        hasher=PasswordHasher(rounds=4),
        policy=PasswordPolicy(),
        issuer=issuer,
        sessions=sessions,
    )


@pytest.fixture
def vendors(db, issuer, sessions):
    return AccountService(
        store=CredentialStore(db, Vendor),
        hasher=PasswordHasher(rounds=4),
        policy=PasswordPolicy(),
        issuer=issuer,
        sessions=sessions,
    )


async def count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar()


class TestRegistration:

    async def test_register_then_login(self, customers, sessions):
        account = await customers.register("a@b.com", "abc12345", given_name="Ada", family_name="L")

        assert account.id is not None
        assert account.password != "abc12345"
        assert account.token is None

        result = await customers.login("a@b.com", "abc12345")
        assert result.account.id == account.id
        assert result.token == account.token
        assert (await sessions.get(result.session_id)).account_id == account.id

    @pytest.mark.parametrize("password", ["short1", "alllettersnodigit", "1234567"])
    async def test_weak_password_creates_nothing(self, customers, db, password):
        with pytest.raises(WeakPassword):
            await customers.register("a@b.com", password)
        assert await count(db, Customer) == 0

    async def test_duplicate_email(self, customers, db):
        await customers.register("a@b.com", "abc12345")
        with pytest.raises(AccountExists):
            await customers.register("A@B.com ", "other9999")
        assert await count(db, Customer) == 1

    async def test_existing_account_checked_before_policy(self, customers):
        await customers.register("a@b.com", "abc12345")
        with pytest.raises(AccountExists):
            await customers.register("a@b.com", "weak")

    async def test_email_is_scoped_per_variant(self, customers, vendors):
        await customers.register("a@b.com", "abc12345")
        vendor = await vendors.register("a@b.com", "abc12345", name="Van")
        assert vendor.id is not None


class TestSessionStrategy:

    async def test_unknown_email_and_wrong_password_look_the_same(self, customers):
        await customers.register("a@b.com", "abc12345")

        with pytest.raises(InvalidCredentials) as unknown:
            await customers.strategy.authenticate("x@b.com", "abc12345")
        with pytest.raises(InvalidCredentials) as wrong:
            await customers.strategy.authenticate("a@b.com", "wrong1234")

        assert unknown.value.message == wrong.value.message

    async def test_failed_login_creates_no_session_or_token(self, customers, sessions, db):
        account = await customers.register("a@b.com", "abc12345")

        for _ in range(5):
            with pytest.raises(InvalidCredentials):
                await customers.login("a@b.com", "wrong1234")

        await db.refresh(account)
        assert account.token is None
        assert sessions._sessions == {}

        # No lockout after repeated failures
        assert (await customers.login("a@b.com", "abc12345")).token

    async def test_missing_credentials(self, db):
        strategy = SessionStrategy(CredentialStore(db, Customer), PasswordHasher(rounds=4))
        with pytest.raises(InvalidCredentials):
            await strategy.authenticate(None, None)


class TestBearerStrategy:

    async def test_token_round_trip(self, customers, db, issuer):
        account = await customers.register("a@b.com", "abc12345")
        token = (await customers.login("a@b.com", "abc12345")).token

        strategy = BearerStrategy(CredentialStore(db, Customer), issuer)
        assert (await strategy.resolve(token)).id == account.id

    async def test_new_login_revokes_previous_token(self, customers, db, issuer):
        await customers.register("a@b.com", "abc12345")
        first = (await customers.login("a@b.com", "abc12345")).token
        second = (await customers.login("a@b.com", "abc12345")).token

        strategy = BearerStrategy(CredentialStore(db, Customer), issuer)
        with pytest.raises(Unauthorized):
            await strategy.resolve(first)
        assert await strategy.resolve(second)

    @pytest.mark.parametrize("token", [None, "", "garbage"])
    async def test_rejects_missing_or_unknown(self, db, issuer, token):
        strategy = BearerStrategy(CredentialStore(db, Customer), issuer)
        with pytest.raises(Unauthorized):
            await strategy.resolve(token)

    async def test_customer_token_is_not_a_vendor_token(self, customers, db, issuer):
        await customers.register("a@b.com", "abc12345")
        token = (await customers.login("a@b.com", "abc12345")).token

        strategy = BearerStrategy(CredentialStore(db, Vendor), issuer)
        with pytest.raises(Unauthorized):
            await strategy.resolve(token)

    async def test_stored_token_naming_another_account(self, customers, db, issuer):
        first = await customers.register("a@b.com", "abc12345")
        second = await customers.register("c@d.com", "abc12345")
        second.token = issuer.issue(first)
        await db.commit()

        strategy = BearerStrategy(CredentialStore(db, Customer), issuer)
        with pytest.raises(Unauthorized):
            await strategy.resolve(second.token)


class TestUpdate:

    async def test_password_change_rotates_token(self, customers, db, issuer):
        account = await customers.register("a@b.com", "abc12345")
        old_token = (await customers.login("a@b.com", "abc12345")).token

        updated = await customers.update(account, "abc12345", new_password="xyz98765")

        assert updated.token != old_token
        strategy = BearerStrategy(CredentialStore(db, Customer), issuer)
        with pytest.raises(Unauthorized):
            await strategy.resolve(old_token)
        assert (await strategy.resolve(updated.token)).id == account.id

        with pytest.raises(InvalidCredentials):
            await customers.strategy.authenticate("a@b.com", "abc12345")
        assert await customers.strategy.authenticate("a@b.com", "xyz98765")

    async def test_wrong_old_password_changes_nothing(self, customers, db):
        account = await customers.register("a@b.com", "abc12345")
        token = (await customers.login("a@b.com", "abc12345")).token
        digest = account.password

        with pytest.raises(Unauthorized):
            await customers.update(account, "nope12345", new_email="z@b.com", new_password="xyz98765")

        await db.refresh(account)
        assert account.email == "a@b.com"
        assert account.password == digest
        assert account.token == token

    async def test_email_only_keeps_token(self, customers):
        account = await customers.register("a@b.com", "abc12345")
        token = (await customers.login("a@b.com", "abc12345")).token

        updated = await customers.update(account, "abc12345", new_email="New@B.com")
        assert updated.email == "new@b.com"
        assert updated.token == token

    async def test_weak_new_password_changes_nothing(self, customers, db):
        account = await customers.register("a@b.com", "abc12345")
        with pytest.raises(WeakPassword):
            await customers.update(account, "abc12345", new_email="z@b.com", new_password="short1")

        await db.refresh(account)
        assert account.email == "a@b.com"

    async def test_taken_email(self, customers):
        await customers.register("taken@b.com", "abc12345")
        account = await customers.register("a@b.com", "abc12345")
        with pytest.raises(AccountExists):
            await customers.update(account, "abc12345", new_email="taken@b.com")


async def test_logout_destroys_session_only(customers, sessions, db):
    account = await customers.register("a@b.com", "abc12345")
    result = await customers.login("a@b.com", "abc12345")

    await customers.logout(result.session_id)
    await customers.logout(None)

    assert await sessions.get(result.session_id) is None
    await db.refresh(account)
    assert account.token == result.token


class UnreachableSessionStore(MockSessionStore):
    async def create(self, kind, account_id):
        raise PersistenceError()


async def test_login_keeps_previous_token_when_sessions_are_down(customers, db):
    account = await customers.register("a@b.com", "abc12345")
    token = (await customers.login("a@b.com", "abc12345")).token

    customers.sessions = UnreachableSessionStore()
    with pytest.raises(PersistenceError):
        await customers.login("a@b.com", "abc12345")

    await db.refresh(account)
    assert account.token == token


async def test_failed_token_save_drops_the_session(customers, sessions, monkeypatch):
    await customers.register("a@b.com", "abc12345")

    async def broken_save(account):
        raise PersistenceError()

    monkeypatch.setattr(customers.store, "save", broken_save)
    with pytest.raises(PersistenceError):
        await customers.login("a@b.com", "abc12345")

    assert sessions._sessions == {}
