"""
Credential Store

Data access for one account variant (Customer or Vendor). Every query
is scoped to the variant's table, so the same email may exist once as
a customer and once as a vendor.

Driver errors are logged here and re-raised as PersistenceError; a
unique-constraint violation on insert (two registrations racing for the
same email) is reported as AccountExists.
"""

import logging
from typing import Generic, Optional, TypeVar, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodvan.auth.exceptions import AccountExists, PersistenceError
from foodvan.models import Customer, Vendor

logger = logging.getLogger(__name__)

AccountT = TypeVar("AccountT", Customer, Vendor)
Account = Union[Customer, Vendor]


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore(Generic[AccountT]):
    """
    Account lookups and writes for a single variant.

    Example:
        >>> store = CredentialStore(db, Customer)
        >>> customer = await store.find_by_email("a@b.com")
    """

    def __init__(self, db: AsyncSession, model: type[AccountT]):
        self.db = db
        self.model = model

    @property
    def kind(self) -> str:
        return self.model.kind.value

    async def _scalar(self, query) -> Optional[AccountT]:
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.exception(f"{self.kind} lookup failed: {e}")
            raise PersistenceError() from e
        return result.scalar_one_or_none()

    async def get(self, account_id: int) -> Optional[AccountT]:
        return await self._scalar(select(self.model).where(self.model.id == account_id))

    async def find_by_email(self, email: str) -> Optional[AccountT]:
        return await self._scalar(
            select(self.model).where(self.model.email == normalize_email(email))
        )

    async def find_by_token(self, token: str) -> Optional[AccountT]:
        """Return the account whose current token is exactly ``token``."""
        if not token:
            return None
        return await self._scalar(select(self.model).where(self.model.token == token))

    async def add(self, account: AccountT) -> AccountT:
        """Insert a new account and return it with its id populated."""
        account.email = normalize_email(account.email)
        self.db.add(account)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"{self.kind} insert rejected by unique constraint")
            raise AccountExists() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"{self.kind} insert failed: {e}")
            raise PersistenceError() from e
        await self.db.refresh(account)
        return account

    async def save(self, account: AccountT) -> AccountT:
        """Commit pending changes on an account in one transaction."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"{self.kind} #{account.id} update rejected by unique constraint")
            raise AccountExists() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"{self.kind} #{account.id} update failed: {e}")
            raise PersistenceError() from e
        await self.db.refresh(account)
        return account
