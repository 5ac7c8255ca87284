"""
Adapters: User and affiliate repositories.

Implement the UserRepository and AffiliateRepository ports.
Both are simple primary-key or unique-key lookups.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine

from eventdesk.domain.events.entities import Affiliate, QueryResult, User
from eventdesk.domain.events.ports import AffiliateRepository, UserRepository
from eventdesk.infrastructure.events.query import run_query
from eventdesk.infrastructure.tables import affiliates, users


class UserRepositoryAdapter(UserRepository):
    """SQL implementation of the user repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_user(self, user_id: str) -> QueryResult[Optional[User]]:
        def operation() -> Optional[User]:
            with self._engine.connect() as conn:
                row = conn.execute(
                    select(users.c.id, users.c.username, users.c.is_admin).where(
                        users.c.id == user_id
                    )
                ).first()
            if row is None:
                return None
            return User(id=row.id, username=row.username, is_admin=bool(row.is_admin))

        return run_query(operation, "get_user")


class AffiliateRepositoryAdapter(AffiliateRepository):
    """SQL implementation of the affiliate repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_affiliate_by_code(self, code: str) -> QueryResult[Optional[Affiliate]]:
        def operation() -> Optional[Affiliate]:
            with self._engine.connect() as conn:
                row = conn.execute(
                    select(affiliates.c.id, affiliates.c.affiliate_code, affiliates.c.user_id).where(
                        affiliates.c.affiliate_code == code
                    )
                ).first()
            if row is None:
                return None
            return Affiliate(id=row.id, affiliate_code=row.affiliate_code, user_id=row.user_id)

        return run_query(operation, "get_affiliate_by_code")
