"""Read-only lookup of registered parents."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError

from app.core.database import Database
from app.core.errors import TransientStoreError
from app.domain.parents.models import Parent


def normalize_email(email: str) -> str:
    """Lowercase and trim an email so it can be used as a lookup key."""
    return (email or "").strip().lower()


class ParentDirectory:
    """Identity directory consulted by the verification flow."""

    def __init__(self, database: Database) -> None:
        self._database = database

    async def find_by_email(self, email: str) -> Optional[Parent]:
        try:
            async with self._database.session() as session:
                result = await session.execute(
                    select(Parent).where(Parent.email == normalize_email(email))
                )
                return result.scalar_one_or_none()
        except DBAPIError as exc:
            raise TransientStoreError() from exc

    async def register(
        self,
        name: str,
        email: str,
        phone: str | None = None,
        children: list | None = None,
        children_details: list | None = None,
    ) -> Parent:
        """Create a parent record. Used by seeding and admin tooling only."""
        parent = Parent(
            name=name.strip(),
            email=normalize_email(email),
            phone=phone,
            children=children or [],
            children_details=children_details or [],
        )
        async with self._database.session() as session:
            session.add(parent)
            await session.commit()
            await session.refresh(parent)
        return parent


def serialize_parent(parent: Parent) -> dict:
    return {
        "id": parent.id,
        "name": parent.name,
        "email": parent.email,
        "phone": parent.phone,
        "children": parent.children or [],
        "children_details": parent.children_details or [],
    }


__all__ = ["ParentDirectory", "normalize_email", "serialize_parent"]
