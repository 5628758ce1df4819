"""FastAPI dependencies for tenant context and database sessions.

The family (tenant) and acting user are explicit request headers; no
session state is consulted.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.db.session import get_db

__all__ = ["get_db", "get_family_id", "get_user_id", "FamilyId", "UserId", "DbSession"]


async def get_family_id(
    family_id: Annotated[UUID, Header(alias="X-Family-ID", description="Owning family (tenant) id")],
) -> UUID:
    return family_id


async def get_user_id(
    user_id: Annotated[
        UUID | None, Header(alias="X-User-ID", description="Acting user id, recorded on writes")
    ] = None,
) -> UUID | None:
    return user_id


FamilyId = Annotated[UUID, Depends(get_family_id)]
UserId = Annotated[UUID | None, Depends(get_user_id)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
