"""Mapping rule repository."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.models.mapping_rule import MappingRule
from ledger_import.repositories.base import BaseRepository


class MappingRuleRepository(BaseRepository[MappingRule]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, MappingRule)

    async def get_for_matching(self, family_id: UUID) -> list[MappingRule]:
        """Rules by priority descending, oldest first within a priority."""
        result = await self.db.execute(
            select(MappingRule)
            .where(MappingRule.family_id == family_id)
            .order_by(MappingRule.priority.desc(), MappingRule.created_at)
        )
        return list(result.unique().scalars().all())

    async def get_by_keyword(self, family_id: UUID, keyword: str) -> MappingRule | None:
        result = await self.db.execute(
            select(MappingRule).where(
                MappingRule.family_id == family_id, MappingRule.keyword == keyword
            )
        )
        return result.unique().scalar_one_or_none()

    async def list_by_keyword(self, family_id: UUID) -> list[MappingRule]:
        result = await self.db.execute(
            select(MappingRule)
            .where(MappingRule.family_id == family_id)
            .order_by(MappingRule.keyword)
        )
        return list(result.unique().scalars().all())
