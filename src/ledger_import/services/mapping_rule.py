"""Mapping rule management service."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.config import settings
from ledger_import.core.exceptions import ResourceNotFoundError, RuleValidationError
from ledger_import.models.mapping_rule import MappingRule
from ledger_import.repositories.category import CategoryRepository
from ledger_import.repositories.mapping_rule import MappingRuleRepository

logger = logging.getLogger(__name__)


class MappingRuleService:
    """Create, edit and delete the keyword rules used by categorization.

    Keywords are stored trimmed and are unique per family.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.rule_repo = MappingRuleRepository(db)
        self.category_repo = CategoryRepository(db)

    async def list_rules(self, family_id: UUID) -> list[MappingRule]:
        return await self.rule_repo.list_by_keyword(family_id)

    async def create_rule(
        self, family_id: UUID, keyword: str, category_id: UUID, priority: int | None = None
    ) -> MappingRule:
        """Create a rule, or update the existing rule with the same keyword.

        Raises:
            RuleValidationError: Keyword is blank
            ResourceNotFoundError: Category does not exist for this family
        """
        keyword = self._clean_keyword(keyword)
        try:
            await self._require_category(family_id, category_id)
            rule = await self.rule_repo.get_by_keyword(family_id, keyword)
            if rule is None:
                rule = await self.rule_repo.add(
                    MappingRule(
                        family_id=family_id,
                        keyword=keyword,
                        category_id=category_id,
                        priority=settings.default_rule_priority if priority is None else priority,
                    )
                )
            else:
                data: dict = {"category_id": category_id}
                if priority is not None:
                    data["priority"] = priority
                await self.rule_repo.update(rule, data)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(rule)
        logger.info("Mapping rule saved", extra={"rule_id": str(rule.id)})
        return rule

    async def save_from_row(self, family_id: UUID, merchant_name: str, category_id: UUID) -> MappingRule:
        """Upsert a rule keyed by a review row's literal merchant text.

        The row itself is not recategorized; the rule applies to later uploads.
        """
        return await self.create_rule(family_id, merchant_name, category_id)

    async def update_rule(
        self,
        family_id: UUID,
        rule_id: UUID,
        keyword: str | None = None,
        category_id: UUID | None = None,
        priority: int | None = None,
    ) -> MappingRule:
        """Raises:
        ResourceNotFoundError: Rule or category does not exist
        RuleValidationError: Keyword is blank or already used by another rule
        """
        try:
            rule = await self._get_rule(family_id, rule_id)
            data: dict = {}
            if keyword is not None:
                keyword = self._clean_keyword(keyword)
                existing = await self.rule_repo.get_by_keyword(family_id, keyword)
                if existing is not None and existing.id != rule.id:
                    raise RuleValidationError("RULE_002", {"reason": "duplicate_keyword"})
                data["keyword"] = keyword
            if category_id is not None:
                await self._require_category(family_id, category_id)
                data["category_id"] = category_id
            if priority is not None:
                data["priority"] = priority

            await self.rule_repo.update(rule, data)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(rule)
        return rule

    async def delete_rule(self, family_id: UUID, rule_id: UUID) -> None:
        try:
            rule = await self._get_rule(family_id, rule_id)
            await self.rule_repo.delete(rule)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def _get_rule(self, family_id: UUID, rule_id: UUID) -> MappingRule:
        rule = await self.rule_repo.get_by_id(family_id, rule_id)
        if rule is None:
            raise ResourceNotFoundError("RULE_001", {"rule_id": str(rule_id)})
        return rule

    async def _require_category(self, family_id: UUID, category_id: UUID) -> None:
        if await self.category_repo.get_by_id(family_id, category_id) is None:
            raise ResourceNotFoundError("IMP_003", {"category_id": str(category_id)})

    @staticmethod
    def _clean_keyword(keyword: str | None) -> str:
        cleaned = (keyword or "").strip()
        if not cleaned:
            raise RuleValidationError("RULE_002", {"reason": "empty_keyword"})
        return cleaned
