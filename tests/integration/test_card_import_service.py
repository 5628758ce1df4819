"""Integration tests for CardImportService against a real database."""

from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from ledger_import.core.exceptions import (
    EmptyParseResultError,
    ImportConflictError,
    ImportLockedError,
    InvalidImportStateError,
    ResourceNotFoundError,
    UnsupportedProviderError,
    WorkbookExtractionError,
)
from ledger_import.models.import_row import ImportRow
from ledger_import.models.mapping_rule import MappingRule
from ledger_import.models.statement_import import StatementImport
from ledger_import.models.transaction import Transaction
from ledger_import.services.card_import import CardImportService

SAMSUNG_HEADER = ["승인일자", "가맹점명", "승인금액", "취소여부"]
MARCH = date(2024, 3, 1)


def samsung_statement(xlsx, rows):
    return xlsx({"국내이용내역": [["삼성카드 이용대금 명세서"], SAMSUNG_HEADER, *rows]})


async def _upload(service, family_id, data, provider="samsung"):
    return await service.upload(
        family_id=family_id,
        data=data,
        file_name="samsung_202403.xlsx",
        provider=provider,
        person_type="husband",
        statement_month=MARCH,
    )


async def _count(db_session, model, family_id):
    result = await db_session.execute(
        select(func.count(model.id)).where(model.family_id == family_id)
    )
    return result.scalar_one()


class TestUpload:
    async def test_upload_stores_rows_for_review(self, db_session, family_id, xlsx):
        data = samsung_statement(
            xlsx,
            [
                ["2024-03-05", "스타벅스 강남점", "5,000", "-"],
                ["2024-03-06", "이마트 성수점", "42,300", ""],
                ["2024-03-07", "쿠팡", "12,000", "취소"],
            ],
        )
        service = CardImportService(db_session)

        result = await _upload(service, family_id, data)

        assert result.provider == "samsung"
        assert result.sheet_name == "국내이용내역"
        assert result.total_rows == 2
        assert result.matched_rows == 0
        assert result.statement_month == MARCH

        statement_import, rows = await service.get_import_detail(family_id, result.import_id)
        assert statement_import.status == "reviewing"
        assert statement_import.card_provider == "samsung"
        assert [r.merchant_name for r in rows] == ["스타벅스 강남점", "이마트 성수점"]
        assert [r.amount for r in rows] == [5000, 42300]
        assert all(not r.is_excluded and not r.is_matched for r in rows)
        assert rows[0].original_data["1"] == "스타벅스 강남점"

    async def test_oversized_amount_row_dropped(self, db_session, family_id, xlsx):
        data = samsung_statement(
            xlsx,
            [
                ["2024-03-05", "A", "99999999999999999999999", "-"],
                ["2024-03-06", "B", "5000", "-"],
            ],
        )
        service = CardImportService(db_session)

        result = await _upload(service, family_id, data)

        assert result.total_rows == 1
        _, rows = await service.get_import_detail(family_id, result.import_id)
        assert [(r.merchant_name, r.amount) for r in rows] == [("B", 5000)]

    async def test_rules_categorize_on_upload(self, db_session, family_id, categories, xlsx):
        db_session.add(
            MappingRule(family_id=family_id, keyword="스타벅스", category_id=categories["카페"].id)
        )
        await db_session.commit()

        data = samsung_statement(
            xlsx,
            [
                ["2024-03-05", "스타벅스 강남점", "5000", "-"],
                ["2024-03-06", "김밥천국", "7000", "-"],
            ],
        )
        service = CardImportService(db_session)
        result = await _upload(service, family_id, data)

        assert result.total_rows == 2
        assert result.matched_rows == 1
        _, rows = await service.get_import_detail(family_id, result.import_id)
        by_name = {r.merchant_name: r for r in rows}
        assert by_name["스타벅스 강남점"].category_id == categories["카페"].id
        assert by_name["스타벅스 강남점"].is_matched is True
        assert by_name["김밥천국"].category_id is None
        assert by_name["김밥천국"].is_matched is False

    async def test_other_family_rules_ignored(self, db_session, family_id, categories, xlsx):
        other_family = uuid4()
        db_session.add(
            MappingRule(family_id=other_family, keyword="스타벅스", category_id=categories["카페"].id)
        )
        await db_session.commit()

        data = samsung_statement(xlsx, [["2024-03-05", "스타벅스", "5000", "-"]])
        result = await _upload(CardImportService(db_session), family_id, data)

        assert result.matched_rows == 0

    async def test_statement_month_normalized_to_first_day(self, db_session, family_id, xlsx):
        data = samsung_statement(xlsx, [["2024-03-05", "스타벅스", "5000", "-"]])
        result = await CardImportService(db_session).upload(
            family_id=family_id,
            data=data,
            file_name="a.xlsx",
            provider=None,
            person_type="wife",
            statement_month=date(2024, 3, 17),
        )
        assert result.statement_month == MARCH

    async def test_empty_parse_creates_nothing(self, db_session, family_id, xlsx):
        data = xlsx({"Sheet1": [["제목"], ["a", "b"]]})

        with pytest.raises(EmptyParseResultError) as exc_info:
            await _upload(CardImportService(db_session), family_id, data, provider=None)

        assert exc_info.value.error_code == "PARSE_005"
        assert await _count(db_session, StatementImport, family_id) == 0
        assert await _count(db_session, ImportRow, family_id) == 0

    async def test_hint_that_matches_nothing_is_empty(self, db_session, family_id, xlsx):
        data = samsung_statement(xlsx, [["2024-03-05", "스타벅스", "5000", "-"]])

        with pytest.raises(EmptyParseResultError):
            await _upload(CardImportService(db_session), family_id, data, provider="kb")

    async def test_unknown_provider(self, db_session, family_id, xlsx):
        data = samsung_statement(xlsx, [["2024-03-05", "스타벅스", "5000", "-"]])

        with pytest.raises(UnsupportedProviderError):
            await _upload(CardImportService(db_session), family_id, data, provider="hyundai")

    async def test_corrupt_workbook(self, db_session, family_id):
        with pytest.raises(WorkbookExtractionError) as exc_info:
            await _upload(CardImportService(db_session), family_id, b"PK\x03\x04broken")

        assert exc_info.value.error_code == "PARSE_002"


class TestReview:
    async def _import_with_rows(self, db_session, family_id, xlsx):
        data = samsung_statement(
            xlsx,
            [
                ["2024-03-05", "스타벅스", "5000", "-"],
                ["2024-03-06", "이마트", "30000", "-"],
            ],
        )
        service = CardImportService(db_session)
        result = await _upload(service, family_id, data)
        _, rows = await service.get_import_detail(family_id, result.import_id)
        return service, result.import_id, rows

    async def test_set_row_category(self, db_session, family_id, categories, xlsx):
        service, import_id, rows = await self._import_with_rows(db_session, family_id, xlsx)

        row = await service.set_row_category(family_id, import_id, rows[1].id, categories["마트"].id)

        assert row.category_id == categories["마트"].id
        assert row.is_matched is True

    async def test_set_row_category_unknown_category(self, db_session, family_id, xlsx):
        service, import_id, rows = await self._import_with_rows(db_session, family_id, xlsx)

        with pytest.raises(ResourceNotFoundError) as exc_info:
            await service.set_row_category(family_id, import_id, rows[0].id, uuid4())

        assert exc_info.value.error_code == "IMP_003"

    async def test_row_from_other_import_not_found(self, db_session, family_id, xlsx):
        service, import_id, rows = await self._import_with_rows(db_session, family_id, xlsx)
        _, other_import_id, _ = await self._import_with_rows(db_session, family_id, xlsx)

        with pytest.raises(ResourceNotFoundError) as exc_info:
            await service.set_row_excluded(family_id, other_import_id, rows[0].id, True)

        assert exc_info.value.error_code == "IMP_002"

    async def test_other_family_cannot_see_import(self, db_session, family_id, xlsx):
        service, import_id, _ = await self._import_with_rows(db_session, family_id, xlsx)

        with pytest.raises(ResourceNotFoundError) as exc_info:
            await service.get_import_detail(uuid4(), import_id)

        assert exc_info.value.error_code == "IMP_001"

    async def test_list_imports_newest_first(self, db_session, family_id, xlsx):
        service, first_id, _ = await self._import_with_rows(db_session, family_id, xlsx)
        _, second_id, _ = await self._import_with_rows(db_session, family_id, xlsx)

        imports = await service.list_imports(family_id)

        assert [i.id for i in imports] == [second_id, first_id]
        assert await service.list_imports(uuid4()) == []


class TestConfirm:
    async def test_confirm_skips_excluded_rows(self, db_session, family_id, categories, xlsx):
        data = samsung_statement(
            xlsx,
            [
                ["2024-03-05", "스타벅스", "5000", "-"],
                ["2024-03-06", "이마트", "30000", "-"],
            ],
        )
        service = CardImportService(db_session)
        result = await _upload(service, family_id, data)
        _, rows = await service.get_import_detail(family_id, result.import_id)
        await service.set_row_category(family_id, result.import_id, rows[0].id, categories["카페"].id)
        await service.set_row_excluded(family_id, result.import_id, rows[1].id, True)

        user_id = uuid4()
        confirmed = await service.confirm_import(family_id, result.import_id, user_id)

        assert confirmed.status == "confirmed"
        assert confirmed.transactions_created == 1
        assert confirmed.confirmed_at is not None

        txns = (
            await db_session.execute(select(Transaction).where(Transaction.family_id == family_id))
        ).unique().scalars().all()
        assert len(txns) == 1
        txn = txns[0]
        assert txn.type == "expense"
        assert txn.description == "스타벅스"
        assert txn.amount == 5000
        assert txn.transaction_date == date(2024, 3, 5)
        assert txn.category_id == categories["카페"].id
        assert txn.person_type == "husband"
        assert txn.card_provider == "samsung"
        assert txn.card_statement_row_id == rows[0].id
        assert txn.created_by == user_id
        assert txn.is_emergency is False

    async def test_confirm_twice_conflicts(self, db_session, family_id, xlsx):
        data = samsung_statement(xlsx, [["2024-03-05", "스타벅스", "5000", "-"]])
        service = CardImportService(db_session)
        result = await _upload(service, family_id, data)
        await service.confirm_import(family_id, result.import_id)

        with pytest.raises(ImportConflictError) as exc_info:
            await service.confirm_import(family_id, result.import_id)

        assert exc_info.value.error_code == "IMP_005"
        assert await _count(db_session, Transaction, family_id) == 1

    async def test_confirm_all_excluded(self, db_session, family_id, xlsx):
        data = samsung_statement(xlsx, [["2024-03-05", "스타벅스", "5000", "-"]])
        service = CardImportService(db_session)
        result = await _upload(service, family_id, data)
        _, rows = await service.get_import_detail(family_id, result.import_id)
        await service.set_row_excluded(family_id, result.import_id, rows[0].id, True)

        with pytest.raises(InvalidImportStateError) as exc_info:
            await service.confirm_import(family_id, result.import_id)

        assert exc_info.value.error_code == "IMP_006"
        statement_import, _ = await service.get_import_detail(family_id, result.import_id)
        assert statement_import.status == "reviewing"

    async def test_confirmed_import_is_locked(self, db_session, family_id, categories, xlsx):
        data = samsung_statement(xlsx, [["2024-03-05", "스타벅스", "5000", "-"]])
        service = CardImportService(db_session)
        result = await _upload(service, family_id, data)
        _, rows = await service.get_import_detail(family_id, result.import_id)
        # Failed writes roll back and expire loaded objects.
        row_id = rows[0].id
        cafe_id = categories["카페"].id
        await service.confirm_import(family_id, result.import_id)

        with pytest.raises(ImportLockedError):
            await service.set_row_category(family_id, result.import_id, row_id, cafe_id)
        with pytest.raises(ImportLockedError):
            await service.set_row_excluded(family_id, result.import_id, row_id, True)
        with pytest.raises(ImportLockedError):
            await service.delete_import(family_id, result.import_id)

    async def test_failed_confirm_leaves_import_reviewing(
        self, db_session, family_id, xlsx, monkeypatch
    ):
        data = samsung_statement(xlsx, [["2024-03-05", "스타벅스", "5000", "-"]])
        service = CardImportService(db_session)
        result = await _upload(service, family_id, data)

        async def failing_add_many(objs):
            raise RuntimeError("ledger insert failed")

        monkeypatch.setattr(service.transaction_repo, "add_many", failing_add_many)
        with pytest.raises(RuntimeError):
            await service.confirm_import(family_id, result.import_id)

        statement_import, _ = await service.get_import_detail(family_id, result.import_id)
        assert statement_import.status == "reviewing"
        assert statement_import.confirmed_at is None
        assert await _count(db_session, Transaction, family_id) == 0

    async def test_confirm_unknown_import(self, db_session, family_id):
        with pytest.raises(ResourceNotFoundError):
            await CardImportService(db_session).confirm_import(family_id, uuid4())


class TestDelete:
    async def test_delete_reviewing_import_removes_rows(self, db_session, family_id, xlsx):
        data = samsung_statement(
            xlsx,
            [
                ["2024-03-05", "스타벅스", "5000", "-"],
                ["2024-03-06", "이마트", "30000", "-"],
            ],
        )
        service = CardImportService(db_session)
        result = await _upload(service, family_id, data)

        await service.delete_import(family_id, result.import_id)

        assert await _count(db_session, StatementImport, family_id) == 0
        assert await _count(db_session, ImportRow, family_id) == 0
        with pytest.raises(ResourceNotFoundError):
            await service.get_import_detail(family_id, result.import_id)

    async def test_delete_from_other_family(self, db_session, family_id, xlsx):
        data = samsung_statement(xlsx, [["2024-03-05", "스타벅스", "5000", "-"]])
        service = CardImportService(db_session)
        result = await _upload(service, family_id, data)

        with pytest.raises(ResourceNotFoundError):
            await service.delete_import(uuid4(), result.import_id)

        assert await _count(db_session, StatementImport, family_id) == 1
