"""End-to-end tests through the HTTP API."""

from datetime import date
from uuid import uuid4

import pytest

from ledger_import.models.budget_item import BudgetItem
from ledger_import.services.export import BOM, BUDGET_HEADER, TRANSACTION_HEADER

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

UPLOAD_PARAMS = {
    "person_type": "husband",
    "statement_month": "2024-03",
    "file_name": "samsung_202403.xlsx",
}


@pytest.fixture
def statement_bytes(xlsx):
    return xlsx(
        {
            "국내이용내역": [
                ["승인일자", "가맹점명", "승인금액", "취소여부"],
                ["2024-03-05", "스타벅스 강남점", "5,000", "-"],
                ["2024-03-06", "이마트 성수점", "42,300", "-"],
                ["2024-03-07", "쿠팡", "12,000", "취소"],
            ]
        }
    )


async def _upload(client, headers, body, **params):
    return await client.post(
        "/api/v1/imports/upload",
        params={**UPLOAD_PARAMS, **params},
        content=body,
        headers={**headers, "Content-Type": XLSX_CONTENT_TYPE},
    )


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert "X-Request-ID" in response.headers

    async def test_ready(self, client):
        response = await client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"


class TestUploadEndpoint:
    async def test_upload_success(self, client, family_headers, statement_bytes):
        response = await _upload(client, family_headers, statement_bytes, provider="samsung")

        assert response.status_code == 201
        body = response.json()
        assert body["provider"] == "samsung"
        assert body["total_rows"] == 2
        assert body["matched_rows"] == 0
        assert body["statement_month"] == "2024-03-01"

    async def test_upload_auto_detects_provider(self, client, family_headers, statement_bytes):
        response = await _upload(client, family_headers, statement_bytes)

        assert response.status_code == 201
        assert response.json()["provider"] == "samsung"

    async def test_missing_family_header(self, client, statement_bytes):
        response = await _upload(client, {}, statement_bytes)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"

    async def test_wrong_content_type(self, client, family_headers, statement_bytes):
        response = await client.post(
            "/api/v1/imports/upload",
            params=UPLOAD_PARAMS,
            content=statement_bytes,
            headers={**family_headers, "Content-Type": "text/csv"},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "API_001"

    async def test_not_a_workbook(self, client, family_headers):
        response = await _upload(client, family_headers, b"%PDF-1.7 not a workbook")

        assert response.status_code == 400
        assert response.json()["error_code"] == "API_005"

    async def test_bad_statement_month(self, client, family_headers, statement_bytes):
        response = await _upload(client, family_headers, statement_bytes, statement_month="2024-13")

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"

    async def test_year_zero_statement_month(self, client, family_headers, statement_bytes):
        response = await _upload(client, family_headers, statement_bytes, statement_month="0000-01")

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"

    async def test_no_rows_found(self, client, family_headers, xlsx):
        body = xlsx({"Sheet1": [["안내문"], ["내용 없음"]]})

        response = await _upload(client, family_headers, body)

        assert response.status_code == 400
        assert response.json()["error_code"] == "PARSE_005"

    async def test_unknown_provider(self, client, family_headers, statement_bytes):
        response = await _upload(client, family_headers, statement_bytes, provider="hyundai")

        assert response.status_code == 400
        assert response.json()["error_code"] == "PARSE_001"


class TestReviewFlow:
    async def test_review_confirm_and_export(
        self, client, family_headers, statement_bytes, categories
    ):
        cafe_id = str(categories["카페"].id)
        upload = await _upload(client, family_headers, statement_bytes)
        import_id = upload.json()["import_id"]

        detail = await client.get(f"/api/v1/imports/{import_id}", headers=family_headers)
        assert detail.status_code == 200
        body = detail.json()
        assert body["status"] == "reviewing"
        assert body["money"] == {"currency": "KRW", "minor_unit": 0}
        rows = body["rows"]
        assert [r["merchant_name"] for r in rows] == ["스타벅스 강남점", "이마트 성수점"]

        categorized = await client.patch(
            f"/api/v1/imports/{import_id}/rows/{rows[0]['id']}/category",
            json={"category_id": cafe_id},
            headers=family_headers,
        )
        assert categorized.status_code == 200
        assert categorized.json()["is_matched"] is True

        excluded = await client.patch(
            f"/api/v1/imports/{import_id}/rows/{rows[1]['id']}/exclusion",
            json={"excluded": True},
            headers=family_headers,
        )
        assert excluded.status_code == 200
        assert excluded.json()["is_excluded"] is True

        confirm = await client.post(
            f"/api/v1/imports/{import_id}/confirm",
            headers={**family_headers, "X-User-ID": str(uuid4())},
        )
        assert confirm.status_code == 200
        assert confirm.json()["transactions_created"] == 1
        assert confirm.json()["status"] == "confirmed"

        again = await client.post(f"/api/v1/imports/{import_id}/confirm", headers=family_headers)
        assert again.status_code == 409
        assert again.json()["error_code"] == "IMP_005"

        locked = await client.patch(
            f"/api/v1/imports/{import_id}/rows/{rows[1]['id']}/exclusion",
            json={"excluded": False},
            headers=family_headers,
        )
        assert locked.status_code == 403

        delete = await client.delete(f"/api/v1/imports/{import_id}", headers=family_headers)
        assert delete.status_code == 403
        assert delete.json()["error_code"] == "IMP_004"

        export = await client.get("/api/v1/exports/transactions.csv", headers=family_headers)
        assert export.status_code == 200
        assert export.headers["content-type"].startswith("text/csv")
        assert "attachment" in export.headers["content-disposition"]
        text = export.content.decode("utf-8")
        assert text.startswith(BOM)
        lines = text[len(BOM):].split("\n")
        assert lines[0] == TRANSACTION_HEADER
        assert lines[1] == '2024-03-05,지출,husband,"카페","스타벅스 강남점",5000,N,samsung,""'
        assert len(lines) == 2

    async def test_list_and_delete(self, client, family_headers, statement_bytes):
        upload = await _upload(client, family_headers, statement_bytes)
        import_id = upload.json()["import_id"]

        listing = await client.get("/api/v1/imports", headers=family_headers)
        assert listing.status_code == 200
        assert [i["id"] for i in listing.json()["imports"]] == [import_id]

        delete = await client.delete(f"/api/v1/imports/{import_id}", headers=family_headers)
        assert delete.status_code == 204

        missing = await client.get(f"/api/v1/imports/{import_id}", headers=family_headers)
        assert missing.status_code == 404
        assert missing.json()["error_code"] == "IMP_001"

    async def test_other_family_gets_404(self, client, family_headers, statement_bytes):
        upload = await _upload(client, family_headers, statement_bytes)
        import_id = upload.json()["import_id"]

        response = await client.get(
            f"/api/v1/imports/{import_id}", headers={"X-Family-ID": str(uuid4())}
        )
        assert response.status_code == 404

    async def test_confirm_all_excluded(self, client, family_headers, xlsx):
        body = xlsx(
            {"내역": [["승인일자", "가맹점명", "승인금액"], ["2024-03-05", "스타벅스", "5000"]]}
        )
        import_id = (await _upload(client, family_headers, body)).json()["import_id"]
        rows = (await client.get(f"/api/v1/imports/{import_id}", headers=family_headers)).json()[
            "rows"
        ]
        await client.patch(
            f"/api/v1/imports/{import_id}/rows/{rows[0]['id']}/exclusion",
            json={"excluded": True},
            headers=family_headers,
        )

        response = await client.post(f"/api/v1/imports/{import_id}/confirm", headers=family_headers)

        assert response.status_code == 422
        assert response.json()["error_code"] == "IMP_006"


class TestRulesEndpoint:
    async def test_rule_applies_to_next_upload(
        self, client, family_headers, statement_bytes, categories
    ):
        created = await client.post(
            "/api/v1/rules",
            json={"keyword": "스타벅스", "category_id": str(categories["카페"].id)},
            headers=family_headers,
        )
        assert created.status_code == 201
        assert created.json()["priority"] == 10

        upload = await _upload(client, family_headers, statement_bytes)
        assert upload.json()["matched_rows"] == 1

    async def test_save_from_row_and_delete(self, client, family_headers, categories):
        created = await client.post(
            "/api/v1/rules/from-row",
            json={"merchant_name": "이마트 성수점", "category_id": str(categories["마트"].id)},
            headers=family_headers,
        )
        assert created.status_code == 201
        rule_id = created.json()["id"]

        updated = await client.patch(
            f"/api/v1/rules/{rule_id}", json={"priority": 30}, headers=family_headers
        )
        assert updated.status_code == 200
        assert updated.json()["priority"] == 30

        listing = await client.get("/api/v1/rules", headers=family_headers)
        assert [r["keyword"] for r in listing.json()["rules"]] == ["이마트 성수점"]

        deleted = await client.delete(f"/api/v1/rules/{rule_id}", headers=family_headers)
        assert deleted.status_code == 204

        missing = await client.delete(f"/api/v1/rules/{rule_id}", headers=family_headers)
        assert missing.status_code == 404
        assert missing.json()["error_code"] == "RULE_001"

    async def test_blank_keyword(self, client, family_headers, categories):
        response = await client.post(
            "/api/v1/rules",
            json={"keyword": "   ", "category_id": str(categories["카페"].id)},
            headers=family_headers,
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "RULE_002"


class TestBudgetEndpoints:
    async def test_generate_and_export(self, client, family_headers, family_id, db_session):
        item = BudgetItem(
            family_id=family_id,
            type="expense",
            person_type="common",
            name="넷플릭스",
            amount=17000,
            effective_from=date(2024, 1, 1),
        )
        db_session.add(item)
        await db_session.commit()
        payload = {"month": "2024-03", "item_ids": [str(item.id)]}

        before = await client.post("/api/v1/budget/duplicates", json=payload, headers=family_headers)
        assert before.json() == {"duplicate_ids": [], "new_ids": [str(item.id)]}

        generated = await client.post("/api/v1/budget/generate", json=payload, headers=family_headers)
        assert generated.status_code == 200
        assert generated.json() == {"created": 1, "skipped": 0}

        after = await client.post("/api/v1/budget/duplicates", json=payload, headers=family_headers)
        assert after.json() == {"duplicate_ids": [str(item.id)], "new_ids": []}

        export = await client.get("/api/v1/exports/budget.csv", headers=family_headers)
        text = export.content.decode("utf-8")
        assert text == BOM + BUDGET_HEADER + '\n지출,common,"","넷플릭스",17000,매월,2024-01,,""'

    async def test_invalid_month(self, client, family_headers):
        response = await client.post(
            "/api/v1/budget/generate",
            json={"month": "2024-3", "item_ids": []},
            headers=family_headers,
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"

    async def test_year_zero_month(self, client, family_headers):
        response = await client.post(
            "/api/v1/budget/generate",
            json={"month": "0000-01", "item_ids": []},
            headers=family_headers,
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"
