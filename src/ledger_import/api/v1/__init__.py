"""API version 1 routes."""

from fastapi import APIRouter

from ledger_import.api.v1 import budget, exports, imports, rules

router = APIRouter(prefix="/api/v1")

router.include_router(imports.router)
router.include_router(rules.router)
router.include_router(budget.router)
router.include_router(exports.router)
