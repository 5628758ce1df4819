"""KB Kookmin Card parser refinement."""

import re
from typing import Any

from ledger_import.core.providers import PROVIDER_KB
from ledger_import.parsers.generic import GenericParser
from ledger_import.parsers.normalize import cell_text


class KBCardParser(GenericParser):
    """Parser refinement for KB Kookmin Card statement workbooks.

    KB marks cancellations in a 결제상태 / 상태 column whose value contains
    취소 (e.g. "승인취소", "부분취소"); normal rows read "정상" or similar.
    """

    provider_code = PROVIDER_KB

    DETECT_PATTERNS = [
        (re.compile(r"국민카드|KB", re.IGNORECASE), re.compile(r"이용|가맹점|금액")),
        (re.compile(r"이용일자"), re.compile(r"이용가맹점|가맹점")),
    ]

    DATE_HEADERS = [re.compile(r"^이용일(자)?$|^거래일(자)?$")]
    MERCHANT_HEADERS = [re.compile(r"가맹점(명)?$|이용가맹점|이용처")]
    AMOUNT_HEADERS = [re.compile(r"이용금액$|이용\s?금액$|거래금액")]
    CANCEL_HEADERS = [re.compile(r"결제상태|상태")]

    def _is_cancel_marker(self, value: Any) -> bool:
        return "취소" in cell_text(value)
