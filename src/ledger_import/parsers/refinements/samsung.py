"""Samsung Card parser refinement.

Samsung exports carry an approval-date header (승인일자), a 취소여부 column
and, on the overseas sheet, a USD amount column.
"""

import re
from typing import Any

from ledger_import.core.providers import PROVIDER_SAMSUNG
from ledger_import.parsers.generic import GenericParser
from ledger_import.parsers.normalize import cell_text


class SamsungCardParser(GenericParser):
    """Parser refinement for Samsung Card statement workbooks.

    Samsung-specific behaviors:
    - Date header is an exact 승인일자 / 이용일(자) / 이용일시 / 거래일 label
    - 취소여부 / 취소구분 column: any value other than blank or "-" cancels the row
    - A row whose text ends in 취소 is a cancellation even without the column
    - An amount header mentioning USD, 달러 or 해외 marks the sheet as overseas
    """

    provider_code = PROVIDER_SAMSUNG

    DETECT_PATTERNS = [
        (re.compile(r"승인일자"), re.compile(r"가맹점명"), re.compile(r"승인금액")),
        (re.compile(r"삼성카드|삼성"), re.compile(r"이용|가맹점|금액")),
        (re.compile(r"이용일"), re.compile(r"가맹점"), re.compile(r"이용금액")),
    ]

    DATE_HEADERS = [re.compile(r"^승인일자$|^이용일(자)?$|^이용일시$|^거래일$")]
    MERCHANT_HEADERS = [re.compile(r"^가맹점(명)?$|^이용가맹점$|이용처|상호명")]
    AMOUNT_HEADERS = [re.compile(r"승인금액|이용금액|결제금액")]
    CANCEL_HEADERS = [re.compile(r"취소여부|취소구분")]
    OVERSEAS_AMOUNT_HEADER = re.compile(r"USD|달러|해외", re.IGNORECASE)
    CHECK_TRAILING_CANCEL = True

    def _is_cancel_marker(self, value: Any) -> bool:
        text = cell_text(value)
        return bool(text) and text != "-"
