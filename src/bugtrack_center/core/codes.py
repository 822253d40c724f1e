"""回報編號產生器。

每位使用者的提交次數會對應到一個有限的英數標籤：

* 0–25 對應 ``A`` 到 ``Z``；
* 26 以後對應 ``A1`` 到 ``Z9``（字母循環、數字遞增）；
* 260 以後編號用盡，回傳 ``None``。

標籤再與使用者名稱推導出的 6 位十六進位碼組合成 ``CI-<HEX>-<LABEL>``。
"""

from __future__ import annotations

import string
from typing import Optional

REPORT_CODE_PREFIX = "CI"

_LETTERS = string.ascii_uppercase
_MAX_SUFFIX = 9

MAX_SUBMISSIONS = len(_LETTERS) * (_MAX_SUFFIX + 1)


def label_for_index(index: int) -> Optional[str]:
    """將提交次數轉為計數標籤，超出範圍時回傳 None。"""

    if index < 0:
        raise ValueError(f"index 必須為非負整數：{index}")
    if index < len(_LETTERS):
        return _LETTERS[index]

    suffix, letter_index = divmod(index - len(_LETTERS), len(_LETTERS))
    suffix += 1
    if suffix > _MAX_SUFFIX:
        return None
    return f"{_LETTERS[letter_index]}{suffix}"


def user_identifier(username: str) -> str:
    """以 31 為底的多項式雜湊推導 6 位大寫十六進位識別碼。

    逐一處理 UTF-16 編碼單元（含單獨的代理字元）並以 32 位元環繞運算，
    最後取低 24 位元。不具密碼學強度，碰撞不在此處理。
    """

    accumulator = 0
    encoded = username.encode("utf-16-le", "surrogatepass")
    for offset in range(0, len(encoded), 2):
        code_unit = int.from_bytes(encoded[offset : offset + 2], "little")
        accumulator = (code_unit + (accumulator << 5) - accumulator) & 0xFFFFFFFF
    return f"{accumulator & 0xFFFFFF:06X}"


def format_report_code(user_hex: str, label: str) -> str:
    return f"{REPORT_CODE_PREFIX}-{user_hex}-{label}"


def next_report_code(user_hex: str, submission_count: int) -> Optional[str]:
    """依目前提交次數組出下一個回報編號，用盡時回傳 None。"""

    label = label_for_index(submission_count)
    if label is None:
        return None
    return format_report_code(user_hex, label)
