"""
予約可能な時刻スロットの定義

このモジュールは、予約可能な時刻（スロット）の固定された一覧と、
"H:MM AM/PM" 形式のラベルと0時からの経過分数との相互変換を提供します。
"""

import re
from typing import List, Optional, Union

from models.booking_models import MINUTES_PER_DAY, TimeSlot

SLOT_INTERVAL_MINUTES = 30
FIRST_SLOT_MINUTE = 6 * 60    # 6:00 AM
LAST_SLOT_MINUTE = 23 * 60    # 11:00 PM（11:30 PMは含めない）

# 外部ストアで終日予約を表すラベル
FULL_DAY_LABEL = "Full Day"

_LABEL_PATTERN = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)

SlotLike = Union[TimeSlot, str, int]


def to_label(minute: int) -> str:
    """0時からの経過分数を "H:MM AM/PM" 形式に変換"""
    if not 0 <= minute < MINUTES_PER_DAY:
        raise ValueError(f"時刻は0〜{MINUTES_PER_DAY - 1}分の範囲である必要があります: {minute}")

    hour, mins = divmod(minute, 60)
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{mins:02d} {period}"


def to_minutes(label: str) -> int:
    """
    "H:MM AM/PM" 形式の時刻を0時からの経過分数に変換

    入力フォームは generate_slots() のラベルしか送らない前提のため、
    解釈できない値は例外にせず0を返す。
    """
    if not isinstance(label, str):
        return 0

    match = _LABEL_PATTERN.fullmatch(label.strip())
    if not match:
        return 0

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3).upper()

    if not 1 <= hours <= 12 or minutes > 59:
        return 0

    # 24時間表記に変換
    if period == "PM" and hours != 12:
        hours += 12
    if period == "AM" and hours == 12:
        hours = 0

    return hours * 60 + minutes


def generate_slots() -> List[TimeSlot]:
    """6:00 AM〜11:00 PMの30分刻みのスロットを作成（呼び出しごとに新しいリスト）"""
    return [
        TimeSlot(minute, to_label(minute))
        for minute in range(FIRST_SLOT_MINUTE, LAST_SLOT_MINUTE + 1, SLOT_INTERVAL_MINUTES)
    ]


def duration(start_label: str, end_label: str) -> str:
    """開始〜終了の所要時間を表示用文字列で返す（終了 <= 開始なら空文字）"""
    start_minutes = to_minutes(start_label)
    end_minutes = to_minutes(end_label)

    if end_minutes <= start_minutes:
        return ""

    hours, minutes = divmod(end_minutes - start_minutes, 60)
    hour_text = f"{hours} hour{'s' if hours > 1 else ''}"
    minute_text = f"{minutes} minute{'s' if minutes != 1 else ''}"

    if hours == 0:
        return minute_text
    if minutes == 0:
        return hour_text
    return f"{hour_text} {minute_text}"


def as_minute(value: Optional[SlotLike]) -> Optional[int]:
    """スロット・ラベル・分数のいずれかを分数に変換（Noneはそのまま）"""
    if value is None:
        return None
    if isinstance(value, TimeSlot):
        return value.minute
    if isinstance(value, str):
        return to_minutes(value)
    return int(value)


def slot_index(slots: List[TimeSlot], value: Optional[SlotLike]) -> Optional[int]:
    """スロット一覧の中での位置を取得（見つからなければNone）"""
    minute = as_minute(value)
    if minute is None:
        return None
    for index, slot in enumerate(slots):
        if slot.minute == minute:
            return index
    return None


def is_full_day_label(value) -> bool:
    """外部ストアの時刻値が終日を表すか"""
    return isinstance(value, str) and value.strip().lower() == FULL_DAY_LABEL.lower()
