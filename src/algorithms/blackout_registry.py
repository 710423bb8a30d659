"""
ブラックアウト（予約不可期間）の管理

スタッフが外部ストアで登録した終日・時間帯指定のブラックアウトを
日付ごとに保持し、「この日付・時刻は予約不可か」に答えます。
"""

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Union

import pandas as pd

from models.booking_models import BlackoutWindow, DateLike, to_date

logger = logging.getLogger(__name__)

MAX_RECURRENCE_ENTRIES = 365
RECURRING_SUFFIX = "(Recurring)"


class RecurrenceFrequency(Enum):
    """繰り返しブラックアウトの頻度"""
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class BlackoutRegistry:
    """日付ごとのブラックアウト一覧"""

    def __init__(self, windows: Optional[Iterable[BlackoutWindow]] = None):
        self._windows: List[BlackoutWindow] = list(windows or [])
        self._by_date: Dict[date, List[BlackoutWindow]] = defaultdict(list)
        for window in self._windows:
            self._by_date[window.date].append(window)

    def __iter__(self) -> Iterator[BlackoutWindow]:
        return iter(self._windows)

    def __len__(self) -> int:
        return len(self._windows)

    def dates(self) -> List[date]:
        """ブラックアウトが存在する日付（昇順）"""
        return sorted(self._by_date)

    def windows_for(self, target_date: Optional[DateLike]) -> List[BlackoutWindow]:
        """指定日のブラックアウトを取得（通常は0件か1件）"""
        day = to_date(target_date)
        if day is None:
            return []
        return list(self._by_date.get(day, []))

    def is_fully_blocked(self, target_date: Optional[DateLike]) -> bool:
        """終日ブラックアウトがあるか"""
        return any(window.is_full_day for window in self.windows_for(target_date))

    def is_minute_blocked(self, target_date: Optional[DateLike], minute: Optional[int]) -> bool:
        """指定日時がブラックアウトに含まれるか（終了時刻ちょうどは含まない）"""
        windows = self.windows_for(target_date)
        if any(window.is_full_day for window in windows):
            return True
        if minute is None:
            return False
        return any(window.blocks_minute(minute) for window in windows)


def as_registry(blackouts: Union[BlackoutRegistry, Iterable[BlackoutWindow], None]) -> BlackoutRegistry:
    """ブラックアウトの一覧をBlackoutRegistryに揃える"""
    if isinstance(blackouts, BlackoutRegistry):
        return blackouts
    return BlackoutRegistry(blackouts)


def _step_offset(frequency: RecurrenceFrequency, count: int) -> pd.DateOffset:
    if frequency is RecurrenceFrequency.DAILY:
        return pd.DateOffset(days=count)
    if frequency is RecurrenceFrequency.WEEKLY:
        return pd.DateOffset(weeks=count)
    if frequency is RecurrenceFrequency.MONTHLY:
        return pd.DateOffset(months=count)
    return pd.DateOffset(years=count)


def expand_recurring_blackouts(template: BlackoutWindow,
                               frequency: Union[RecurrenceFrequency, str],
                               end_date: Optional[DateLike] = None,
                               max_entries: int = MAX_RECURRENCE_ENTRIES) -> List[BlackoutWindow]:
    """
    1件のブラックアウトを繰り返し設定に従って展開

    Args:
        template: 開始日と時間帯を持つ元のブラックアウト
        frequency: 繰り返し頻度
        end_date: 繰り返しの最終日（この日を含む）
        max_entries: 作成する最大件数

    Returns:
        各日付のブラックアウトのリスト
    """
    frequency = RecurrenceFrequency(frequency)
    if frequency is RecurrenceFrequency.NONE:
        return [template]

    last_day = to_date(end_date)
    if last_day is None:
        raise ValueError("繰り返しの終了日を指定してください")
    if last_day <= template.date:
        raise ValueError("繰り返しの終了日は開始日より後である必要があります")

    reason = f"{template.reason or ''} {RECURRING_SUFFIX}".strip()
    start = pd.Timestamp(template.date)

    # 月・年単位は毎回開始日から計算し、月末の日付がずれていかないようにする
    windows = []
    for count in range(max_entries):
        occurrence = (start + _step_offset(frequency, count)).date()
        if occurrence > last_day:
            break
        windows.append(replace(template, date=occurrence, reason=reason, id=None))

    logger.debug("繰り返しブラックアウトを展開しました: %s %s件 (%s〜%s)",
                 frequency.value, len(windows), template.date, last_day)
    return windows
