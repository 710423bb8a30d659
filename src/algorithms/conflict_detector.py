"""
予約可否判定と重複検出

このモジュールは、ブラックアウトと既存予約のスナップショットから
「この日付・時刻は予約できるか」を判定するロジックを提供します。
予約フォーム、予約一覧、予約編集画面のすべてがこの判定を共有します。

判定のルール:
- 終日のブラックアウト・予約はその日の全スロットを塞ぐ
- 時間帯は開始を含み終了を含まない（12:00終了の予約と12:00開始の予約は衝突しない）
- キャンセル済みの予約は判定に含めない
- 日付や時刻が欠けた問い合わせは「予約可能」として扱う
"""

import calendar
import logging
from collections import defaultdict
from datetime import date
from itertools import combinations
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from models.booking_models import (
    BlackoutWindow, DateLike, DayStatus, Reservation, TimeSlot, to_date
)

from .blackout_registry import BlackoutRegistry, as_registry
from .time_grid import SLOT_INTERVAL_MINUTES, SlotLike, as_minute, slot_index

logger = logging.getLogger(__name__)

BlackoutsLike = Union[BlackoutRegistry, Iterable[BlackoutWindow], None]


class ConflictDetector:
    """1つのスナップショットに対する予約可否判定"""

    def __init__(self, reservations: Optional[Iterable[Reservation]] = None,
                 blackouts: BlackoutsLike = None,
                 default_minutes: int = SLOT_INTERVAL_MINUTES):
        """
        初期化

        Args:
            reservations: 既存予約のリスト
            blackouts: ブラックアウトのリストまたはBlackoutRegistry
            default_minutes: 終了時刻のない予約が占有する分数
        """
        self.reservations = list(reservations or [])
        self.blackouts = as_registry(blackouts)
        self.default_minutes = default_minutes

        # キャンセル済みは最初から除外して日付ごとにまとめる
        self._by_date: Dict[date, List[Reservation]] = defaultdict(list)
        for reservation in self.reservations:
            if not reservation.is_cancelled:
                self._by_date[reservation.date].append(reservation)

    def reservations_for(self, target_date: Optional[DateLike],
                         exclude_reservation_id: Optional[str] = None) -> List[Reservation]:
        """指定日の有効な予約を取得"""
        day = to_date(target_date)
        if day is None:
            return []
        return [
            reservation for reservation in self._by_date.get(day, [])
            if exclude_reservation_id is None or reservation.id != exclude_reservation_id
        ]

    def is_slot_available(self, target_date: Optional[DateLike], slot_start: Optional[SlotLike],
                          exclude_reservation_id: Optional[str] = None) -> bool:
        """
        指定日時が予約可能か判定

        Args:
            target_date: 対象日
            slot_start: 開始スロット（TimeSlot、ラベル、分数のいずれか）
            exclude_reservation_id: 判定から除外する予約ID（編集中の予約自身）

        Returns:
            予約可能ならTrue
        """
        day = to_date(target_date)
        minute = as_minute(slot_start)
        if day is None or minute is None:
            return True

        if self.blackouts.is_minute_blocked(day, minute):
            logger.debug("ブラックアウトにより予約不可: %s %s", day, minute)
            return False

        for reservation in self.reservations_for(day, exclude_reservation_id):
            if reservation.blocks_minute(minute, self.default_minutes):
                logger.debug("予約 %s と重複: %s %s", reservation.id, day, minute)
                return False

        return True

    def has_full_day_block(self, target_date: Optional[DateLike]) -> bool:
        """終日のブラックアウトまたは終日予約があるか"""
        if self.blackouts.is_fully_blocked(target_date):
            return True
        return any(reservation.is_full_day for reservation in self.reservations_for(target_date))

    def day_status(self, target_date: Optional[DateLike]) -> DayStatus:
        """カレンダー表示用に日付の埋まり具合を判定"""
        if to_date(target_date) is None:
            return DayStatus.NONE

        if self.has_full_day_block(target_date):
            return DayStatus.FULL

        if self.reservations_for(target_date) or self.blackouts.windows_for(target_date):
            return DayStatus.PARTIAL

        return DayStatus.NONE

    def available_slots(self, target_date: Optional[DateLike], slots: List[TimeSlot],
                        exclude_reservation_id: Optional[str] = None) -> List[TimeSlot]:
        """指定日の予約可能なスロット一覧"""
        if self.has_full_day_block(target_date):
            return []
        return [
            slot for slot in slots
            if self.is_slot_available(target_date, slot, exclude_reservation_id)
        ]

    def candidate_end_times(self, target_date: Optional[DateLike], start_slot: SlotLike,
                            all_slots: List[TimeSlot],
                            exclude_reservation_id: Optional[str] = None) -> Iterator[TimeSlot]:
        """
        開始スロットより後の予約可能なスロットを順に返す

        比較はスロット一覧の並び順で行う。開始スロットが一覧にない場合は何も返さない。
        """
        start_index = slot_index(all_slots, start_slot)
        if start_index is None:
            return

        if self.has_full_day_block(target_date):
            return

        for slot in all_slots[start_index + 1:]:
            if self.is_slot_available(target_date, slot, exclude_reservation_id):
                yield slot

    def find_conflicts(self, target_date: Optional[DateLike], slot_start: Optional[SlotLike],
                       exclude_reservation_id: Optional[str] = None) -> List[Union[BlackoutWindow, Reservation]]:
        """指定日時と重なるブラックアウトと予約を取得（管理画面の重複表示用）"""
        day = to_date(target_date)
        minute = as_minute(slot_start)
        if day is None or minute is None:
            return []

        conflicts: List[Union[BlackoutWindow, Reservation]] = [
            window for window in self.blackouts.windows_for(day)
            if window.blocks_minute(minute)
        ]
        conflicts.extend(
            reservation for reservation in self.reservations_for(day, exclude_reservation_id)
            if reservation.blocks_minute(minute, self.default_minutes)
        )
        return conflicts

    def month_day_statuses(self, year: int, month: int) -> Dict[date, DayStatus]:
        """指定月の全日付のステータス"""
        _, days_in_month = calendar.monthrange(year, month)
        return {
            date(year, month, day): self.day_status(date(year, month, day))
            for day in range(1, days_in_month + 1)
        }

    def detect_double_bookings(self) -> List[Tuple[Reservation, Reservation]]:
        """
        スナップショット内で時間帯が重なっている有効な予約の組を検出

        同時に2人が同じ枠を予約した場合など、保存後に発生した重複の確認に使う。
        """
        overlaps = []
        for day in sorted(self._by_date):
            for first, second in combinations(self._by_date[day], 2):
                if first.overlaps_with(second, self.default_minutes):
                    overlaps.append((first, second))

        if overlaps:
            logger.warning("重複している予約が %s 組あります", len(overlaps))
        return overlaps


def is_slot_available(target_date: Optional[DateLike], slot_start_minute: Optional[SlotLike],
                      reservations: Iterable[Reservation], blackouts: BlackoutsLike,
                      exclude_reservation_id: Optional[str] = None) -> bool:
    """指定日時が予約可能か判定"""
    detector = ConflictDetector(reservations, blackouts)
    return detector.is_slot_available(target_date, slot_start_minute, exclude_reservation_id)


def day_status(target_date: Optional[DateLike], reservations: Iterable[Reservation],
               blackouts: BlackoutsLike) -> DayStatus:
    """カレンダー表示用の日付ステータス"""
    return ConflictDetector(reservations, blackouts).day_status(target_date)


def candidate_end_times(target_date: Optional[DateLike], start_slot: SlotLike,
                        all_slots: List[TimeSlot], reservations: Iterable[Reservation],
                        blackouts: BlackoutsLike,
                        exclude_reservation_id: Optional[str] = None) -> Iterator[TimeSlot]:
    """開始スロットより後の予約可能なスロット（終了時刻の選択肢）"""
    detector = ConflictDetector(reservations, blackouts)
    return detector.candidate_end_times(target_date, start_slot, all_slots, exclude_reservation_id)


def available_slots(target_date: Optional[DateLike], slots: List[TimeSlot],
                    reservations: Iterable[Reservation], blackouts: BlackoutsLike,
                    exclude_reservation_id: Optional[str] = None) -> List[TimeSlot]:
    """指定日の予約可能なスロット一覧"""
    detector = ConflictDetector(reservations, blackouts)
    return detector.available_slots(target_date, slots, exclude_reservation_id)


def find_conflicts(target_date: Optional[DateLike], slot_start_minute: Optional[SlotLike],
                   reservations: Iterable[Reservation], blackouts: BlackoutsLike,
                   exclude_reservation_id: Optional[str] = None) -> List[Union[BlackoutWindow, Reservation]]:
    """指定日時と重なるブラックアウトと予約"""
    detector = ConflictDetector(reservations, blackouts)
    return detector.find_conflicts(target_date, slot_start_minute, exclude_reservation_id)


def month_day_statuses(year: int, month: int, reservations: Iterable[Reservation],
                       blackouts: BlackoutsLike) -> Dict[date, DayStatus]:
    """指定月の日付ごとのステータス"""
    return ConflictDetector(reservations, blackouts).month_day_statuses(year, month)


def detect_double_bookings(reservations: Iterable[Reservation]) -> List[Tuple[Reservation, Reservation]]:
    """時間帯が重なっている有効な予約の組"""
    return ConflictDetector(reservations).detect_double_bookings()
