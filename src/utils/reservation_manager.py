"""
予約管理モジュール

予約フォームや管理画面から呼び出される窓口として、
1つのスナップショット（予約とブラックアウト）に対する判定と
ステータス変更をまとめて扱います。

エンジン自体は保存も通知も行いません。ステータス変更後の保存は呼び出し側で行い、
確定時の通知は注入された notifier に任せます。
このクラスはロックを持たないため、同じ枠への同時予約は保存先で防ぐ必要があります。
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from algorithms.blackout_registry import (
    BlackoutRegistry, RecurrenceFrequency, expand_recurring_blackouts
)
from algorithms.conflict_detector import ConflictDetector
from algorithms.reservation_lifecycle import (
    InvalidTransition, StatusLike, count_by_status, filter_reservations,
    initial_status, requires_notification, sort_for_display, transition
)
from algorithms.time_grid import generate_slots
from models.booking_models import (
    BlackoutWindow, DateLike, DayStatus, Reservation, ReservationStatus, TimeSlot
)

from .config import AppConfig

logger = logging.getLogger(__name__)

Notifier = Callable[[Reservation], None]


class ReservationManager:
    """予約スナップショットに対する操作をまとめるクラス"""

    def __init__(self, reservations: Iterable[Reservation],
                 blackouts: Iterable[BlackoutWindow],
                 notifier: Optional[Notifier] = None,
                 auto_confirm: bool = False,
                 default_minutes: int = 30,
                 max_recurrence_entries: int = 365):
        """
        初期化

        Args:
            reservations: 外部ストアから取得した予約のリスト
            blackouts: 外部ストアから取得したブラックアウトのリスト
            notifier: 予約確定時に呼び出す通知関数（メール・SMS送信は外部）
            auto_confirm: 新規予約をconfirmedで作成するか
            default_minutes: 終了時刻のない予約が占有する分数
            max_recurrence_entries: 繰り返しブラックアウトの最大展開件数
        """
        self.reservations: List[Reservation] = list(reservations)
        self.blackouts = BlackoutRegistry(blackouts)
        self.notifier = notifier
        self.auto_confirm = auto_confirm
        self.default_minutes = default_minutes
        self.max_recurrence_entries = max_recurrence_entries
        self.slots: List[TimeSlot] = generate_slots()
        self._detector = self._build_detector()

    @classmethod
    def from_config(cls, config: AppConfig, reservations: Iterable[Reservation],
                    blackouts: Iterable[BlackoutWindow],
                    notifier: Optional[Notifier] = None) -> "ReservationManager":
        """設定値を使って作成"""
        return cls(
            reservations, blackouts, notifier=notifier,
            auto_confirm=config.auto_confirm,
            default_minutes=config.default_reservation_minutes,
            max_recurrence_entries=config.max_recurrence_entries
        )

    def _build_detector(self) -> ConflictDetector:
        return ConflictDetector(self.reservations, self.blackouts, self.default_minutes)

    def get_reservation(self, reservation_id: str) -> Reservation:
        """IDで予約を取得（見つからなければKeyError）"""
        for reservation in self.reservations:
            if reservation.id == reservation_id:
                return reservation
        raise KeyError(f"予約が見つかりません: {reservation_id}")

    # ---------- 予約可否 ----------

    def is_slot_available(self, target_date: DateLike, slot_start,
                          exclude_reservation_id: Optional[str] = None) -> bool:
        return self._detector.is_slot_available(target_date, slot_start, exclude_reservation_id)

    def available_slots(self, target_date: DateLike,
                        exclude_reservation_id: Optional[str] = None) -> List[TimeSlot]:
        """予約フォームの開始時刻の選択肢"""
        return self._detector.available_slots(target_date, self.slots, exclude_reservation_id)

    def end_time_options(self, target_date: DateLike, start_slot,
                         exclude_reservation_id: Optional[str] = None) -> List[TimeSlot]:
        """開始時刻を選んだ後の終了時刻の選択肢"""
        return list(self._detector.candidate_end_times(
            target_date, start_slot, self.slots, exclude_reservation_id
        ))

    def day_status(self, target_date: DateLike) -> DayStatus:
        return self._detector.day_status(target_date)

    def month_overview(self, year: int, month: int) -> Dict:
        """カレンダーの月表示用ステータス"""
        return self._detector.month_day_statuses(year, month)

    def find_conflicts(self, target_date: DateLike, slot_start,
                       exclude_reservation_id: Optional[str] = None) -> List:
        return self._detector.find_conflicts(target_date, slot_start, exclude_reservation_id)

    def detect_double_bookings(self):
        return self._detector.detect_double_bookings()

    # ---------- ブラックアウト ----------

    def plan_blackouts(self, template: BlackoutWindow, frequency: str = RecurrenceFrequency.NONE.value,
                       end_date: Optional[DateLike] = None) -> List[BlackoutWindow]:
        """
        登録するブラックアウトを作成（保存は呼び出し側）

        繰り返し設定がある場合は終了日までの各日付に展開する。
        """
        return expand_recurring_blackouts(
            template, frequency, end_date, max_entries=self.max_recurrence_entries
        )

    # ---------- ステータス ----------

    def new_reservation_status(self) -> ReservationStatus:
        return initial_status(self.auto_confirm)

    def apply_transition(self, reservation_id: str, new_status: StatusLike) -> Reservation:
        """
        予約のステータスを変更してスナップショットを更新

        確定への変更時は notifier を呼び出す。

        Raises:
            KeyError: 予約が存在しない場合
            InvalidTransition: 許可されていない遷移の場合
        """
        current = self.get_reservation(reservation_id)

        try:
            updated = transition(current, new_status)
        except InvalidTransition as e:
            logger.warning(f"ステータス変更を拒否しました: {e}")
            raise

        self.reservations = [updated if r.id == reservation_id else r for r in self.reservations]
        self._detector = self._build_detector()

        logger.info(f"予約 {reservation_id} のステータスを変更しました: "
                    f"{current.status.value} -> {updated.status.value}")

        if requires_notification(current.status, updated.status) and self.notifier is not None:
            self.notifier(updated)

        return updated

    # ---------- 一覧 ----------

    def display_list(self, status: Optional[StatusLike] = None, search: str = "") -> List[Reservation]:
        """管理画面の予約一覧（絞り込み後、スタッフ向けの並び順）"""
        return sort_for_display(filter_reservations(self.reservations, status, search))

    def status_counts(self) -> Dict[str, int]:
        return count_by_status(self.reservations)
