"""
予約ライフサイクル（ステータス遷移）

予約ステータスの有限状態機械と、スタッフ向け一覧の並び順を定義します。

    pending ──▶ confirmed ──▶ completed
       │            │
       └────────────┴──▶ cancelled

completed と cancelled は終端で、それ以上遷移しません。
"""

import logging
from dataclasses import replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Union

from models.booking_models import Reservation, ReservationStatus

logger = logging.getLogger(__name__)

StatusLike = Union[ReservationStatus, str]

ALLOWED_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}

# 一覧のステータス絞り込みで「すべて」を表す値
ALL_STATUSES = "all"


class InvalidTransition(Exception):
    """許可されていないステータス遷移"""

    def __init__(self, current: ReservationStatus, target: ReservationStatus,
                 reservation_id: Optional[str] = None):
        self.current = current
        self.target = target
        self.reservation_id = reservation_id
        prefix = f"予約 {reservation_id}: " if reservation_id is not None else ""
        super().__init__(f"{prefix}{current.value} から {target.value} へは変更できません")


def allowed_transitions(current_status: StatusLike) -> FrozenSet[ReservationStatus]:
    """現在のステータスから遷移できるステータス"""
    return ALLOWED_TRANSITIONS[ReservationStatus.parse(current_status)]


def can_transition(current_status: StatusLike, new_status: StatusLike) -> bool:
    return ReservationStatus.parse(new_status) in allowed_transitions(current_status)


def transition(reservation: Reservation, new_status: StatusLike) -> Reservation:
    """
    予約のステータスを変更した新しい予約を返す

    元の予約は変更しない。保存と、確定時の通知送信は呼び出し側が行う。

    Raises:
        InvalidTransition: 許可されていない遷移の場合
    """
    target = ReservationStatus.parse(new_status)
    if target not in allowed_transitions(reservation.status):
        raise InvalidTransition(reservation.status, target, reservation.id)

    logger.debug("予約 %s: %s -> %s", reservation.id, reservation.status.value, target.value)
    return replace(reservation, status=target)


def requires_notification(old_status: StatusLike, new_status: StatusLike) -> bool:
    """確定への遷移か（外部の通知を送るタイミング）"""
    return (ReservationStatus.parse(old_status) is not ReservationStatus.CONFIRMED
            and ReservationStatus.parse(new_status) is ReservationStatus.CONFIRMED)


def initial_status(auto_confirm: bool = False) -> ReservationStatus:
    """新規予約のステータス（自動確定ポリシーが有効ならconfirmed）"""
    return ReservationStatus.CONFIRMED if auto_confirm else ReservationStatus.PENDING


def sort_for_display(reservations: Iterable[Reservation]) -> List[Reservation]:
    """
    スタッフ向け一覧の並び順

    対応が必要な予約（pending, confirmed）を先に日付昇順で、
    終了した予約（completed, cancelled）を後ろに日付昇順で並べる。
    同じ日付の中では入力順を保つ。
    """
    return sorted(reservations, key=lambda r: (0 if r.is_active else 1, r.date))


def filter_reservations(reservations: Iterable[Reservation],
                        status: Optional[StatusLike] = None,
                        search: str = "") -> List[Reservation]:
    """ステータスと検索語（顧客名・メール・サービス種別）で絞り込み"""
    target = None
    if status is not None and status != ALL_STATUSES:
        target = ReservationStatus.parse(status)

    term = (search or "").strip().lower()

    result = []
    for reservation in reservations:
        if target is not None and reservation.status is not target:
            continue
        if term and not any(
            term in (value or "").lower()
            for value in (reservation.client_name, reservation.client_email, reservation.service_type)
        ):
            continue
        result.append(reservation)
    return result


def count_by_status(reservations: Iterable[Reservation]) -> Dict[str, int]:
    """ステータスごとの件数（"all" は合計）"""
    counts = {status.value: 0 for status in ReservationStatus}
    for reservation in reservations:
        counts[reservation.status.value] += 1
    counts[ALL_STATUSES] = sum(counts.values())
    return counts
