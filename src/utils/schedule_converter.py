"""
スケジュール変換モジュール

予約可否の判定結果や予約一覧を、表示・出力用のDataFrameに変換する機能を提供します。
"""

import pandas as pd
from datetime import date
from typing import Iterable, List

from algorithms.conflict_detector import BlackoutsLike, ConflictDetector
from algorithms.reservation_lifecycle import sort_for_display
from algorithms.time_grid import FULL_DAY_LABEL, duration, to_label
from models.booking_models import MINUTES_PER_DAY, DateLike, Reservation, TimeSlot, to_date

from .constants import DISPLAY_COLUMNS


def build_availability_frame(dates: Iterable[DateLike], slots: List[TimeSlot],
                             reservations: Iterable[Reservation],
                             blackouts: BlackoutsLike) -> pd.DataFrame:
    """
    日付×スロットの予約可否表を作成

    Args:
        dates: 対象日のリスト
        slots: スロットのリスト（列の順序になる）
        reservations: 既存予約のリスト
        blackouts: ブラックアウトのリストまたはBlackoutRegistry

    Returns:
        日付を行、スロットのラベルを列とした真偽値のDataFrame
    """
    detector = ConflictDetector(reservations, blackouts)
    days = [to_date(d) for d in dates]
    columns = [slot.label for slot in slots]

    rows = []
    for day in days:
        available = set(slot.label for slot in detector.available_slots(day, slots))
        rows.append([label in available for label in columns])

    frame = pd.DataFrame(
        rows,
        index=pd.Index(days, name="date"),
        columns=pd.Index(columns, name="slot"),
        dtype=bool
    )
    return frame


def build_month_status_frame(year: int, month: int, reservations: Iterable[Reservation],
                             blackouts: BlackoutsLike) -> pd.DataFrame:
    """指定月の日付ごとのステータス表（date, weekday, status）"""
    statuses = ConflictDetector(reservations, blackouts).month_day_statuses(year, month)
    return pd.DataFrame(
        {
            "date": list(statuses.keys()),
            "weekday": [d.strftime("%a") for d in statuses],
            "status": [s.value for s in statuses.values()],
        }
    )


def _time_text(minute) -> str:
    # 日付をまたぐ終了時刻は表示しない
    if minute is None or minute >= MINUTES_PER_DAY:
        return ""
    return to_label(minute)


def reservations_to_dataframe(reservations: Iterable[Reservation],
                              default_minutes: int = 30) -> pd.DataFrame:
    """
    予約一覧を表示用のDataFrameに変換（スタッフ向けの並び順）

    Returns:
        DISPLAY_COLUMNSを列とするDataFrame
    """
    rows = []
    for reservation in sort_for_display(reservations):
        if reservation.is_full_day:
            start = end = FULL_DAY_LABEL
            length = ""
        else:
            start = _time_text(reservation.start_minute)
            end = _time_text(reservation.effective_end_minute(default_minutes))
            length = duration(start, end)

        rows.append({
            "id": reservation.id,
            "date": reservation.date,
            "start": start,
            "end": end,
            "duration": length,
            "status": reservation.status.value,
            "client_name": reservation.client_name,
            "service_type": reservation.service_type,
        })

    return pd.DataFrame(rows, columns=DISPLAY_COLUMNS)


def dates_between(start: DateLike, end: DateLike) -> List[date]:
    """開始日〜終了日（両端を含む）の日付リスト"""
    return [ts.date() for ts in pd.date_range(to_date(start), to_date(end), freq="D")]
