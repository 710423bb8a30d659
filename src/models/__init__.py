"""
モデル層

予約エンジンで使用するデータ構造を提供します。
"""

from .booking_models import (
    TimeSlot,
    BlackoutWindow,
    Reservation,
    ReservationStatus,
    DayStatus,
    MINUTES_PER_DAY,
    to_date
)

__all__ = [
    "TimeSlot",
    "BlackoutWindow",
    "Reservation",
    "ReservationStatus",
    "DayStatus",
    "MINUTES_PER_DAY",
    "to_date"
]
