"""
予約エンジン用のデータ構造とクラス定義

このモジュールは、予約可否判定と予約ライフサイクル管理の
基盤となるデータ構造を提供します。
外部ストアから取得したスナップショットをこれらのクラスに変換して
エンジンに渡します。
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

DateLike = Union[date, datetime, str]

# 1日の分数
MINUTES_PER_DAY = 24 * 60


class ReservationStatus(Enum):
    """予約ステータスの定義"""
    PENDING = "pending"        # 受付済み（未確定）
    CONFIRMED = "confirmed"    # 確定
    COMPLETED = "completed"    # 完了
    CANCELLED = "cancelled"    # キャンセル

    @classmethod
    def parse(cls, value: Union["ReservationStatus", str]) -> "ReservationStatus":
        """文字列をステータスに変換（大文字小文字は区別しない）"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"不明な予約ステータスです: {value}") from None

    @property
    def is_active(self) -> bool:
        """スタッフの対応が必要なステータスか"""
        return self in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)

    @property
    def is_terminal(self) -> bool:
        """これ以上遷移できないステータスか"""
        return not self.is_active


class DayStatus(Enum):
    """カレンダー表示用の日付ステータス"""
    NONE = "none"        # 予約・ブラックアウトなし
    PARTIAL = "partial"  # 一部埋まっている
    FULL = "full"        # 終日ブロック


def to_date(value: Optional[DateLike]) -> Optional[date]:
    """日付らしき値をdateに正規化（空値はNone）"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    # "2025-07-04T00:00:00" のような形式も日付部分だけ使う
    return date.fromisoformat(text[:10])


@dataclass(frozen=True)
class TimeSlot:
    """予約可能な時刻スロット"""
    minute: int
    label: str

    def __post_init__(self):
        """スロット作成後の検証"""
        if not 0 <= self.minute < MINUTES_PER_DAY:
            raise ValueError(f"スロットの時刻は0〜{MINUTES_PER_DAY - 1}分の範囲である必要があります: {self.minute}")

    def __str__(self) -> str:
        return self.label


@dataclass
class BlackoutWindow:
    """スタッフが設定する予約不可期間"""
    date: date
    is_full_day: bool = False
    start_minute: Optional[int] = None
    end_minute: Optional[int] = None
    reason: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        """ブラックアウト作成後の検証"""
        self.date = to_date(self.date)
        if self.date is None:
            raise ValueError("ブラックアウトの日付は必須です")

        if not self.is_full_day and self.has_time_range and self.start_minute >= self.end_minute:
            raise ValueError(
                f"ブラックアウトの開始時刻は終了時刻より前である必要があります: "
                f"{self.start_minute} >= {self.end_minute}"
            )

    @property
    def has_time_range(self) -> bool:
        """開始・終了の両方が設定されているか"""
        return self.start_minute is not None and self.end_minute is not None

    def blocks_minute(self, minute: int) -> bool:
        """指定時刻をブロックするか（終了時刻は含まない）"""
        if self.is_full_day:
            return True
        # 時刻が欠けた部分ブラックアウトは何もブロックしない
        if not self.has_time_range:
            return False
        return self.start_minute <= minute < self.end_minute


@dataclass
class Reservation:
    """予約情報"""
    id: str
    date: date
    start_minute: Optional[int] = None
    end_minute: Optional[int] = None
    status: ReservationStatus = ReservationStatus.PENDING
    client_name: str = ""
    client_email: str = ""
    service_type: str = ""
    notes: str = ""
    is_full_day: bool = False

    def __post_init__(self):
        """予約作成後の検証"""
        self.date = to_date(self.date)
        if self.date is None:
            raise ValueError(f"予約 {self.id}: 日付は必須です")

        self.status = ReservationStatus.parse(self.status)

        if self.is_full_day:
            return

        if self.start_minute is None:
            raise ValueError(f"予約 {self.id}: 終日予約以外は開始時刻が必須です")

        if self.end_minute is not None and self.end_minute <= self.start_minute:
            raise ValueError(
                f"予約 {self.id}: 終了時刻は開始時刻より後である必要があります "
                f"({self.start_minute} >= {self.end_minute})"
            )

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    @property
    def is_cancelled(self) -> bool:
        return self.status is ReservationStatus.CANCELLED

    def effective_end_minute(self, default_minutes: int = 30) -> Optional[int]:
        """終了時刻を取得（未設定の旧データは開始時刻 + default_minutes）"""
        if self.is_full_day:
            return None
        if self.end_minute is not None:
            return self.end_minute
        return self.start_minute + default_minutes

    def blocks_minute(self, minute: int, default_minutes: int = 30) -> bool:
        """指定時刻を占有しているか（終了時刻は含まない）"""
        if self.is_full_day:
            return True
        return self.start_minute <= minute < self.effective_end_minute(default_minutes)

    def overlaps_with(self, other: "Reservation", default_minutes: int = 30) -> bool:
        """同じ日の他の予約と時間帯が重なるかチェック"""
        if self.date != other.date:
            return False
        if self.is_full_day or other.is_full_day:
            return True
        return not (
            self.effective_end_minute(default_minutes) <= other.start_minute
            or other.effective_end_minute(default_minutes) <= self.start_minute
        )
