"""
データ変換モジュール

外部ストアから取得したレコード（辞書形式）を
エンジンのデータ構造に変換する機能を提供します。
時刻はラベル（"10:00 AM"）でも分数（600）でも受け付けます。
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from algorithms.time_grid import is_full_day_label, to_minutes
from models.booking_models import BlackoutWindow, Reservation, ReservationStatus

from .constants import STORE_FIELD_ALIASES


def is_missing(value: Any) -> bool:
    """None、NaN、空文字を欠損として扱う"""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_bool(value: Any) -> bool:
    """CSVやストアの真偽値を変換"""
    if is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def parse_time_value(value: Any) -> Optional[int]:
    """時刻の値（ラベルまたは分数）を分数に変換（欠損や終日ラベルはNone）"""
    if is_missing(value) or is_full_day_label(value):
        return None
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
        return to_minutes(text)
    return int(value)


def normalize_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """ストアの列名をエンジンの項目名に揃える"""
    normalized = {}
    for key, value in record.items():
        normalized[STORE_FIELD_ALIASES.get(key, key)] = value
    return normalized


def _pick_minute(record: Dict[str, Any], minute_key: str, label_key: str) -> Optional[int]:
    """分数の列を優先し、なければラベルの列から時刻を取得"""
    if not is_missing(record.get(minute_key)):
        return int(record[minute_key])
    return parse_time_value(record.get(label_key))


def _text(value: Any) -> str:
    return "" if is_missing(value) else str(value).strip()


def record_to_reservation(record: Dict[str, Any]) -> Reservation:
    """
    1件のレコードを予約に変換

    Raises:
        ValueError: 必須項目の欠損や時刻の矛盾がある場合
    """
    record = normalize_record(record)

    if is_missing(record.get("id")):
        raise ValueError("予約IDがありません")

    is_full_day = (
        parse_bool(record.get("is_full_day"))
        or is_full_day_label(record.get("start_time"))
        or is_full_day_label(record.get("end_time"))
    )

    status = record.get("status")
    if is_missing(status):
        status = ReservationStatus.PENDING

    return Reservation(
        id=_text(record["id"]),
        date=record.get("date") if not is_missing(record.get("date")) else None,
        start_minute=None if is_full_day else _pick_minute(record, "start_minute", "start_time"),
        end_minute=None if is_full_day else _pick_minute(record, "end_minute", "end_time"),
        status=status,
        client_name=_text(record.get("client_name")),
        client_email=_text(record.get("client_email")),
        service_type=_text(record.get("service_type")),
        notes=_text(record.get("notes")),
        is_full_day=is_full_day
    )


def record_to_blackout(record: Dict[str, Any]) -> BlackoutWindow:
    """
    1件のレコードをブラックアウトに変換

    Raises:
        ValueError: 日付の欠損や時刻の矛盾がある場合
    """
    record = normalize_record(record)
    is_full_day = parse_bool(record.get("is_full_day"))

    return BlackoutWindow(
        date=record.get("date") if not is_missing(record.get("date")) else None,
        is_full_day=is_full_day,
        start_minute=None if is_full_day else _pick_minute(record, "start_minute", "start_time"),
        end_minute=None if is_full_day else _pick_minute(record, "end_minute", "end_time"),
        reason=_text(record.get("reason")) or None,
        id=_text(record.get("id")) or None
    )


def records_to_reservations(records: Iterable[Dict[str, Any]]) -> Tuple[List[Reservation], List[str]]:
    """
    レコードのリストを予約に変換

    Returns:
        (変換できた予約のリスト, エラーメッセージのリスト)のタプル
    """
    reservations = []
    errors = []

    for index, record in enumerate(records):
        try:
            reservations.append(record_to_reservation(record))
        except (ValueError, TypeError) as e:
            errors.append(f"予約 {record.get('id', index + 1)} のデータ処理エラー: {str(e)}")

    return reservations, errors


def records_to_blackouts(records: Iterable[Dict[str, Any]]) -> Tuple[List[BlackoutWindow], List[str]]:
    """
    レコードのリストをブラックアウトに変換

    Returns:
        (変換できたブラックアウトのリスト, エラーメッセージのリスト)のタプル
    """
    blackouts = []
    errors = []

    for index, record in enumerate(records):
        try:
            blackouts.append(record_to_blackout(record))
        except (ValueError, TypeError) as e:
            errors.append(f"ブラックアウト {record.get('date', index + 1)} のデータ処理エラー: {str(e)}")

    return blackouts, errors
