"""
CSV処理モジュール

予約・ブラックアウトのスナップショットCSVのテンプレート生成、
検証、読み込み機能を提供します。
"""

import pandas as pd
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple, Union

from models.booking_models import BlackoutWindow, Reservation

from .constants import (
    BLACKOUT_COLUMNS, BLACKOUT_REQUIRED_COLUMNS, RESERVATION_REQUIRED_COLUMNS
)
from .data_converter import records_to_blackouts, records_to_reservations

CsvSource = Union[str, Path, bytes, BytesIO]


def create_reservations_template() -> str:
    """
    予約CSVテンプレートを生成

    Returns:
        予約CSVテンプレートの文字列
    """
    template_data = """id,date,start_time,end_time,status,client_name,client_email,service_type,notes
r-1,2025-07-10,10:00 AM,12:00 PM,confirmed,Jane Doe,jane@example.com,Portrait Session,
r-2,2025-07-11,Full Day,Full Day,pending,John Roe,john@example.com,Event Coverage,Wedding
"""
    return template_data


def create_blackouts_template() -> pd.DataFrame:
    """
    ブラックアウトCSVテンプレートを生成

    Returns:
        ブラックアウトテンプレートのDataFrame
    """
    df = pd.DataFrame(
        [
            {"date": "2025-07-04", "is_full_day": True, "start_time": "", "end_time": "", "reason": "Holiday"},
            {"date": "2025-07-05", "is_full_day": False, "start_time": "10:00 AM", "end_time": "2:00 PM",
             "reason": "Maintenance"},
        ],
        columns=BLACKOUT_COLUMNS
    )
    return df


def validate_csv_upload(file_content: CsvSource, required_columns: List[str],
                        file_type: str = "CSV") -> Tuple[bool, Optional[pd.DataFrame], Optional[str]]:
    """
    CSVファイルを読み込んで必要な列を検証

    Args:
        file_content: ファイルパスまたはファイルの内容
        required_columns: 必要な列名のリスト
        file_type: ファイルタイプ（エラーメッセージ用）

    Returns:
        (成功フラグ, DataFrame, エラーメッセージ)のタプル
    """
    try:
        # bytesの場合はBytesIOに変換
        if isinstance(file_content, bytes):
            file_content = BytesIO(file_content)

        # 時刻ラベルやIDを数値に変換させない
        df = pd.read_csv(file_content, dtype=str, keep_default_na=True)

    except (OSError, ValueError) as e:
        error_msg = f"{file_type}読み込みエラー: {str(e)}"
        return False, None, error_msg

    missing_columns = [col for col in required_columns if col not in df.columns]
    if missing_columns:
        error_msg = f"必要な列が不足しています: {missing_columns}"
        return False, None, error_msg

    return True, df, None


def load_reservations_csv(file_content: CsvSource) -> Tuple[bool, List[Reservation], List[str]]:
    """
    予約CSVを読み込んで予約のリストに変換

    Returns:
        (成功フラグ, 予約のリスト, エラーメッセージのリスト)のタプル
        行単位のエラーがあっても、変換できた行は返す
    """
    ok, df, error = validate_csv_upload(file_content, RESERVATION_REQUIRED_COLUMNS, "予約CSV")
    if not ok:
        return False, [], [error]

    reservations, errors = records_to_reservations(df.to_dict(orient="records"))
    return True, reservations, errors


def load_blackouts_csv(file_content: CsvSource) -> Tuple[bool, List[BlackoutWindow], List[str]]:
    """
    ブラックアウトCSVを読み込んでブラックアウトのリストに変換

    Returns:
        (成功フラグ, ブラックアウトのリスト, エラーメッセージのリスト)のタプル
    """
    ok, df, error = validate_csv_upload(file_content, BLACKOUT_REQUIRED_COLUMNS, "ブラックアウトCSV")
    if not ok:
        return False, [], [error]

    blackouts, errors = records_to_blackouts(df.to_dict(orient="records"))
    return True, blackouts, errors

