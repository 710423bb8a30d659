"""
ユーティリティパッケージ

このパッケージは、予約エンジンを呼び出す側で使用する共通機能を提供します。
設定管理、ログ機能、データ変換、CSV操作などのユーティリティが含まれています。
"""

# 設定管理とログ機能
from .config import get_config, reload_config, AppConfig
from .logger import setup_logging, get_logger, log_extra_fields

from .data_converter import (
    records_to_reservations,
    records_to_blackouts,
    record_to_reservation,
    record_to_blackout,
    parse_time_value
)
from .csv_utils import (
    create_reservations_template,
    create_blackouts_template,
    validate_csv_upload,
    load_reservations_csv,
    load_blackouts_csv
)
from .schedule_converter import (
    build_availability_frame,
    build_month_status_frame,
    reservations_to_dataframe,
    dates_between
)
from .constants import (
    RESERVATION_COLUMNS,
    BLACKOUT_COLUMNS,
    STATUS_FILTER_CHOICES,
    RECURRENCE_CHOICES
)
from .reservation_manager import ReservationManager

__all__ = [
    # 設定管理とログ機能
    'get_config',
    'reload_config',
    'AppConfig',
    'setup_logging',
    'get_logger',
    'log_extra_fields',

    # データ変換機能
    'records_to_reservations',
    'records_to_blackouts',
    'record_to_reservation',
    'record_to_blackout',
    'parse_time_value',

    # CSV処理機能
    'create_reservations_template',
    'create_blackouts_template',
    'validate_csv_upload',
    'load_reservations_csv',
    'load_blackouts_csv',

    # 表示用変換機能
    'build_availability_frame',
    'build_month_status_frame',
    'reservations_to_dataframe',
    'dates_between',

    # 定数
    'RESERVATION_COLUMNS',
    'BLACKOUT_COLUMNS',
    'STATUS_FILTER_CHOICES',
    'RECURRENCE_CHOICES',

    # 予約管理
    'ReservationManager'
]
