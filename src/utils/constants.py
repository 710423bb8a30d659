"""
定数定義モジュール

予約エンジンの入出力で使用する定数を定義します。
"""

# 予約CSVの列
RESERVATION_COLUMNS = [
    "id", "date", "start_time", "end_time", "status",
    "client_name", "client_email", "service_type", "notes"
]
RESERVATION_REQUIRED_COLUMNS = ["id", "date", "start_time", "status"]

# ブラックアウトCSVの列
BLACKOUT_COLUMNS = ["date", "is_full_day", "start_time", "end_time", "reason"]
BLACKOUT_REQUIRED_COLUMNS = ["date", "is_full_day"]

# 外部ストアの列名 → エンジンの項目名
STORE_FIELD_ALIASES = {
    "booking_date": "date",
    "booking_time": "start_time",
    "is_full_day": "is_full_day",
    "isFullDay": "is_full_day",
    "startTime": "start_time",
    "endTime": "end_time",
    "clientName": "client_name",
    "clientEmail": "client_email",
    "serviceType": "service_type",
}

# 予約一覧のステータス絞り込み
STATUS_FILTER_CHOICES = ["all", "pending", "confirmed", "completed", "cancelled"]

# 繰り返しブラックアウトの頻度
RECURRENCE_CHOICES = ["none", "daily", "weekly", "monthly", "yearly"]

# 予約一覧の表示列
DISPLAY_COLUMNS = ["id", "date", "start", "end", "duration", "status", "client_name", "service_type"]
