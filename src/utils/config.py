"""
設定管理モジュール

このモジュールは、アプリケーション全体で使用される設定値を管理します。
環境変数から値を読み込み、適切なデフォルト値を提供します。
direnvとの連携を考慮し、開発環境での設定管理を簡素化します。

主な機能:
- 環境変数からの設定値読み込み
- デフォルト値の提供
- 設定値の型変換
- 設定値の検証
"""

import os
import logging
from typing import Optional
from dataclasses import dataclass
from pathlib import Path


@dataclass
class AppConfig:
    """アプリケーション設定クラス"""

    # アプリケーション基本設定
    app_name: str
    app_version: str
    debug: bool
    log_level: str

    # 予約設定
    auto_confirm: bool
    default_reservation_minutes: int
    max_recurrence_entries: int

    # ファイルパス設定
    data_dir: Path
    reservations_file: Path
    blackouts_file: Path

    # ログ設定
    log_file: Path
    log_max_size: str
    log_backup_count: int


class ConfigManager:
    """設定管理クラス"""

    def __init__(self):
        """設定マネージャーを初期化"""
        self._config: Optional[AppConfig] = None
        self._logger = logging.getLogger(__name__)

    def load_config(self) -> AppConfig:
        """環境変数から設定を読み込み、AppConfigオブジェクトを返す"""
        if self._config is None:
            self._config = self._create_config()
        return self._config

    def _create_config(self) -> AppConfig:
        """環境変数から設定オブジェクトを作成"""

        # アプリケーション基本設定
        app_name = os.getenv('APP_NAME', 'Reservation Availability Engine')
        app_version = os.getenv('APP_VERSION', '0.1.0')
        debug = self._parse_bool(os.getenv('DEBUG', 'false'))
        log_level = os.getenv('LOG_LEVEL', 'INFO')

        # 予約設定
        auto_confirm = self._parse_bool(os.getenv('AUTO_CONFIRM', 'false'))
        default_reservation_minutes = int(os.getenv('DEFAULT_RESERVATION_MINUTES', '30'))
        max_recurrence_entries = int(os.getenv('MAX_RECURRENCE_ENTRIES', '365'))

        # ファイルパス設定
        data_dir = Path(os.getenv('DATA_DIR', './data'))
        reservations_file = Path(os.getenv('RESERVATIONS_FILE', str(data_dir / 'reservations.csv')))
        blackouts_file = Path(os.getenv('BLACKOUTS_FILE', str(data_dir / 'blackouts.csv')))

        # ログ設定
        log_file = Path(os.getenv('LOG_FILE', './logs/app.log'))
        log_max_size = os.getenv('LOG_MAX_SIZE', '10MB')
        log_backup_count = int(os.getenv('LOG_BACKUP_COUNT', '5'))

        config = AppConfig(
            app_name=app_name,
            app_version=app_version,
            debug=debug,
            log_level=log_level,
            auto_confirm=auto_confirm,
            default_reservation_minutes=default_reservation_minutes,
            max_recurrence_entries=max_recurrence_entries,
            data_dir=data_dir,
            reservations_file=reservations_file,
            blackouts_file=blackouts_file,
            log_file=log_file,
            log_max_size=log_max_size,
            log_backup_count=log_backup_count
        )

        # 設定の検証
        self._validate_config(config)

        # ログ出力
        self._log_config_summary(config)

        return config

    def _parse_bool(self, value: str) -> bool:
        """文字列をブール値に変換"""
        return value.lower() in ('true', '1', 'yes', 'on')

    def _validate_config(self, config: AppConfig) -> None:
        """設定値の検証"""
        errors = []

        # 必須ディレクトリの存在確認
        if not config.data_dir.exists():
            self._logger.warning(f"データディレクトリが存在しません: {config.data_dir}")

        # ログレベルの検証
        if config.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"LOG_LEVELが不正です: {config.log_level}")

        # 予約設定の検証
        if config.default_reservation_minutes <= 0:
            errors.append("DEFAULT_RESERVATION_MINUTESは正の値である必要があります")

        if config.max_recurrence_entries < 1:
            errors.append("MAX_RECURRENCE_ENTRIESは1以上の値である必要があります")

        if config.log_backup_count < 0:
            errors.append("LOG_BACKUP_COUNTは0以上の値である必要があります")

        # エラーがあれば例外を発生
        if errors:
            error_msg = "設定エラー:\n" + "\n".join(f"- {error}" for error in errors)
            raise ValueError(error_msg)

    def _log_config_summary(self, config: AppConfig) -> None:
        """設定の要約をログに出力"""
        self._logger.info("アプリケーション設定を読み込みました:")
        self._logger.info(f"  アプリ名: {config.app_name} v{config.app_version}")
        self._logger.info(f"  デバッグモード: {config.debug}")
        self._logger.info(f"  ログレベル: {config.log_level}")
        self._logger.info(f"  自動確定: {config.auto_confirm}")
        self._logger.info(f"  予約データ: {config.reservations_file}")
        self._logger.info(f"  ブラックアウトデータ: {config.blackouts_file}")
        self._logger.info(f"  ログファイル: {config.log_file}")


# グローバル設定インスタンス
config_manager = ConfigManager()


def get_config() -> AppConfig:
    """設定オブジェクトを取得"""
    return config_manager.load_config()


def reload_config() -> AppConfig:
    """設定を再読み込み"""
    config_manager._config = None
    return config_manager.load_config()
