#!/usr/bin/env python3
"""
予約可否エンジン - メインエントリーポイント

予約・ブラックアウトのCSVスナップショットを読み込み、
指定日のステータスと予約可能な時刻を表示します。

使用例:
    python main.py 2025-07-10
    python main.py 2025-07-10 --start "10:00 AM"
    python main.py --month 2025-07
"""

import argparse
import sys
import traceback
from pathlib import Path

# プロジェクトルートをPythonパスに追加
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from utils.config import get_config
from utils.csv_utils import load_blackouts_csv, load_reservations_csv
from utils.logger import setup_logging, get_logger
from utils.reservation_manager import ReservationManager


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="予約可能な時刻を表示します")
    parser.add_argument("date", nargs="?", help="対象日 (YYYY-MM-DD)")
    parser.add_argument("--start", help="開始時刻を指定すると終了時刻の選択肢を表示")
    parser.add_argument("--month", help="月のステータスを表示 (YYYY-MM)")
    parser.add_argument("--reservations", help="予約CSVのパス（省略時は設定値）")
    parser.add_argument("--blackouts", help="ブラックアウトCSVのパス（省略時は設定値）")
    args = parser.parse_args(argv)
    if not args.date and not args.month:
        parser.error("対象日か --month のどちらかを指定してください")
    return args


def load_snapshot(path, loader, logger, label):
    """CSVを読み込む（ファイルがなければ空のスナップショット）"""
    if not Path(path).exists():
        logger.warning(f"{label}ファイルが存在しません: {path}")
        return []

    ok, items, errors = loader(path)
    for error in errors:
        logger.warning(error)
    if not ok:
        raise ValueError(f"{label}を読み込めませんでした: {path}")

    logger.info(f"{label}を読み込みました: {len(items)}件")
    return items


def main(argv=None):
    """メイン関数"""
    args = parse_args(argv)

    try:
        # 設定を読み込み
        config = get_config()

        # ログシステムを初期化
        setup_logging()
        logger = get_logger(__name__)

        logger.info(f"{config.app_name} v{config.app_version} を起動しています...")

        reservations = load_snapshot(args.reservations or config.reservations_file,
                                     load_reservations_csv, logger, "予約")
        blackouts = load_snapshot(args.blackouts or config.blackouts_file,
                                  load_blackouts_csv, logger, "ブラックアウト")

        manager = ReservationManager.from_config(config, reservations, blackouts)

        if args.month:
            year, month = (int(part) for part in args.month.split("-"))
            for day, status in manager.month_overview(year, month).items():
                print(f"{day.isoformat()}  {status.value}")
            return 0

        print(f"{args.date}: {manager.day_status(args.date).value}")

        if args.start:
            options = manager.end_time_options(args.date, args.start)
            print(f"終了時刻の選択肢 ({args.start}〜): {', '.join(slot.label for slot in options) or 'なし'}")
        else:
            slots = manager.available_slots(args.date)
            print(f"予約可能な時刻: {', '.join(slot.label for slot in slots) or 'なし'}")

        double_bookings = manager.detect_double_bookings()
        for first, second in double_bookings:
            print(f"⚠️ 重複予約: {first.id} と {second.id} ({first.date})")

        return 0

    except Exception as e:
        # エラーログを出力
        error_logger = get_logger("error")
        error_logger.error(f"実行エラー: {str(e)}")
        error_logger.error(f"詳細: {traceback.format_exc()}")

        print(f"エラーが発生しました: {str(e)}")
        print("詳細はログファイルを確認してください。")
        return 1


if __name__ == "__main__":
    sys.exit(main())
