#!/usr/bin/env python3
"""
予約可否判定のテスト

ブラックアウトと既存予約に対する空き判定、日付ステータス、
終了時刻の候補、重複予約の検出をテストします。
"""

import sys
import os
import types
import unittest
from datetime import date

# プロジェクトルートをパスに追加
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from algorithms.blackout_registry import BlackoutRegistry
from algorithms.conflict_detector import (
    ConflictDetector, is_slot_available, day_status, candidate_end_times,
    available_slots, find_conflicts, month_day_statuses, detect_double_bookings
)
from algorithms.time_grid import generate_slots, to_minutes
from models.booking_models import BlackoutWindow, DayStatus, Reservation, ReservationStatus


def _reservation(id, day, start, end=None, status="confirmed", **kwargs):
    return Reservation(
        id=id, date=day,
        start_minute=to_minutes(start) if start else None,
        end_minute=to_minutes(end) if end else None,
        status=status, **kwargs
    )


class TestSlotAvailability(unittest.TestCase):
    """is_slot_availableのテスト"""

    def setUp(self):
        """テストデータの準備"""
        self.blackouts = [
            BlackoutWindow(date="2025-07-04", is_full_day=True, reason="Holiday"),
            BlackoutWindow(date="2025-07-05", start_minute=to_minutes("10:00 AM"),
                           end_minute=to_minutes("2:00 PM"), reason="Maintenance"),
        ]
        self.reservations = [
            _reservation("r-1", "2025-07-10", "10:00 AM", "12:00 PM", "confirmed"),
        ]

    def test_full_day_blackout(self):
        """終日ブラックアウトの日はどのスロットも予約不可"""
        for slot in generate_slots():
            self.assertFalse(is_slot_available("2025-07-04", slot, [], self.blackouts))

    def test_partial_blackout(self):
        self.assertFalse(is_slot_available("2025-07-05", to_minutes("11:00 AM"), [], self.blackouts))
        self.assertTrue(is_slot_available("2025-07-05", to_minutes("9:00 AM"), [], self.blackouts))
        self.assertTrue(is_slot_available("2025-07-05", to_minutes("2:00 PM"), [], self.blackouts))

    def test_existing_reservation(self):
        self.assertFalse(is_slot_available("2025-07-10", to_minutes("11:00 AM"), self.reservations, []))
        self.assertFalse(is_slot_available("2025-07-10", "10:00 AM", self.reservations, []))
        # 終了時刻ちょうどは空いている
        self.assertTrue(is_slot_available("2025-07-10", to_minutes("12:00 PM"), self.reservations, []))

    def test_exclude_self(self):
        """編集中の予約自身は判定から除外"""
        self.assertTrue(is_slot_available(
            "2025-07-10", to_minutes("11:00 AM"), self.reservations, [], exclude_reservation_id="r-1"
        ))
        self.assertFalse(is_slot_available(
            "2025-07-10", to_minutes("11:00 AM"), self.reservations, [], exclude_reservation_id="r-9"
        ))

    def test_cancelled_reservation_ignored(self):
        cancelled = [_reservation("r-1", "2025-07-10", "10:00 AM", "12:00 PM", "cancelled")]
        self.assertTrue(is_slot_available("2025-07-10", to_minutes("11:00 AM"), cancelled, []))

    def test_pending_and_completed_still_block(self):
        for status in ("pending", "completed"):
            reservations = [_reservation("r-1", "2025-07-10", "10:00 AM", "12:00 PM", status)]
            self.assertFalse(is_slot_available("2025-07-10", "11:00 AM", reservations, []))

    def test_legacy_reservation_without_end(self):
        """終了時刻のない予約は開始から30分を占有"""
        legacy = [_reservation("r-2", "2025-07-10", "3:00 PM")]
        self.assertFalse(is_slot_available("2025-07-10", "3:00 PM", legacy, []))
        self.assertTrue(is_slot_available("2025-07-10", "3:30 PM", legacy, []))
        self.assertTrue(is_slot_available("2025-07-10", "2:30 PM", legacy, []))

    def test_full_day_reservation(self):
        full_day = [Reservation(id="r-3", date="2025-07-12", is_full_day=True, status="confirmed")]
        for slot in generate_slots():
            self.assertFalse(is_slot_available("2025-07-12", slot, full_day, []))
        self.assertTrue(is_slot_available("2025-07-13", "10:00 AM", full_day, []))

    def test_missing_date_or_slot_is_available(self):
        self.assertTrue(is_slot_available(None, "10:00 AM", self.reservations, self.blackouts))
        self.assertTrue(is_slot_available("2025-07-04", None, self.reservations, self.blackouts))
        self.assertTrue(is_slot_available("", 600, self.reservations, self.blackouts))

    def test_registry_input(self):
        registry = BlackoutRegistry(self.blackouts)
        self.assertFalse(is_slot_available("2025-07-05", "11:00 AM", [], registry))

    def test_other_dates_unaffected(self):
        self.assertTrue(is_slot_available(date(2025, 7, 11), "11:00 AM", self.reservations, self.blackouts))


class TestDayStatus(unittest.TestCase):
    """day_statusとmonth_day_statusesのテスト"""

    def setUp(self):
        self.blackouts = [
            BlackoutWindow(date="2025-07-04", is_full_day=True),
            BlackoutWindow(date="2025-07-05", start_minute=600, end_minute=840),
        ]
        self.reservations = [
            _reservation("r-1", "2025-07-10", "10:00 AM", "12:00 PM"),
            Reservation(id="r-2", date="2025-07-12", is_full_day=True, status="pending"),
            _reservation("r-3", "2025-07-15", "9:00 AM", "10:00 AM", "cancelled"),
        ]

    def test_statuses(self):
        self.assertEqual(day_status("2025-07-04", self.reservations, self.blackouts), DayStatus.FULL)
        self.assertEqual(day_status("2025-07-05", self.reservations, self.blackouts), DayStatus.PARTIAL)
        self.assertEqual(day_status("2025-07-10", self.reservations, self.blackouts), DayStatus.PARTIAL)
        self.assertEqual(day_status("2025-07-12", self.reservations, self.blackouts), DayStatus.FULL)
        self.assertEqual(day_status("2025-07-20", self.reservations, self.blackouts), DayStatus.NONE)

    def test_cancelled_only_day_is_none(self):
        self.assertEqual(day_status("2025-07-15", self.reservations, self.blackouts), DayStatus.NONE)

    def test_missing_date(self):
        self.assertEqual(day_status(None, self.reservations, self.blackouts), DayStatus.NONE)

    def test_month_day_statuses(self):
        statuses = month_day_statuses(2025, 7, self.reservations, self.blackouts)
        self.assertEqual(len(statuses), 31)
        self.assertEqual(list(statuses)[0], date(2025, 7, 1))
        self.assertEqual(statuses[date(2025, 7, 4)], DayStatus.FULL)
        self.assertEqual(statuses[date(2025, 7, 5)], DayStatus.PARTIAL)
        self.assertEqual(statuses[date(2025, 7, 1)], DayStatus.NONE)

    def test_month_day_statuses_february(self):
        self.assertEqual(len(month_day_statuses(2024, 2, [], [])), 29)
        self.assertEqual(len(month_day_statuses(2025, 2, [], [])), 28)


class TestCandidateEndTimes(unittest.TestCase):
    """candidate_end_timesのテスト"""

    def setUp(self):
        self.slots = generate_slots()
        self.reservations = [_reservation("r-1", "2025-07-10", "12:00 PM", "1:00 PM")]

    def test_skips_blocked_slots(self):
        result = list(candidate_end_times("2025-07-10", "10:00 AM", self.slots, self.reservations, []))
        expected = [s for s in self.slots if s.minute > 600 and not 720 <= s.minute < 780]
        self.assertEqual(result, expected)
        self.assertEqual(result[0].label, "10:30 AM")
        self.assertNotIn("12:00 PM", [s.label for s in result])
        self.assertIn("1:00 PM", [s.label for s in result])

    def test_is_lazy(self):
        result = candidate_end_times("2025-07-10", "10:00 AM", self.slots, self.reservations, [])
        self.assertIsInstance(result, types.GeneratorType)
        self.assertEqual(next(result).label, "10:30 AM")

    def test_strictly_after_start(self):
        for slot in candidate_end_times("2025-07-11", "3:00 PM", self.slots, [], []):
            self.assertGreater(slot.minute, to_minutes("3:00 PM"))

    def test_unknown_or_last_start(self):
        self.assertEqual(list(candidate_end_times("2025-07-10", "11:30 PM", self.slots, [], [])), [])
        self.assertEqual(list(candidate_end_times("2025-07-10", "11:00 PM", self.slots, [], [])), [])

    def test_full_day_block(self):
        blackouts = [BlackoutWindow(date="2025-07-10", is_full_day=True)]
        self.assertEqual(list(candidate_end_times("2025-07-10", "10:00 AM", self.slots, [], blackouts)), [])

    def test_exclude_self_when_editing(self):
        result = list(candidate_end_times(
            "2025-07-10", "11:00 AM", self.slots, self.reservations, [], exclude_reservation_id="r-1"
        ))
        self.assertEqual(len(result), len(self.slots) - 11)


class TestAvailableSlotsAndConflicts(unittest.TestCase):
    """available_slots、find_conflicts、detect_double_bookingsのテスト"""

    def setUp(self):
        self.slots = generate_slots()
        self.blackout = BlackoutWindow(date="2025-07-10", start_minute=to_minutes("9:00 AM"),
                                       end_minute=to_minutes("10:00 AM"))
        self.reservation = _reservation("r-1", "2025-07-10", "10:00 AM", "12:00 PM")

    def test_available_slots(self):
        result = available_slots("2025-07-10", self.slots, [self.reservation], [self.blackout])
        labels = [slot.label for slot in result]
        self.assertEqual(len(result), len(self.slots) - 6)
        for label in ("9:00 AM", "9:30 AM", "10:00 AM", "10:30 AM", "11:00 AM", "11:30 AM"):
            self.assertNotIn(label, labels)
        self.assertIn("8:30 AM", labels)
        self.assertIn("12:00 PM", labels)

    def test_available_slots_full_day(self):
        blackouts = [BlackoutWindow(date="2025-07-10", is_full_day=True)]
        self.assertEqual(available_slots("2025-07-10", self.slots, [], blackouts), [])

    def test_find_conflicts(self):
        overlapping = _reservation("r-2", "2025-07-10", "9:30 AM", "10:30 AM", "pending")
        conflicts = find_conflicts("2025-07-10", "9:30 AM", [self.reservation, overlapping], [self.blackout])
        self.assertEqual(conflicts, [self.blackout, overlapping])

        conflicts = find_conflicts("2025-07-10", "10:00 AM", [self.reservation, overlapping], [self.blackout],
                                   exclude_reservation_id="r-2")
        self.assertEqual(conflicts, [self.reservation])

        self.assertEqual(find_conflicts("2025-07-10", "3:00 PM", [self.reservation], [self.blackout]), [])
        self.assertEqual(find_conflicts(None, "10:00 AM", [self.reservation], [self.blackout]), [])

    def test_detect_double_bookings(self):
        overlapping = _reservation("r-2", "2025-07-10", "11:00 AM", "1:00 PM", "pending")
        back_to_back = _reservation("r-3", "2025-07-10", "1:00 PM", "2:00 PM")
        cancelled = _reservation("r-4", "2025-07-10", "10:00 AM", "11:00 AM", "cancelled")
        other_day = _reservation("r-5", "2025-07-11", "10:00 AM", "12:00 PM")

        with self.assertLogs("algorithms.conflict_detector", level="WARNING"):
            pairs = detect_double_bookings([self.reservation, overlapping, back_to_back, cancelled, other_day])
        self.assertEqual(pairs, [(self.reservation, overlapping)])

    def test_no_double_bookings(self):
        self.assertEqual(detect_double_bookings([self.reservation]), [])


class TestConflictDetector(unittest.TestCase):
    """ConflictDetectorクラスのテスト"""

    def test_reservations_for(self):
        reservations = [
            _reservation("a", "2025-07-10", "10:00 AM", "11:00 AM"),
            _reservation("b", "2025-07-10", "1:00 PM", "2:00 PM", "cancelled"),
            _reservation("c", "2025-07-10", "3:00 PM", "4:00 PM", "pending"),
        ]
        detector = ConflictDetector(reservations, None)
        self.assertEqual([r.id for r in detector.reservations_for("2025-07-10")], ["a", "c"])
        self.assertEqual([r.id for r in detector.reservations_for("2025-07-10", "a")], ["c"])
        self.assertEqual(detector.reservations_for(None), [])

    def test_default_minutes(self):
        """終了時刻のない予約の占有時間は変更できる"""
        legacy = [_reservation("r-1", "2025-07-10", "10:00 AM")]
        detector = ConflictDetector(legacy, [], default_minutes=60)
        self.assertFalse(detector.is_slot_available("2025-07-10", "10:30 AM"))
        self.assertTrue(detector.is_slot_available("2025-07-10", "11:00 AM"))

    def test_status_enum_input(self):
        reservation = Reservation(id="r-1", date="2025-07-10", start_minute=600, end_minute=660,
                                  status=ReservationStatus.CANCELLED)
        detector = ConflictDetector([reservation], [])
        self.assertTrue(detector.is_slot_available("2025-07-10", 600))


if __name__ == '__main__':
    unittest.main()
