#!/usr/bin/env python3
"""
時刻スロットのユニットテスト

スロット一覧の生成、ラベルと分数の相互変換、所要時間の表示をテストします。
"""

import sys
import os
import pytest

# プロジェクトルートをパスに追加
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from algorithms.time_grid import (
    generate_slots, to_minutes, to_label, duration, slot_index,
    as_minute, is_full_day_label, FULL_DAY_LABEL
)
from models.booking_models import TimeSlot


class TestGenerateSlots:
    """generate_slotsのテスト"""

    def test_slot_count_and_bounds(self):
        """35スロットで6:00 AMから11:00 PMまで"""
        slots = generate_slots()
        assert len(slots) == 35
        assert slots[0].label == "6:00 AM"
        assert slots[0].minute == 360
        assert slots[-1].label == "11:00 PM"
        assert slots[-1].minute == 1380

    def test_strictly_increasing_without_duplicates(self):
        """分数が狭義単調増加で重複がない"""
        minutes = [slot.minute for slot in generate_slots()]
        assert all(a < b for a, b in zip(minutes, minutes[1:]))
        assert len(set(minutes)) == len(minutes)

    def test_thirty_minute_cadence(self):
        """30分刻み"""
        minutes = [slot.minute for slot in generate_slots()]
        assert all(b - a == 30 for a, b in zip(minutes, minutes[1:]))

    def test_excludes_eleven_thirty_pm(self):
        """11:30 PMは含まない"""
        labels = [slot.label for slot in generate_slots()]
        assert "11:30 PM" not in labels

    def test_labels_round_trip(self):
        """すべてのラベルが分数と相互変換できる"""
        for slot in generate_slots():
            assert to_minutes(slot.label) == slot.minute
            assert to_label(slot.minute) == slot.label

    def test_to_minutes_is_injective_over_slots(self):
        """異なるスロットが同じ分数にならない"""
        slots = generate_slots()
        assert len({to_minutes(slot.label) for slot in slots}) == len(slots)

    def test_restartable(self):
        """呼び出すたびに同じ内容の新しいリストを返す"""
        first = generate_slots()
        second = generate_slots()
        assert first == second
        assert first is not second


class TestToMinutes:
    """to_minutesのテスト"""

    def test_noon_and_midnight(self):
        assert to_minutes("12:00 AM") == 0
        assert to_minutes("12:30 AM") == 30
        assert to_minutes("12:00 PM") == 720
        assert to_minutes("12:30 PM") == 750

    def test_afternoon(self):
        assert to_minutes("1:00 PM") == 780
        assert to_minutes("11:00 PM") == 1380

    def test_lenient_formats(self):
        """ゼロ埋め、小文字、空白なしも受け付ける"""
        assert to_minutes("06:00 AM") == 360
        assert to_minutes("6:00 am") == 360
        assert to_minutes("10:00AM") == 600
        assert to_minutes("  2:30 pm ") == 870

    @pytest.mark.parametrize("label", ["", "abc", "10:00", "13:00 PM", "0:30 AM", "10:75 AM", "noon"])
    def test_malformed_returns_zero(self, label):
        """解釈できない値は0"""
        assert to_minutes(label) == 0

    def test_non_string_returns_zero(self):
        assert to_minutes(None) == 0
        assert to_minutes(600) == 0


class TestToLabel:
    """to_labelのテスト"""

    def test_labels(self):
        assert to_label(0) == "12:00 AM"
        assert to_label(720) == "12:00 PM"
        assert to_label(615) == "10:15 AM"
        assert to_label(1439) == "11:59 PM"

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            to_label(1440)
        with pytest.raises(ValueError):
            to_label(-1)


class TestDuration:
    """durationのテスト"""

    def test_minutes_only(self):
        assert duration("10:00 AM", "10:30 AM") == "30 minutes"

    def test_single_hour(self):
        assert duration("10:00 AM", "11:00 AM") == "1 hour"

    def test_plural_hours(self):
        assert duration("10:00 AM", "12:00 PM") == "2 hours"

    def test_hours_and_minutes(self):
        assert duration("10:00 AM", "11:30 AM") == "1 hour 30 minutes"
        assert duration("10:00 AM", "1:30 PM") == "3 hours 30 minutes"

    def test_single_minute(self):
        assert duration("10:00 AM", "10:01 AM") == "1 minute"

    def test_empty_when_end_not_after_start(self):
        """終了 <= 開始なら空文字"""
        assert duration("10:00 AM", "10:00 AM") == ""
        assert duration("2:00 PM", "10:00 AM") == ""

    def test_empty_for_all_non_increasing_slot_pairs(self):
        slots = generate_slots()
        for a in slots:
            for b in slots:
                if b.minute <= a.minute:
                    assert duration(a.label, b.label) == ""


class TestSlotIndex:
    """slot_indexとas_minuteのテスト"""

    def test_index_by_label_minute_and_slot(self):
        slots = generate_slots()
        assert slot_index(slots, "6:00 AM") == 0
        assert slot_index(slots, 390) == 1
        assert slot_index(slots, slots[10]) == 10
        assert slot_index(slots, "11:00 PM") == 34

    def test_missing_slot(self):
        slots = generate_slots()
        assert slot_index(slots, "11:30 PM") is None
        assert slot_index(slots, None) is None

    def test_as_minute(self):
        assert as_minute(None) is None
        assert as_minute(TimeSlot(600, "10:00 AM")) == 600
        assert as_minute("10:00 AM") == 600
        assert as_minute(630) == 630

    def test_full_day_label(self):
        assert is_full_day_label(FULL_DAY_LABEL)
        assert is_full_day_label(" full day ")
        assert not is_full_day_label("10:00 AM")
        assert not is_full_day_label(None)
