"""
アルゴリズム層

時刻スロット、ブラックアウト、予約可否判定、予約ライフサイクルの実装を提供します。
"""

from .time_grid import (
    generate_slots,
    to_minutes,
    to_label,
    duration,
    slot_index,
    FULL_DAY_LABEL
)
from .blackout_registry import (
    BlackoutRegistry,
    RecurrenceFrequency,
    expand_recurring_blackouts
)
from .conflict_detector import (
    ConflictDetector,
    is_slot_available,
    day_status,
    candidate_end_times,
    available_slots,
    find_conflicts,
    month_day_statuses,
    detect_double_bookings
)
from .reservation_lifecycle import (
    InvalidTransition,
    allowed_transitions,
    can_transition,
    transition,
    requires_notification,
    initial_status,
    sort_for_display,
    filter_reservations,
    count_by_status
)

__all__ = [
    "generate_slots",
    "to_minutes",
    "to_label",
    "duration",
    "slot_index",
    "FULL_DAY_LABEL",
    "BlackoutRegistry",
    "RecurrenceFrequency",
    "expand_recurring_blackouts",
    "ConflictDetector",
    "is_slot_available",
    "day_status",
    "candidate_end_times",
    "available_slots",
    "find_conflicts",
    "month_day_statuses",
    "detect_double_bookings",
    "InvalidTransition",
    "allowed_transitions",
    "can_transition",
    "transition",
    "requires_notification",
    "initial_status",
    "sort_for_display",
    "filter_reservations",
    "count_by_status"
]
