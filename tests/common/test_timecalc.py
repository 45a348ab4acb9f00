from datetime import time

import pytest

from backoffice.common.timecalc import BreakInterval, early_departure_minutes, late_minutes, working_hours
from backoffice.core.exceptions import ValidationError


def test_working_hours_subtracts_break():
    lunch = BreakInterval(time(12, 0), time(13, 0))

    assert working_hours(time(8, 0), time(17, 0)) == 9
    assert working_hours(time(8, 0), time(17, 0), lunch) == 8


def test_break_covering_the_whole_shift_gives_zero_hours():
    whole = BreakInterval(time(9, 0), time(10, 0))
    assert working_hours(time(9, 0), time(10, 0), whole) == 0


@pytest.mark.parametrize(
    "start, end",
    [
        (time(6, 0), time(7, 0)),
        (time(7, 30), time(8, 30)),
        (time(16, 30), time(17, 30)),
        (time(18, 0), time(19, 0)),
    ],
)
def test_break_outside_the_shift_is_rejected(start, end):
    with pytest.raises(ValidationError) as exc:
        working_hours(time(8, 0), time(17, 0), BreakInterval(start, end))
    assert exc.value.field == "break_start"


def test_missing_clock_out_gives_zero_hours():
    assert working_hours(time(8, 0), None) == 0
    assert working_hours(None, time(17, 0)) == 0


def test_clock_out_before_clock_in_is_rejected():
    with pytest.raises(ValidationError) as exc:
        working_hours(time(17, 0), time(8, 0))
    assert exc.value.field == "clock_out"


def test_break_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        BreakInterval(time(13, 0), time(12, 0))


def test_half_specified_break_is_ignored():
    assert BreakInterval.from_optional(time(12, 0), None) is None


def test_lateness_and_early_departure_never_negative():
    assert late_minutes(time(8, 45), time(8, 0)) == 45
    assert late_minutes(time(7, 50), time(8, 0)) == 0
    assert early_departure_minutes(time(16, 30), time(17, 0)) == 30
    assert early_departure_minutes(time(18, 0), time(17, 0)) == 0


def test_no_schedule_means_no_penalty():
    assert late_minutes(time(11, 0), None) == 0
    assert early_departure_minutes(time(11, 0), None) == 0
