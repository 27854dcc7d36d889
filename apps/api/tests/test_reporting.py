from datetime import date, time

import pytest

from shiftbook.core.errors import ForbiddenError
from shiftbook.services.booking_ledger import cancel_booking, create_booking
from shiftbook.services.reporting import get_dashboard_counts
from shiftbook.services.shift_catalog import create_template, set_active

TODAY = date(2024, 6, 10)
LONG_AGO = date(2024, 1, 1)


def test_dashboard_counts(db, admin, worker):
    day = create_template(db, admin, "Day", time(9, 0), time(17, 0))
    night = create_template(db, admin, "Night", time(22, 0), time(6, 0))
    old = create_template(db, admin, "Old", time(5, 0), time(9, 0))
    set_active(db, admin, old.shift_template_id, False)

    # window is 2024-06-04 .. 2024-06-10, seven days with both ends included
    for d in (date(2024, 6, 3), date(2024, 6, 4), date(2024, 6, 10), date(2024, 6, 11)):
        create_booking(db, worker, day.shift_template_id, d, today=LONG_AGO)
    dropped = create_booking(db, worker, night.shift_template_id, date(2024, 6, 5), today=LONG_AGO)
    cancel_booking(db, worker, dropped.booking_id)

    counts = get_dashboard_counts(db, admin, today=TODAY)

    assert counts.total_templates == 3
    assert counts.active_templates == 2
    assert counts.total_bookings == 4
    assert counts.recent_bookings == 2
    assert counts.window_start == date(2024, 6, 4)
    assert counts.window_end == TODAY


def test_dashboard_counts_on_empty_store(db, super_admin):
    counts = get_dashboard_counts(db, super_admin, today=TODAY)
    assert counts.to_dict() == {
        "total_templates": 0,
        "active_templates": 0,
        "total_bookings": 0,
        "recent_bookings": 0,
        "window_start": date(2024, 6, 4),
        "window_end": TODAY,
    }


def test_window_size_can_be_overridden(db, admin, worker):
    day = create_template(db, admin, "Day", time(9, 0), time(17, 0))
    create_booking(db, worker, day.shift_template_id, date(2024, 6, 9), today=LONG_AGO)
    assert get_dashboard_counts(db, admin, today=TODAY, window_days=1).recent_bookings == 0
    assert get_dashboard_counts(db, admin, today=TODAY, window_days=2).recent_bookings == 1


def test_workers_cannot_see_dashboard(db, worker):
    with pytest.raises(ForbiddenError):
        get_dashboard_counts(db, worker, today=TODAY)
