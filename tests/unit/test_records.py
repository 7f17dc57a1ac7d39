"""Unit tests for records, date ranges and the clock helpers."""

from datetime import UTC, date, datetime, timedelta, timezone

from timelens.clock import FixedClock, SystemClock, local_date, local_hour
from timelens.records.models import Category, DateRange, Goal, TimeEntry

SHANGHAI = timezone(timedelta(hours=8))


class TestTimeEntry:
    """Tests for TimeEntry."""

    def test_eligibility(self) -> None:
        """Test only finished, non-deleted entries are eligible."""
        start = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)
        assert TimeEntry("e1", start, start + timedelta(hours=1)).is_eligible
        assert not TimeEntry("e2", start).is_eligible
        assert not TimeEntry("e3", start, start, deleted=True).is_eligible

    def test_duration(self) -> None:
        """Test raw minutes, including negative spans."""
        start = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)
        assert TimeEntry("e1", start, start + timedelta(minutes=90)).duration_minutes == 90
        assert TimeEntry("e2", start, start - timedelta(minutes=5)).duration_minutes == -5
        assert TimeEntry("e3", start).duration_minutes == 0

    def test_from_dict_naive_is_utc(self) -> None:
        """Test naive storage datetimes are read as UTC."""
        entry = TimeEntry.from_dict(
            {"_id": "e1", "start_time": datetime(2024, 3, 1, 9, 0), "deleted": False}
        )
        assert entry.start_time.tzinfo is UTC
        assert entry.end_time is None
        assert entry.activity == ""

    def test_to_dict(self) -> None:
        """Test storage document layout."""
        start = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)
        doc = TimeEntry("e1", start, activity="gym", goal_id="g1").to_dict()
        assert doc["start_time"] == start
        assert doc["goal_id"] == "g1"
        assert doc["deleted"] is False


class TestGoalAndCategory:
    """Tests for Goal and Category documents."""

    def test_goal_from_dict(self) -> None:
        """Test goal fields and defaults."""
        goal = Goal.from_dict({"id": "g1", "name": "写论文", "date": "2024-03-01"})
        assert goal == Goal("g1", "写论文", "2024-03-01")

    def test_category_default_order(self) -> None:
        """Test categories without order sort last."""
        assert Category.from_dict({"_id": "x", "name": "X"}).order == 999


class TestDateRange:
    """Tests for DateRange."""

    def test_days_inclusive(self) -> None:
        """Test days run from the start date through the end date."""
        date_range = DateRange.for_dates(date(2024, 2, 28), date(2024, 3, 1))
        assert date_range.days() == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]

    def test_contains(self) -> None:
        """Test both bounds are inclusive."""
        date_range = DateRange.for_dates(date(2024, 3, 1), date(2024, 3, 1), UTC)
        assert date_range.contains(datetime(2024, 3, 1, 0, 0, tzinfo=UTC))
        assert date_range.contains(date_range.end)
        assert not date_range.contains(datetime(2024, 3, 2, 0, 0, tzinfo=UTC))

    def test_for_dates_without_zone_uses_system_zone(self, shanghai_system_zone: None) -> None:
        """Test bare dates become system-zone midnights that admit UTC instants."""
        date_range = DateRange.for_dates(date(2024, 1, 2), date(2024, 1, 2))

        assert date_range.start.utcoffset() == timedelta(hours=8)
        assert date_range.contains(datetime(2024, 1, 1, 23, 30, tzinfo=UTC))
        assert not date_range.contains(datetime(2024, 1, 2, 23, 30, tzinfo=UTC))
        assert date_range.days() == [date(2024, 1, 2)]

    def test_contains_mixes_naive_and_aware(self) -> None:
        """Test naive bounds compare against aware instants as local time."""
        date_range = DateRange(datetime(2024, 3, 1), datetime(2024, 3, 1, 23, 59))
        assert date_range.contains(datetime(2024, 3, 1, 9, 0, tzinfo=UTC))
        assert date_range.contains(datetime(2024, 3, 1, 9, 0))
        assert not date_range.contains(datetime(2024, 3, 2, 9, 0, tzinfo=UTC))

    def test_goal_analysis_default(self) -> None:
        """Test the goal window ends at the end of yesterday."""
        now = datetime(2024, 3, 31, 15, 0, tzinfo=UTC)
        date_range = DateRange.goal_analysis_default(now)
        assert date_range.days()[0] == date(2024, 3, 1)
        assert date_range.days()[-1] == date(2024, 3, 30)
        assert not date_range.contains(now)

    def test_last_days_includes_today(self) -> None:
        """Test the dashboard window runs through today."""
        now = datetime(2024, 3, 31, 15, 0, tzinfo=UTC)
        date_range = DateRange.last_days(30, now)
        assert date_range.contains(now)
        assert len(date_range.days()) == 31


class TestClock:
    """Tests for clocks and local calendar helpers."""

    def test_fixed_clock(self) -> None:
        """Test a fixed clock only moves when told to."""
        instant = datetime(2024, 3, 20, 12, 0, tzinfo=UTC)
        clock = FixedClock(instant)
        assert clock.now() == instant
        clock.advance_to(instant + timedelta(days=1))
        assert clock.now() == instant + timedelta(days=1)

    def test_system_clock_is_aware(self) -> None:
        """Test the system clock returns aware datetimes."""
        assert SystemClock().now().tzinfo is not None
        assert SystemClock(UTC).now().tzinfo is UTC

    def test_local_date_converts_aware(self) -> None:
        """Test late UTC evening is the next day in UTC+8."""
        instant = datetime(2024, 3, 1, 20, 0, tzinfo=UTC)
        assert local_date(instant) == date(2024, 3, 1)
        assert local_date(instant, SHANGHAI) == date(2024, 3, 2)
        assert local_hour(instant, SHANGHAI) == 4

    def test_local_date_defaults_to_system_zone(self, shanghai_system_zone: None) -> None:
        """Test aware instants use the system zone when no zone is given."""
        instant = datetime(2024, 3, 1, 20, 0, tzinfo=UTC)
        assert local_date(instant) == date(2024, 3, 2)
        assert local_hour(instant) == 4

    def test_local_date_naive_unchanged(self) -> None:
        """Test naive datetimes are taken as local."""
        assert local_date(datetime(2024, 3, 1, 23, 0), SHANGHAI) == date(2024, 3, 1)
