# habits/tests/test_stats.py
"""
Streak & Rate Calculator Tests
==============================

All dates are canonical days; ``as_of`` is fixed to Friday 2024-01-26.
"""

from __future__ import annotations

import datetime

from django.test import SimpleTestCase

from habits.recurrence import RecurrenceRule
from habits.stats import (
    HabitRecord,
    completion_rate,
    compute_rates,
    compute_streaks,
    habits_overview,
    summarize_focus,
)

AS_OF = datetime.date(2024, 1, 26)
DAILY = RecurrenceRule("daily")
MON_WED_FRI = RecurrenceRule("weekly", days=frozenset({1, 3, 5}))


def day(offset: int) -> datetime.date:
    return AS_OF + datetime.timedelta(days=offset)


class TestCompletionRate(SimpleTestCase):

    def test_rounds_half_up(self) -> None:
        self.assertEqual(completion_rate(1, 8), 13)
        self.assertEqual(completion_rate(2, 3), 67)
        self.assertEqual(completion_rate(1, 3), 33)
        self.assertEqual(completion_rate(3, 3), 100)

    def test_nothing_expected_is_zero(self) -> None:
        self.assertEqual(completion_rate(0, 0), 0)


class TestComputeStreaks(SimpleTestCase):

    def test_every_day_checked(self) -> None:
        # Created four days before as_of: five due days in total
        checks = [day(n) for n in range(-4, 1)]

        streaks = compute_streaks(checks, DAILY, day(-4), AS_OF)

        self.assertEqual((streaks.current, streaks.longest), (5, 5))

    def test_missing_yesterday_resets_current_streak(self) -> None:
        checks = [day(-4), day(-3), day(-2), day(0)]

        streaks = compute_streaks(checks, DAILY, day(-4), AS_OF)

        self.assertEqual(streaks.current, 1)
        self.assertEqual(streaks.longest, 3)

    def test_missing_yesterday_and_today_is_zero(self) -> None:
        checks = [day(-4), day(-3), day(-2)]

        streaks = compute_streaks(checks, DAILY, day(-4), AS_OF)

        self.assertEqual(streaks.current, 0)
        self.assertEqual(streaks.longest, 3)

    def test_unchecked_today_does_not_break_streak(self) -> None:
        checks = [day(-4), day(-3), day(-2), day(-1)]

        streaks = compute_streaks(checks, DAILY, day(-4), AS_OF)

        self.assertEqual((streaks.current, streaks.longest), (4, 4))

    def test_weekly_streak_skips_non_due_days(self) -> None:
        # Mon 22, Wed 24, Fri 26 are due; the weekend and Tue/Thu are not
        checks = [datetime.date(2024, 1, 19), datetime.date(2024, 1, 22), datetime.date(2024, 1, 24), AS_OF]

        streaks = compute_streaks(checks, MON_WED_FRI, datetime.date(2024, 1, 19), AS_OF)

        self.assertEqual((streaks.current, streaks.longest), (4, 4))

    def test_checks_on_non_due_days_are_ignored(self) -> None:
        # Only Tuesdays and Thursdays checked; none of them are due
        checks = [datetime.date(2024, 1, 23), datetime.date(2024, 1, 25)]

        streaks = compute_streaks(checks, MON_WED_FRI, datetime.date(2024, 1, 22), AS_OF)

        self.assertEqual((streaks.current, streaks.longest), (0, 0))

    def test_no_due_dates_ever(self) -> None:
        self.assertEqual(compute_streaks([AS_OF], RecurrenceRule("daily", active=False), day(-10), AS_OF).to_dict(),
                         {"current": 0, "longest": 0})
        self.assertEqual(compute_streaks([], DAILY, day(3), AS_OF).current, 0)

    def test_timestamps_are_normalized_to_canonical_days(self) -> None:
        # 15:30 UTC on the 25th is already the 26th in Seoul
        late_check = datetime.datetime(2024, 1, 25, 15, 30, tzinfo=datetime.timezone.utc)

        streaks = compute_streaks([late_check], DAILY, AS_OF, AS_OF)

        self.assertEqual(streaks.current, 1)


class TestComputeRates(SimpleTestCase):

    def test_weekly_habit_fully_checked_over_two_weeks(self) -> None:
        created = datetime.date(2024, 1, 13)
        checks = [datetime.date(2024, 1, d) for d in (15, 17, 19, 22, 24, 26)]

        rates = compute_rates(checks, MON_WED_FRI, created, AS_OF)

        self.assertEqual((rates.weekly_checks, rates.weekly_expected, rates.weekly_rate), (3, 3, 100))
        self.assertEqual((rates.monthly_checks, rates.monthly_expected, rates.monthly_rate), (6, 6, 100))
        self.assertEqual(rates.overall_rate, 100)

    def test_created_today_with_nothing_due(self) -> None:
        # Saturday creation, Mon/Wed/Fri rule: nothing due yet
        saturday = datetime.date(2024, 1, 27)

        rates = compute_rates([], MON_WED_FRI, saturday, saturday)

        self.assertEqual(rates.total_expected, 0)
        self.assertEqual((rates.overall_rate, rates.weekly_rate, rates.monthly_rate), (0, 0, 0))

    def test_windows(self) -> None:
        created = datetime.date(2023, 12, 27)
        # Every day from Jan 17 checked, nothing before
        checks = [datetime.date(2024, 1, d) for d in range(17, 27)]

        rates = compute_rates(checks, DAILY, created, AS_OF)

        self.assertEqual((rates.total_checks, rates.total_expected), (10, 31))
        self.assertEqual(rates.overall_rate, 32)
        self.assertEqual((rates.weekly_checks, rates.weekly_expected, rates.weekly_rate), (7, 7, 100))
        self.assertEqual((rates.monthly_checks, rates.monthly_expected, rates.monthly_rate), (10, 26, 38))

    def test_windows_are_clipped_to_creation_day(self) -> None:
        rates = compute_rates([day(-1), day(0)], DAILY, day(-2), AS_OF)

        self.assertEqual((rates.weekly_checks, rates.weekly_expected, rates.weekly_rate), (2, 3, 67))

    def test_non_due_checks_do_not_inflate_rates(self) -> None:
        checks = [datetime.date(2024, 1, 23), datetime.date(2024, 1, 24)]

        rates = compute_rates(checks, MON_WED_FRI, datetime.date(2024, 1, 22), AS_OF)

        self.assertEqual((rates.total_checks, rates.total_expected), (1, 3))


class TestHabitsOverview(SimpleTestCase):

    def test_aggregates_are_additive(self) -> None:
        habits = [
            HabitRecord(1, "Read", DAILY, day(-6), [day(n) for n in range(-6, 1)], icon="📚", focus_minutes=40),
            HabitRecord(2, "Run", MON_WED_FRI, day(-6), [datetime.date(2024, 1, 22)], focus_minutes=15),
            HabitRecord(3, "Meditate", DAILY, day(-6), []),
        ]

        overview = habits_overview(habits, AS_OF)

        self.assertEqual(overview.total_habits, 3)
        self.assertEqual((overview.today_completed, overview.today_total), (1, 3))
        self.assertEqual(overview.today_rate, 33)
        # Pooled: Read 7/7, Run 1/3 (Mon, Wed, Fri), Meditate 0/7
        self.assertEqual(overview.weekly_rate, completion_rate(8, 17))
        self.assertEqual(overview.monthly_rate, completion_rate(8, 17))
        # Run's Wednesday miss ends its streak; today is still open
        self.assertEqual([s.streak for s in overview.top_streaks], [7, 0, 0])
        self.assertEqual([s.habit_title for s in overview.top_streaks], ["Read", "Meditate", "Run"])
        self.assertEqual(overview.average_streak, 2.3)
        self.assertEqual(overview.total_focus_minutes, 55)

    def test_empty(self) -> None:
        overview = habits_overview([], AS_OF)

        self.assertEqual(overview.total_habits, 0)
        self.assertEqual(overview.today_rate, 0)
        self.assertEqual(overview.average_streak, 0.0)
        self.assertEqual(overview.total_focus_minutes, 0)
        self.assertEqual(overview.to_dict()["top_streaks"], [])


class TestSummarizeFocus(SimpleTestCase):

    def test_totals_and_half_up_mean(self) -> None:
        summary = summarize_focus([20, 25])

        self.assertEqual(summary.to_dict(), {
            "focus_sessions": 2, "total_focus_minutes": 45, "avg_focus_minutes": 23,
        })

    def test_missing_minutes_count_as_zero(self) -> None:
        self.assertEqual(summarize_focus([None, 9]).total_minutes, 9)

    def test_no_sessions(self) -> None:
        self.assertEqual(summarize_focus([]).to_dict(), {
            "focus_sessions": 0, "total_focus_minutes": 0, "avg_focus_minutes": 0,
        })
