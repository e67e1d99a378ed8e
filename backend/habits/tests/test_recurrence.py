# habits/tests/test_recurrence.py

from __future__ import annotations

import datetime

from django.test import SimpleTestCase

from habits.recurrence import (
    RecurrenceRule,
    due_dates,
    is_due,
    parse_weekdays,
    serialize_weekdays,
    sunday_weekday,
)

MONDAY = datetime.date(2024, 1, 15)
TUESDAY = datetime.date(2024, 1, 16)
SUNDAY = datetime.date(2024, 1, 14)


class TestWeekdays(SimpleTestCase):

    def test_sunday_based_indices(self) -> None:
        self.assertEqual(sunday_weekday(SUNDAY), 0)
        self.assertEqual(sunday_weekday(MONDAY), 1)
        self.assertEqual(sunday_weekday(datetime.date(2024, 1, 20)), 6)

    def test_parse_json_text_and_lists(self) -> None:
        self.assertEqual(parse_weekdays("[1, 3, 5]"), frozenset({1, 3, 5}))
        self.assertEqual(parse_weekdays([0, 6, 6]), frozenset({0, 6}))
        self.assertEqual(parse_weekdays("[]"), frozenset())

    def test_unparseable_day_sets_become_none(self) -> None:
        for raw in (None, "[1, 3", "monday", "{\"1\": true}", "[7]", "[-1]", "[true]", "[1.5]", "3"):
            with self.subTest(raw=raw):
                self.assertIsNone(parse_weekdays(raw))

    def test_serialize_is_sorted_json(self) -> None:
        self.assertEqual(serialize_weekdays({5, 1, 3}), "[1, 3, 5]")
        self.assertIsNone(serialize_weekdays(None))


class TestIsDue(SimpleTestCase):

    def test_inactive_rule_is_never_due(self) -> None:
        self.assertFalse(is_due(RecurrenceRule("daily", active=False), MONDAY))

    def test_daily_is_always_due(self) -> None:
        rule = RecurrenceRule("daily")
        self.assertTrue(all(is_due(rule, MONDAY + datetime.timedelta(days=n)) for n in range(10)))

    def test_weekly_follows_day_set(self) -> None:
        rule = RecurrenceRule("weekly", days=frozenset({1, 3, 5}))

        self.assertTrue(is_due(rule, MONDAY))
        self.assertFalse(is_due(rule, TUESDAY))
        self.assertFalse(is_due(rule, SUNDAY))

    def test_weekly_without_day_set_fails_closed(self) -> None:
        rule = RecurrenceRule("weekly", days=parse_weekdays("not json"))
        self.assertFalse(is_due(rule, MONDAY))

    def test_monthly_matches_anchor_day(self) -> None:
        rule = RecurrenceRule("monthly", anchor=datetime.date(2024, 1, 15))

        self.assertTrue(is_due(rule, datetime.date(2024, 2, 15)))
        self.assertFalse(is_due(rule, datetime.date(2024, 2, 16)))

    def test_monthly_anchor_is_read_in_canonical_timezone(self) -> None:
        # 16:00 UTC on the 30th is already the 31st in Seoul
        anchor = datetime.datetime(2024, 1, 30, 16, 0, tzinfo=datetime.timezone.utc)
        rule = RecurrenceRule("monthly", anchor=anchor)

        self.assertTrue(is_due(rule, datetime.date(2024, 3, 31)))
        self.assertFalse(is_due(rule, datetime.date(2024, 3, 30)))

    def test_monthly_anchor_missing_from_short_month_never_matches(self) -> None:
        rule = RecurrenceRule("monthly", anchor=datetime.date(2024, 1, 31))
        april = list(due_dates(rule, datetime.date(2024, 4, 1), datetime.date(2024, 4, 30)))
        self.assertEqual(april, [])

    def test_unknown_type_is_never_due(self) -> None:
        self.assertFalse(is_due(RecurrenceRule("hourly"), MONDAY))


class TestDueDates(SimpleTestCase):

    def test_range_is_inclusive(self) -> None:
        rule = RecurrenceRule("weekly", days=frozenset({1, 3, 5}))
        days = list(due_dates(rule, MONDAY, datetime.date(2024, 1, 22)))

        self.assertEqual(days, [
            datetime.date(2024, 1, 15),
            datetime.date(2024, 1, 17),
            datetime.date(2024, 1, 19),
            datetime.date(2024, 1, 22),
        ])

    def test_empty_when_end_before_start(self) -> None:
        self.assertEqual(list(due_dates(RecurrenceRule("daily"), TUESDAY, MONDAY)), [])
