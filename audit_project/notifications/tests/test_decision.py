from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from django.test import SimpleTestCase

from notifications.exceptions import ConfigurationError
from notifications.services.reminders.decision import (
    ReminderPhase,
    ReminderState,
    Remind,
    Skip,
    SkipReason,
    TargetWindow,
    decide,
    parse_reminder_time,
    reminder_phase,
)

TZ = ZoneInfo("Asia/Kolkata")

WINDOW = TargetWindow(
    quota=10,
    start_date=date(2024, 1, 1),
    end_date=date(2024, 1, 10),
    reminder_time="09:00",
)


def at(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=TZ)


class ParseReminderTimeTests(SimpleTestCase):
    def test_accepts_24h_times(self):
        self.assertEqual(parse_reminder_time("09:00").hour, 9)
        self.assertEqual(parse_reminder_time("23:59").minute, 59)
        self.assertEqual(parse_reminder_time("00:00").hour, 0)

    def test_rejects_malformed_times(self):
        for value in ("9:00", "24:00", "12:60", "noon", "", None, "09:00:00"):
            with self.subTest(value=value):
                with self.assertRaises(ConfigurationError):
                    parse_reminder_time(value)


class DecideScenarioTests(SimpleTestCase):
    def test_first_reminder_of_the_window(self):
        decision = decide(at(2024, 1, 5, 9, 1), WINDOW, None, 3)

        self.assertIsInstance(decision, Remind)
        self.assertEqual(decision.pending, 7)
        self.assertFalse(decision.escalated)
        self.assertEqual(
            decision.new_state,
            ReminderState(date(2024, 1, 5), 3, 0),
        )

    def test_third_stagnant_reminder_escalates(self):
        prior = ReminderState(
            last_reminder_date=date(2024, 1, 4),
            last_completed_count_at_reminder=3,
            stagnant_streak=1,
        )

        decision = decide(at(2024, 1, 5, 9, 1), WINDOW, prior, 3)

        self.assertIsInstance(decision, Remind)
        self.assertEqual(decision.pending, 7)
        self.assertTrue(decision.escalated)
        self.assertEqual(decision.new_state.stagnant_streak, 2)

    def test_before_reminder_time_is_too_early(self):
        decision = decide(at(2024, 1, 5, 8, 59), WINDOW, None, 3)
        self.assertEqual(decision, Skip(SkipReason.TOO_EARLY))


class DecideRuleTests(SimpleTestCase):
    def test_same_day_second_run_is_skipped(self):
        now = at(2024, 1, 5, 9, 1)
        first = decide(now, WINDOW, None, 3)

        second = decide(now + timedelta(hours=5), WINDOW, first.new_state, 3)

        self.assertEqual(second, Skip(SkipReason.ALREADY_SENT_TODAY))

    def test_progress_resets_the_streak(self):
        prior = ReminderState(date(2024, 1, 4), 3, 5)

        decision = decide(at(2024, 1, 5, 10), WINDOW, prior, 4)

        self.assertEqual(decision.new_state.stagnant_streak, 0)
        self.assertFalse(decision.escalated)

    def test_escalation_starts_with_the_third_stagnant_reminder(self):
        state = None
        escalations = []

        for day in range(1, 6):
            decision = decide(at(2024, 1, day, 9, 30), WINDOW, state, 2)
            escalations.append(decision.escalated)
            state = decision.new_state

        self.assertEqual(escalations, [False, False, True, True, True])

    def test_fewer_completions_than_last_time_counts_as_stagnant(self):
        prior = ReminderState(date(2024, 1, 4), 5, 0)

        decision = decide(at(2024, 1, 5, 10), WINDOW, prior, 4)

        self.assertEqual(decision.new_state.stagnant_streak, 1)

    def test_quota_met_always_skips(self):
        prior = ReminderState(date(2024, 1, 2), 1, 4)
        for completed in (10, 11, 50):
            with self.subTest(completed=completed):
                decision = decide(at(2024, 1, 5, 23), WINDOW, prior, completed)
                self.assertEqual(decision, Skip(SkipReason.TARGET_MET))

    def test_last_second_of_window_can_remind(self):
        decision = decide(at(2024, 1, 10, 23, 59, 59), WINDOW, None, 0)
        self.assertIsInstance(decision, Remind)

    def test_one_second_after_window_skips(self):
        decision = decide(at(2024, 1, 11, 0, 0, 0), WINDOW, None, 0)
        self.assertEqual(decision, Skip(SkipReason.WINDOW_INACTIVE))

    def test_before_window_skips(self):
        decision = decide(at(2023, 12, 31, 12), WINDOW, None, 0)
        self.assertEqual(decision, Skip(SkipReason.WINDOW_INACTIVE))

    def test_safety_offset_delays_the_reminder(self):
        self.assertEqual(
            decide(at(2024, 1, 5, 9, 0, 10), WINDOW, None, 0),
            Skip(SkipReason.TOO_EARLY),
        )
        self.assertIsInstance(decide(at(2024, 1, 5, 9, 0, 15), WINDOW, None, 0), Remind)

    def test_custom_safety_offset_and_threshold(self):
        prior = ReminderState(date(2024, 1, 4), 0, 0)

        decision = decide(
            at(2024, 1, 5, 9, 0, 1),
            WINDOW,
            prior,
            0,
            safety_offset=timedelta(0),
            stagnation_threshold=1,
        )

        self.assertIsInstance(decision, Remind)
        self.assertTrue(decision.escalated)

    def test_single_day_window(self):
        window = TargetWindow(3, date(2024, 1, 5), date(2024, 1, 5), "09:00")
        self.assertIsInstance(decide(at(2024, 1, 5, 9, 30), window, None, 1), Remind)

    def test_midnight_reminder_time(self):
        window = TargetWindow(3, date(2024, 1, 1), date(2024, 1, 10), "00:00")
        self.assertIsInstance(decide(at(2024, 1, 5, 0, 0, 20), window, None, 1), Remind)

    def test_future_last_reminder_date_does_not_suppress(self):
        prior = ReminderState(date(2024, 1, 8), 3, 0)

        decision = decide(at(2024, 1, 5, 10), WINDOW, prior, 3)

        self.assertIsInstance(decision, Remind)

    def test_day_boundary_follows_the_zone_of_now(self):
        # 2024-01-05 02:00 UTC is already 07:30 in Kolkata: too early there.
        now = datetime(2024, 1, 5, 2, 0, tzinfo=ZoneInfo("UTC")).astimezone(TZ)
        self.assertEqual(decide(now, WINDOW, None, 0), Skip(SkipReason.TOO_EARLY))


class DecideValidationTests(SimpleTestCase):
    def test_inverted_window_is_a_configuration_error(self):
        window = TargetWindow(5, date(2024, 1, 10), date(2024, 1, 1), "09:00")
        with self.assertRaises(ConfigurationError):
            decide(at(2024, 1, 5, 10), window, None, 0)

    def test_malformed_reminder_time_is_a_configuration_error(self):
        window = TargetWindow(5, date(2024, 1, 1), date(2024, 1, 10), "9am")
        with self.assertRaises(ConfigurationError):
            decide(at(2024, 1, 5, 10), window, None, 0)

    def test_non_positive_quota_is_a_configuration_error(self):
        window = TargetWindow(0, date(2024, 1, 1), date(2024, 1, 10), "09:00")
        with self.assertRaises(ConfigurationError):
            decide(at(2024, 1, 5, 10), window, None, 0)

    def test_naive_now_is_rejected(self):
        with self.assertRaises(ValueError):
            decide(datetime(2024, 1, 5, 10), WINDOW, None, 0)


class ReminderPhaseTests(SimpleTestCase):
    def test_phases_through_a_day(self):
        sent = ReminderState(date(2024, 1, 5), 3, 0)

        self.assertEqual(
            reminder_phase(at(2024, 1, 5, 8), WINDOW, None, 3),
            ReminderPhase.WAITING_FOR_TIME,
        )
        self.assertEqual(
            reminder_phase(at(2024, 1, 5, 10), WINDOW, None, 3),
            ReminderPhase.ARMED,
        )
        self.assertEqual(
            reminder_phase(at(2024, 1, 5, 11), WINDOW, sent, 3),
            ReminderPhase.SENT,
        )
        self.assertEqual(
            reminder_phase(at(2024, 1, 6, 8), WINDOW, sent, 3),
            ReminderPhase.WAITING_FOR_TIME,
        )
        self.assertEqual(
            reminder_phase(at(2024, 1, 12, 10), WINDOW, sent, 3),
            ReminderPhase.INACTIVE,
        )
