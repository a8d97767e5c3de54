from datetime import date
from io import StringIO

import pytest
from django.core.management import call_command

from habits.models import Habit, HabitCompletion
from habits.services import ledger, reconcile

pytestmark = pytest.mark.django_db


@pytest.fixture()
def user(django_user_model):
    return django_user_model.objects.create_user(
        username="u1",
        password="pass12345",
        email="u1@example.com",
    )


@pytest.fixture()
def other_user(django_user_model):
    return django_user_model.objects.create_user(
        username="u2",
        password="pass12345",
        email="u2@example.com",
    )


def _habit_with_completions(owner, name, days):
    habit = Habit.objects.create(owner=owner, name=name)
    for d in days:
        ledger.record_completion(habit.pk, owner.pk, d)
    return habit


def test_reconcile_counters__rederives_drifted_counters_from_ledger(user):
    # ledger rows written but the counter bump never happened
    habit = _habit_with_completions(user, "Gym", [date(2024, 1, 1), date(2024, 1, 2)])

    assert reconcile.reconcile_counters() == 1

    habit.refresh_from_db()
    assert (habit.completion_count, habit.streak) == (2, 2)
    assert reconcile.reconcile_counters() == 0


def test_reconcile_counters__counter_without_ledger_row__reset_to_zero(user):
    habit = Habit.objects.create(owner=user, name="Gym", completion_count=3, streak=1)

    assert reconcile.reconcile_counters() == 1

    habit.refresh_from_db()
    assert (habit.completion_count, habit.streak) == (0, 0)


def test_reconcile_counters__scoped_to_owner(user, other_user):
    mine = _habit_with_completions(user, "Gym", [date(2024, 1, 1)])
    theirs = _habit_with_completions(other_user, "Swim", [date(2024, 1, 1)])

    assert reconcile.reconcile_counters(owner_id=user.pk) == 1

    mine.refresh_from_db()
    theirs.refresh_from_db()
    assert mine.completion_count == 1
    assert theirs.completion_count == 0


def test_purge_orphan_completions__removes_rows_of_deleted_habits(user):
    kept = _habit_with_completions(user, "Gym", [date(2024, 1, 1)])
    gone = _habit_with_completions(user, "Read", [date(2024, 1, 1), date(2024, 1, 2)])
    Habit.objects.filter(pk=gone.pk).delete()

    assert reconcile.purge_orphan_completions() == 2
    assert HabitCompletion.objects.filter(habit_id=kept.pk).count() == 1
    assert not HabitCompletion.objects.filter(habit_id=gone.pk).exists()


def test_reconcile_habit_counters_command__reports_work(user):
    _habit_with_completions(user, "Gym", [date(2024, 1, 1)])
    gone = _habit_with_completions(user, "Read", [date(2024, 1, 1)])
    Habit.objects.filter(pk=gone.pk).delete()
    out = StringIO()

    call_command("reconcile_habit_counters", "--purge-orphans", stdout=out)

    output = out.getvalue()
    assert "Purged 1 orphaned completion(s)" in output
    assert "Reconciled 1 habit(s)" in output
