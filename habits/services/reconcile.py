import logging
from typing import Optional

from django.db import transaction
from django.db.models import Exists, OuterRef

from habits.models import Habit, HabitCompletion
from habits.services import ledger

logger = logging.getLogger(__name__)


@transaction.atomic
def reconcile_counters(*, owner_id: Optional[int] = None) -> int:
    """
    Re-derive completion_count and streak from the ledger (server source of truth).

    Repairs habits whose counters drifted, e.g. after a crash between the
    ledger insert and the counter bump. Both counters move in lockstep, so
    both are reset to the number of ledger rows. Returns how many habits
    were corrected.
    """
    qs = Habit.objects.select_for_update().only("id", "completion_count", "streak")
    if owner_id is not None:
        qs = qs.filter(owner_id=owner_id)

    habits = list(qs)
    counts = ledger.count_by_habit(h.pk for h in habits)

    fixed = 0
    for habit in habits:
        expected = counts.get(habit.pk, 0)
        if habit.completion_count == expected and habit.streak == expected:
            continue
        logger.warning(
            "Reconciling habit %s: completion_count %s -> %s, streak %s -> %s",
            habit.pk, habit.completion_count, expected, habit.streak, expected,
        )
        habit.completion_count = expected
        habit.streak = expected
        habit.save(update_fields=["completion_count", "streak", "updated_at"])
        fixed += 1

    return fixed


def purge_orphan_completions() -> int:
    """Delete ledger rows whose habit no longer exists."""
    orphans = HabitCompletion.objects.exclude(
        Exists(Habit.objects.filter(pk=OuterRef("habit_id")))
    )
    deleted, _ = orphans.delete()
    if deleted:
        logger.warning("Purged %d orphaned completion(s)", deleted)
    return deleted
