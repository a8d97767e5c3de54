import pytest

from habits.models import Habit
from habits.services import habit_store
from habits.services.habit_store import HabitCounters

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


def test_create_habit__counters_start_at_zero_and_defaults_apply(user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym"})

    assert habit.completion_count == 0
    assert habit.streak == 0
    assert habit.icon == "default-habit-icon"
    assert habit.color == "#4a69bd"
    assert habit.owner_id == user.pk


def test_create_habit__protected_fields_ignored(user, other_user):
    habit = habit_store.create_habit(
        user.pk,
        {"name": "Gym", "completion_count": 5, "streak": 9, "owner_id": other_user.pk, "id": 12345},
    )
    habit.refresh_from_db()

    assert habit.completion_count == 0
    assert habit.streak == 0
    assert habit.owner_id == user.pk
    assert habit.pk != 12345


def test_create_habit__tags_trimmed_and_deduplicated_in_order(user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym", "tags": [" health ", "work", "health", ""]})

    assert habit_store.get_habit(user.pk, habit.pk).tag_names() == ["health", "work"]


def test_get_habit__other_owner__returns_none(user, other_user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym"})

    assert habit_store.get_habit(other_user.pk, habit.pk) is None
    assert habit_store.get_habit(user.pk, habit.pk + 1000) is None


def test_update_habit__applies_only_given_fields(user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym", "icon": "dumbbell", "tags": ["health"]})

    updated = habit_store.update_habit(user.pk, habit.pk, {"name": "Weights"})

    assert updated.name == "Weights"
    assert updated.icon == "dumbbell"
    assert updated.tag_names() == ["health"]


def test_update_habit__protected_fields_ignored(user, other_user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym"})

    updated = habit_store.update_habit(
        user.pk, habit.pk, {"completion_count": 10, "streak": 10, "owner_id": other_user.pk, "color": "#000000"}
    )

    assert updated.completion_count == 0
    assert updated.streak == 0
    assert updated.owner_id == user.pk
    assert updated.color == "#000000"


def test_update_habit__does_not_overwrite_counters_moved_meanwhile(user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym"})
    habit_store.adjust_counters(user.pk, habit.pk, 3, 2)

    habit_store.update_habit(user.pk, habit.pk, {"name": "Weights"})

    assert habit_store.get_counters(user.pk, habit.pk) == HabitCounters(completion_count=3, streak=2)


def test_update_habit__tags_replaced(user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym", "tags": ["health", "morning"]})

    updated = habit_store.update_habit(user.pk, habit.pk, {"tags": ["evening", "health"]})

    assert updated.tag_names() == ["evening", "health"]


def test_update_habit__other_owner__returns_none(user, other_user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym"})

    assert habit_store.update_habit(other_user.pk, habit.pk, {"name": "Mine now"}) is None
    habit.refresh_from_db()
    assert habit.name == "Gym"


def test_delete_habit__returns_deleted_habit(user, other_user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym"})

    assert habit_store.delete_habit(other_user.pk, habit.pk) is None
    deleted = habit_store.delete_habit(user.pk, habit.pk)

    assert deleted.pk == habit.pk
    assert not Habit.objects.filter(pk=habit.pk).exists()
    assert habit_store.delete_habit(user.pk, habit.pk) is None


def test_list_habits__scoped_by_owner_and_tag(user, other_user):
    gym = habit_store.create_habit(user.pk, {"name": "Gym", "tags": ["health"]})
    read = habit_store.create_habit(user.pk, {"name": "Read", "tags": ["mind"]})
    habit_store.create_habit(other_user.pk, {"name": "Swim", "tags": ["health"]})

    assert [h.pk for h in habit_store.list_habits(user.pk)] == [gym.pk, read.pk]
    assert [h.pk for h in habit_store.list_habits(user.pk, "health")] == [gym.pk]
    assert list(habit_store.list_habits(user.pk, "nope")) == []


def test_adjust_counters__clamps_at_zero(user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym"})

    assert habit_store.adjust_counters(user.pk, habit.pk, -1, -1) == HabitCounters(0, 0)
    assert habit_store.adjust_counters(user.pk, habit.pk, 2, 1) == HabitCounters(2, 1)
    assert habit_store.adjust_counters(user.pk, habit.pk, -5, 0) == HabitCounters(0, 1)


def test_adjust_counters__missing_or_foreign_habit__returns_none(user, other_user):
    habit = habit_store.create_habit(user.pk, {"name": "Gym"})

    assert habit_store.adjust_counters(other_user.pk, habit.pk, 1, 1) is None
    assert habit_store.adjust_counters(user.pk, habit.pk + 1000, 1, 1) is None
    assert habit_store.get_counters(user.pk, habit.pk) == HabitCounters(0, 0)
