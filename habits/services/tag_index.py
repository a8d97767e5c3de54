from dataclasses import dataclass

from django.db.models import Count

from habits.models import HabitTag


@dataclass(frozen=True)
class TagUsage:
    tag: str
    count: int


def tag_usage(owner_id) -> list[TagUsage]:
    """How many of the owner's habits carry each tag, most used first."""
    rows = (
        HabitTag.objects.filter(habit__owner_id=owner_id)
        .order_by()
        .values("name")
        .annotate(n=Count("habit", distinct=True))
        .order_by("-n", "name")
    )
    return [TagUsage(tag=row["name"], count=row["n"]) for row in rows]
