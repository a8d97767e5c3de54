import graphene
from django.contrib.auth import get_user_model
from graphene_django import DjangoObjectType
from graphql import GraphQLError

from habits.exceptions import HabitNotFound
from habits.services import habit_service

NAME_MAX_LENGTH = 100


class HabitType(graphene.ObjectType):
    id = graphene.ID(required=True)
    name = graphene.String(required=True)
    icon = graphene.String()
    color = graphene.String()
    tags = graphene.List(graphene.NonNull(graphene.String), required=True)
    completion_count = graphene.Int(required=True)
    streak = graphene.Int(required=True)
    completed_today = graphene.Boolean(required=True)
    created_at = graphene.DateTime()
    updated_at = graphene.DateTime()


class CompletionStatusType(graphene.ObjectType):
    completion_count = graphene.Int(required=True)
    streak = graphene.Int(required=True)
    completed_today = graphene.Boolean(required=True)


class TagUsageType(graphene.ObjectType):
    tag = graphene.String(required=True)
    count = graphene.Int(required=True)


class UserType(DjangoObjectType):
    class Meta:
        model = get_user_model()
        fields = ("id", "username", "email")


def _require_user(info):
    user = info.context.user
    if user.is_anonymous:
        raise GraphQLError("Authentication required")
    return user


def _habit_fields(name=None, icon=None, color=None, tags=None) -> dict:
    fields = {}
    if name is not None:
        name = name.strip()
        if not name:
            raise GraphQLError("Habit name cannot be empty")
        if len(name) > NAME_MAX_LENGTH:
            raise GraphQLError(f"Habit name cannot exceed {NAME_MAX_LENGTH} characters")
        fields["name"] = name
    if icon is not None:
        fields["icon"] = icon
    if color is not None:
        fields["color"] = color
    if tags is not None:
        fields["tags"] = tags
    return fields


class Query(graphene.ObjectType):
    me = graphene.Field(UserType)
    habits = graphene.List(graphene.NonNull(HabitType), tag=graphene.String(required=False))
    habit = graphene.Field(HabitType, id=graphene.ID(required=True))
    habit_tags = graphene.List(graphene.NonNull(TagUsageType))

    def resolve_me(self, info):
        user = info.context.user
        return None if user.is_anonymous else user

    def resolve_habits(self, info, tag=None):
        user = info.context.user
        if user.is_anonymous:
            return []
        return habit_service.list_with_today_status(user.pk, tag)

    def resolve_habit(self, info, id):
        user = _require_user(info)
        view = habit_service.get_with_today_status(user.pk, id)
        if view is None:
            raise GraphQLError(str(HabitNotFound(id)))
        return view

    def resolve_habit_tags(self, info):
        user = _require_user(info)
        return habit_service.tag_usage(user.pk)


class CreateHabit(graphene.Mutation):
    class Arguments:
        name = graphene.String(required=True)
        icon = graphene.String(required=False)
        color = graphene.String(required=False)
        tags = graphene.List(graphene.NonNull(graphene.String), required=False)

    habit = graphene.Field(HabitType)

    def mutate(self, info, name, icon=None, color=None, tags=None):
        user = _require_user(info)
        fields = _habit_fields(name=name, icon=icon, color=color, tags=tags)
        return CreateHabit(habit=habit_service.create_habit(user.pk, fields))


class UpdateHabit(graphene.Mutation):
    class Arguments:
        id = graphene.ID(required=True)
        name = graphene.String(required=False)
        icon = graphene.String(required=False)
        color = graphene.String(required=False)
        tags = graphene.List(graphene.NonNull(graphene.String), required=False)

    habit = graphene.Field(HabitType)

    def mutate(self, info, id, name=None, icon=None, color=None, tags=None):
        user = _require_user(info)
        fields = _habit_fields(name=name, icon=icon, color=color, tags=tags)
        try:
            view = habit_service.update_habit(user.pk, id, fields)
        except HabitNotFound as e:
            raise GraphQLError(str(e))
        return UpdateHabit(habit=view)


class DeleteHabit(graphene.Mutation):
    class Arguments:
        id = graphene.ID(required=True)

    ok = graphene.Boolean(required=True)
    deleted_id = graphene.ID(required=True)

    def mutate(self, info, id):
        user = _require_user(info)
        try:
            deleted_id = habit_service.delete_habit(user.pk, id)
        except HabitNotFound as e:
            raise GraphQLError(str(e))
        return DeleteHabit(ok=True, deleted_id=deleted_id)


class CompleteHabit(graphene.Mutation):
    class Arguments:
        habit_id = graphene.ID(required=True)
        date = graphene.DateTime(required=False)

    status = graphene.Field(CompletionStatusType)

    @classmethod
    def mutate(cls, root, info, habit_id, date=None):
        user = _require_user(info)
        try:
            status = habit_service.complete(user.pk, habit_id, date)
        except HabitNotFound as e:
            raise GraphQLError(str(e))
        return cls(status=status)


class UncompleteHabit(graphene.Mutation):
    class Arguments:
        habit_id = graphene.ID(required=True)
        date = graphene.DateTime(required=False)

    status = graphene.Field(CompletionStatusType)

    @classmethod
    def mutate(cls, root, info, habit_id, date=None):
        user = _require_user(info)
        try:
            status = habit_service.uncomplete(user.pk, habit_id, date)
        except HabitNotFound as e:
            raise GraphQLError(str(e))
        return cls(status=status)


class Mutation(graphene.ObjectType):
    create_habit = CreateHabit.Field()
    update_habit = UpdateHabit.Field()
    delete_habit = DeleteHabit.Field()
    complete_habit = CompleteHabit.Field()
    uncomplete_habit = UncompleteHabit.Field()
