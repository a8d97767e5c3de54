from django.contrib import admin

from .models import Habit, HabitCompletion, HabitTag


class HabitTagInline(admin.TabularInline):
    model = HabitTag
    extra = 0


@admin.register(Habit)
class HabitAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "completion_count", "streak", "updated_at")
    readonly_fields = ("completion_count", "streak", "created_at", "updated_at")
    inlines = [HabitTagInline]


@admin.register(HabitCompletion)
class HabitCompletionAdmin(admin.ModelAdmin):
    list_display = ("habit_id", "owner", "day", "created_at")
    list_filter = ("day",)
