from django.contrib import admin

from .models import Hearing, HearingResponse, WitnessStatement


class HearingResponseInline(admin.TabularInline):
    model = HearingResponse
    extra = 0
    readonly_fields = ("witness", "witness_name", "agreement", "comment", "updated_at")


@admin.register(Hearing)
class HearingAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "entry", "status", "created_by_name", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "question")
    filter_horizontal = ("witnesses",)
    inlines = [HearingResponseInline]


@admin.register(WitnessStatement)
class WitnessStatementAdmin(admin.ModelAdmin):
    list_display = ("id", "incident", "witness_name", "statement_status", "submitted_at", "judge_name")
    list_filter = ("statement_status",)
    search_fields = ("witness_name", "statement")
