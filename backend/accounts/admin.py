from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Actor, RoleImage


@admin.register(RoleImage)
class RoleImageAdmin(admin.ModelAdmin):
    list_display = ("role", "image_url", "uploaded_by", "updated_at")
    search_fields = ("role",)


@admin.register(Actor)
class ActorAdmin(BaseUserAdmin):
    list_display = ("username", "email", "real_name", "role",
                    "is_master_actor", "is_active")
    search_fields = ("username", "email", "real_name")
    list_filter = ("is_active", "is_master_actor", "role")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Bureau", {"fields": ("real_name", "role", "is_master_actor")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Bureau", {"fields": ("email", "real_name", "role", "is_master_actor")}),
    )
