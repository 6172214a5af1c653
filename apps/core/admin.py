from django.contrib import admin

from apps.core.models import Business, BusinessUser, Role, RoleAssignment


class BusinessUserInline(admin.TabularInline):
    model = BusinessUser
    extra = 0


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "owner", "created_at")
    search_fields = ("name", "owner__username")
    inlines = [BusinessUserInline]


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "business")
    list_filter = ("name",)


@admin.register(RoleAssignment)
class RoleAssignmentAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "role", "created_at")
    list_select_related = ("user", "role")
