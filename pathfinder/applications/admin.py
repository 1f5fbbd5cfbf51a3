from django.contrib import admin

from .models import Application


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ("full_name", "email", "job", "status", "applied_at")
    list_editable = ("status",)
    list_filter = ("status",)
    search_fields = ("full_name", "email", "job__title")
    readonly_fields = ("cv_file", "motivation_file", "applied_at")
