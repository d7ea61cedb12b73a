from django.contrib import admin

from .models import Enrollment


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ('user', 'test_series', 'amount', 'provider', 'created_at')
    list_filter = ('provider', 'test_series')
    search_fields = ('user__email', 'reference')

    def has_change_permission(self, request, obj=None):
        return False
