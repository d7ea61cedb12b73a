from django.contrib import admin

from .models import Paper


@admin.register(Paper)
class PaperAdmin(admin.ModelAdmin):
    list_display = ('test_series', 'subject', 'series', 'paper_number', 'paper_type', 'status')
    list_filter = ('test_series', 'paper_type', 'status', 'subject')
