from django.contrib import admin

from .models import TestSeries, DiscountCode, Offer


class DiscountCodeInline(admin.TabularInline):
    model = DiscountCode
    extra = 0


@admin.register(TestSeries)
class TestSeriesAdmin(admin.ModelAdmin):
    list_display = ('title', 'kind', 'series_count', 'is_active')
    list_filter = ('kind', 'is_active')
    inlines = [DiscountCodeInline]


admin.site.register(Offer)
