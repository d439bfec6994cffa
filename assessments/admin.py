from django.contrib import admin

from .models import ESGRecord


@admin.register(ESGRecord)
class ESGRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'company', 'status', 'get_total_score', 'version', 'last_updated')
    list_filter = ('status', 'last_updated')
    search_fields = ('user__email', 'company__email', 'company_info__companyName')
    readonly_fields = ('overall_score', 'version', 'last_updated', 'created_at', 'status_changed_at')
    raw_id_fields = ('user', 'company', 'reviewed_by')

    fieldsets = (
        (None, {'fields': ('user', 'company', 'status', 'review_comments', 'reviewed_by', 'status_changed_at')}),
        ('Category data', {'fields': ('company_info', 'environment', 'social', 'quality', 'governance')}),
        ('Scores', {'fields': ('overall_score',)}),
        ('Bookkeeping', {'fields': ('version', 'last_updated', 'created_at')}),
    )

    def get_total_score(self, obj):
        return (obj.overall_score or {}).get('total', 0)
    get_total_score.short_description = 'Total Score'
