from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _

from .models import CustomUser, SupplierProfile


class SupplierProfileInline(admin.StackedInline):
    model = SupplierProfile
    can_delete = False
    extra = 0
    readonly_fields = ('created_at', 'updated_at')


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ('email', 'name', 'role', 'company', 'is_active', 'is_staff', 'date_joined', 'last_login')
    list_filter = ('role', 'is_active', 'is_staff', 'date_joined', 'last_login')
    search_fields = ('email', 'name', 'supplier_profile__company_name')
    ordering = ('date_joined',)
    readonly_fields = ('date_joined', 'last_login')
    inlines = [SupplierProfileInline]

    fieldsets = (
        (None, {'fields': ('email', 'password', 'name')}),
        (_('Organisation'), {'fields': ('role', 'company')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('wide',)
        }),
        (_('Important dates'), {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'password1', 'password2', 'role', 'company', 'is_active', 'is_staff'),
        }),
    )


@admin.register(SupplierProfile)
class SupplierProfileAdmin(admin.ModelAdmin):
    list_display = ('company_name', 'contact_person', 'get_email', 'industry', 'get_overall_score', 'updated_at')
    list_filter = ('industry',)
    search_fields = ('company_name', 'contact_person', 'user__email')
    readonly_fields = ('created_at', 'updated_at')

    def get_email(self, obj):
        return obj.user.email
    get_email.short_description = 'Email'

    def get_overall_score(self, obj):
        return (obj.esg_scores or {}).get('overall', 0)
    get_overall_score.short_description = 'Overall ESG Score'
