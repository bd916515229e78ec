from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, IssuedToken


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['username', 'email']
    ordering = ['username']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Role', {'fields': ('role', 'phone')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Role', {'fields': ('email', 'role', 'phone')}),
    )


@admin.register(IssuedToken)
class IssuedTokenAdmin(admin.ModelAdmin):
    list_display = ['user', 'jti', 'revoked', 'expires_at', 'ip_address', 'created_at']
    list_filter = ['revoked', 'created_at']
    search_fields = ['user__username', 'jti']
    ordering = ['-created_at']
    readonly_fields = ['user', 'jti', 'token', 'token_type', 'expires_at', 'user_agent', 'ip_address', 'created_at']
