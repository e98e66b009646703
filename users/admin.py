from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class HackhubUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'full_name', 'organization', 'is_staff')
    search_fields = ('username', 'email', 'full_name')
    fieldsets = UserAdmin.fieldsets + (
        ('Profile', {'fields': ('full_name', 'organization')}),
    )
