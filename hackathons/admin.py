from django.contrib import admin
from .models import Hackathon, Round, Coordinator, Judge


class RoundInline(admin.TabularInline):
    model = Round
    extra = 0


@admin.register(Hackathon)
class HackathonAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'mode', 'organizer', 'hackathon_start_date', 'auto_accept_teams')
    list_filter = ('status', 'mode', 'auto_accept_teams')
    search_fields = ('title', 'description', 'organizer__username')
    date_hierarchy = 'hackathon_start_date'
    inlines = [RoundInline]

@admin.register(Coordinator)
class CoordinatorAdmin(admin.ModelAdmin):
    list_display = ('user', 'hackathon', 'status', 'can_view_teams', 'can_eliminate_teams', 'invited_at')
    list_filter = ('status',)
    search_fields = ('user__username', 'user__email', 'hackathon__title')
    exclude = ('invitation_token',)

@admin.register(Judge)
class JudgeAdmin(admin.ModelAdmin):
    list_display = ('user', 'hackathon', 'status', 'invited_at', 'accepted_at')
    list_filter = ('status',)
    search_fields = ('user__username', 'user__email', 'hackathon__title')
    exclude = ('invitation_token',)
