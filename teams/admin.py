from django.contrib import admin
from .models import Team, TeamMember, JoinRequest, Submission, Score, TeamNote


class TeamMemberInline(admin.TabularInline):
    model = TeamMember
    extra = 0


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ('name', 'hackathon', 'leader', 'submission_status', 'checked_in', 'is_eliminated', 'created_at')
    list_filter = ('submission_status', 'checked_in', 'is_eliminated', 'payment_status')
    search_fields = ('name', 'project_title', 'leader__username', 'hackathon__title')
    inlines = [TeamMemberInline]

@admin.register(JoinRequest)
class JoinRequestAdmin(admin.ModelAdmin):
    list_display = ('user', 'team', 'kind', 'status', 'created_at')
    list_filter = ('kind', 'status')
    search_fields = ('user__username', 'team__name')

@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ('team', 'round', 'submitted_by', 'submitted_at')
    search_fields = ('team__name', 'round__name')

@admin.register(Score)
class ScoreAdmin(admin.ModelAdmin):
    list_display = ('team', 'round', 'judge', 'total', 'scored_at')
    search_fields = ('team__name', 'judge__username')

@admin.register(TeamNote)
class TeamNoteAdmin(admin.ModelAdmin):
    list_display = ('team', 'author', 'created_at')
    search_fields = ('team__name', 'body')
