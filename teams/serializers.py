# teams/serializers.py

from rest_framework import serializers

from hackathons.serializers import HackathonSummarySerializer
from users.serializers import UserSummarySerializer
from .models import Team, TeamMember, JoinRequest, Submission, Score, TeamNote


class TeamMemberSerializer(serializers.ModelSerializer):
    """Serializer for team members"""
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = TeamMember
        fields = ['id', 'user', 'role', 'status', 'checked_in', 'checked_in_at', 'joined_at']
        read_only_fields = fields


class TeamSerializer(serializers.ModelSerializer):
    hackathon = HackathonSummarySerializer(read_only=True)
    leader = UserSummarySerializer(read_only=True)
    members = serializers.SerializerMethodField()
    active_member_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Team
        fields = [
            'id', 'hackathon', 'name', 'leader', 'members', 'active_member_count',
            'project_title', 'project_description', 'tech_stack', 'looking_for_members',
            'submission_status', 'rejection_reason', 'submitted_at', 'reviewed_at',
            'table_number', 'team_number', 'checked_in', 'checked_in_at',
            'is_eliminated', 'elimination_reason', 'eliminated_at',
            'payment_status', 'payment_amount', 'payment_currency',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_members(self, obj):
        # Removed members stay in the table for history; only active ones are shown
        members = [m for m in obj.members.all() if m.status == TeamMember.STATUS_ACTIVE]
        return TeamMemberSerializer(members, many=True).data


class TeamRegisterSerializer(serializers.Serializer):
    hackathon_id = serializers.IntegerField()
    name = serializers.CharField(max_length=100)
    project_title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    project_description = serializers.CharField(required=False, allow_blank=True)
    tech_stack = serializers.ListField(child=serializers.CharField(), required=False)
    looking_for_members = serializers.BooleanField(required=False, default=False)


class TeamUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    project_title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    project_description = serializers.CharField(required=False, allow_blank=True)
    tech_stack = serializers.ListField(child=serializers.CharField(), required=False)
    looking_for_members = serializers.BooleanField(required=False)


class JoinRequestSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    initiated_by = UserSummarySerializer(read_only=True)
    team_id = serializers.IntegerField(source='team.id', read_only=True)
    team_name = serializers.CharField(source='team.name', read_only=True)

    class Meta:
        model = JoinRequest
        fields = [
            'id', 'team_id', 'team_name', 'user', 'kind', 'initiated_by', 'status',
            'message', 'response_reason', 'created_at', 'responded_at',
        ]
        read_only_fields = fields


class SubmissionSerializer(serializers.ModelSerializer):
    team_id = serializers.IntegerField(source='team.id', read_only=True)
    team_name = serializers.CharField(source='team.name', read_only=True)
    round_id = serializers.IntegerField(source='round.id', read_only=True)
    round_name = serializers.CharField(source='round.name', read_only=True)
    submitted_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Submission
        fields = [
            'id', 'team_id', 'team_name', 'round_id', 'round_name',
            'project_link', 'github_link', 'demo_link', 'video_link', 'presentation_link',
            'description', 'tech_stack', 'submitted_by', 'submitted_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'team_id', 'team_name', 'round_id', 'round_name',
            'submitted_by', 'submitted_at', 'updated_at',
        ]


class SubmitProjectSerializer(serializers.Serializer):
    round_id = serializers.IntegerField()
    project_link = serializers.URLField(max_length=500, required=False, allow_blank=True)
    github_link = serializers.URLField(max_length=500, required=False, allow_blank=True)
    demo_link = serializers.URLField(max_length=500, required=False, allow_blank=True)
    video_link = serializers.URLField(max_length=500, required=False, allow_blank=True)
    presentation_link = serializers.URLField(max_length=500, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    tech_stack = serializers.ListField(child=serializers.CharField(), required=False)


class ScoreSerializer(serializers.ModelSerializer):
    judge = UserSummarySerializer(read_only=True)

    class Meta:
        model = Score
        fields = ['id', 'team', 'round', 'judge', 'criteria_scores', 'total', 'remarks', 'feedback', 'scored_at']
        read_only_fields = fields


class ScoreTeamSerializer(serializers.Serializer):
    round_id = serializers.IntegerField()
    criteria_scores = serializers.JSONField()
    remarks = serializers.CharField(required=False, allow_blank=True, default="")
    feedback = serializers.CharField(required=False, allow_blank=True, default="")


class TeamNoteSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)

    class Meta:
        model = TeamNote
        fields = ['id', 'author', 'body', 'created_at']
        read_only_fields = ['id', 'author', 'created_at']


class BulkTeamsSerializer(serializers.Serializer):
    team_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    reason = serializers.CharField(required=False, allow_blank=True)


class TransferLeadershipSerializer(serializers.Serializer):
    new_leader_id = serializers.IntegerField()


class InviteMemberSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(required=False, allow_null=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    message = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if not attrs.get("user_id") and not attrs.get("email"):
            raise serializers.ValidationError("user_id or email is required")
        return attrs


class RoundFilterSerializer(serializers.Serializer):
    """Query string filter: ?round_id=<int>"""
    round_id = serializers.IntegerField(required=False, allow_null=True)
