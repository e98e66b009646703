from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'full_name',
            'organization',
            'date_joined',
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user reference embedded in team/hackathon payloads."""

    class Meta:
        model = User
        fields = ['id', 'username', 'full_name', 'email']
        read_only_fields = fields


class UserSearchQuerySerializer(serializers.Serializer):
    query = serializers.CharField(required=False, allow_blank=True, default="")
    hackathon_id = serializers.IntegerField(required=False, allow_null=True)
