from django.db import transaction
from rest_framework import serializers

from core.exceptions import ValidationError
from users.serializers import UserSummarySerializer
from .models import Hackathon, Round, Coordinator, Judge, date_order_errors, team_size_errors
from .permissions import permissions_dict


class RoundSerializer(serializers.ModelSerializer):
    # Writable so nested updates can match existing rounds
    id = serializers.IntegerField(required=False)

    class Meta:
        model = Round
        fields = [
            "id", "name", "type", "mode", "description",
            "start_time", "end_time", "max_score", "judging_criteria", "order",
        ]

    def validate_judging_criteria(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("judging_criteria must be a list")

        cleaned, seen = [], set()
        for item in value:
            if not isinstance(item, dict) or not str(item.get("name", "")).strip():
                raise serializers.ValidationError("Each criterion needs a name")
            name = str(item["name"]).strip()
            if name in seen:
                raise serializers.ValidationError(f"Duplicate criterion: {name}")
            seen.add(name)
            try:
                max_points = int(item.get("max_points", 0))
            except (TypeError, ValueError):
                raise serializers.ValidationError(f"max_points for {name} must be a number")
            if max_points < 0:
                raise serializers.ValidationError(f"max_points for {name} cannot be negative")
            cleaned.append({
                "name": name,
                "max_points": max_points,
                "description": str(item.get("description") or ""),
            })
        return cleaned

    def validate(self, attrs):
        start, end = attrs.get("start_time"), attrs.get("end_time")
        if start and end and start >= end:
            raise serializers.ValidationError("Round start must be before round end")
        return attrs


class HackathonSerializer(serializers.ModelSerializer):
    organizer = UserSummarySerializer(read_only=True)
    rounds = RoundSerializer(many=True, required=False)
    requires_payment = serializers.BooleanField(read_only=True)

    class Meta:
        model = Hackathon
        fields = [
            "id", "organizer", "title", "description", "mode", "venue", "tags", "status",
            "registration_start_date", "registration_end_date",
            "hackathon_start_date", "hackathon_end_date",
            "min_members", "max_members", "allow_solo_participation", "max_teams",
            "registration_fee_amount", "registration_fee_currency", "requires_payment",
            "judging_criteria",
            "auto_accept_teams", "enable_check_in", "allow_late_registration", "enable_leaderboard",
            "rounds", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "organizer", "created_at", "updated_at"]

    def _current(self, attrs, name):
        if name in attrs:
            return attrs[name]
        if self.instance is not None:
            return getattr(self.instance, name)
        return self.fields[name].default if hasattr(self.fields[name], "default") else None

    def validate(self, attrs):
        errors = date_order_errors(
            self._current(attrs, "registration_start_date"),
            self._current(attrs, "registration_end_date"),
            self._current(attrs, "hackathon_start_date"),
            self._current(attrs, "hackathon_end_date"),
        )
        min_members = attrs.get("min_members", getattr(self.instance, "min_members", 1))
        max_members = attrs.get("max_members", getattr(self.instance, "max_members", 4))
        allow_solo = attrs.get(
            "allow_solo_participation",
            getattr(self.instance, "allow_solo_participation", False),
        )
        errors += team_size_errors(min_members, max_members, allow_solo)
        if errors:
            raise serializers.ValidationError({"non_field_errors": errors})

        tags = attrs.get("tags")
        if tags is not None and not isinstance(tags, list):
            raise serializers.ValidationError({"tags": "tags must be a list"})
        return attrs

    @staticmethod
    def _write_rounds(hackathon, rounds_data):
        for index, data in enumerate(rounds_data):
            data.pop("id", None)
            data.setdefault("order", index)
            Round.objects.create(hackathon=hackathon, **data)

    @staticmethod
    def _sync_rounds(hackathon, rounds_data):
        """
        Update rounds whose id is sent, create rounds without one and delete
        the rest. A round that already has submissions or scores is kept.
        """
        existing = {r.id: r for r in hackathon.rounds.all()}
        sent_ids = [data["id"] for data in rounds_data if data.get("id") is not None]

        unknown = sorted(set(sent_ids) - set(existing))
        if unknown:
            raise ValidationError(f"Unknown round id(s) for this hackathon: {unknown}")

        dropped = [r for rid, r in existing.items() if rid not in sent_ids]
        for round_obj in dropped:
            if round_obj.submissions.exists() or round_obj.scores.exists():
                raise ValidationError(
                    f"Round '{round_obj.name}' has submissions or scores and cannot be removed"
                )

        Round.objects.filter(pk__in=[r.pk for r in dropped]).delete()
        for index, data in enumerate(rounds_data):
            data.setdefault("order", index)
            round_id = data.pop("id", None)
            if round_id is None:
                Round.objects.create(hackathon=hackathon, **data)
                continue
            round_obj = existing[round_id]
            for field, value in data.items():
                setattr(round_obj, field, value)
            round_obj.save()

    def create(self, validated_data):
        rounds_data = validated_data.pop("rounds", [])
        with transaction.atomic():
            hackathon = super().create(validated_data)
            self._write_rounds(hackathon, rounds_data)
        return hackathon

    def update(self, instance, validated_data):
        rounds_data = validated_data.pop("rounds", None)
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if rounds_data is not None:
                self._sync_rounds(instance, rounds_data)
        return instance


class HackathonSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Hackathon
        fields = [
            "id", "title", "mode", "status",
            "hackathon_start_date", "hackathon_end_date",
            "min_members", "max_members",
        ]
        read_only_fields = fields


class CoordinatorSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    invited_by = UserSummarySerializer(read_only=True)
    hackathon = HackathonSummarySerializer(read_only=True)
    permissions = serializers.SerializerMethodField()

    class Meta:
        model = Coordinator
        fields = ["id", "hackathon", "user", "permissions", "status", "invited_by", "invited_at", "accepted_at"]
        read_only_fields = fields

    def get_permissions(self, obj):
        return permissions_dict(obj)


class JudgeSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    hackathon = HackathonSummarySerializer(read_only=True)

    class Meta:
        model = Judge
        fields = ["id", "hackathon", "user", "status", "invited_at", "accepted_at"]
        read_only_fields = fields


class CoordinatorInviteSerializer(serializers.Serializer):
    email = serializers.EmailField()
    permissions = serializers.JSONField(required=False)


class JudgeInviteSerializer(serializers.Serializer):
    email = serializers.EmailField()


class AnnouncementSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
