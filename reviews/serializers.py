"""Request validation for the review API."""

from rest_framework import serializers

from reviews.entities import TeamMember


class TeamMemberSerializer(serializers.Serializer):
    user_id = serializers.CharField(max_length=255)
    username = serializers.CharField(max_length=255)
    is_active = serializers.BooleanField(default=True)


class TeamSerializer(serializers.Serializer):
    team_name = serializers.CharField(max_length=255)
    members = TeamMemberSerializer(many=True)

    def validate_members(self, value):
        ids = [m["user_id"] for m in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("member user_id values must be unique")
        return value

    def to_members(self) -> list[TeamMember]:
        return [TeamMember(**m) for m in self.validated_data["members"]]


class SetIsActiveSerializer(serializers.Serializer):
    user_id = serializers.CharField(max_length=255)
    is_active = serializers.BooleanField()


class PullRequestCreateSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(max_length=255)
    pull_request_name = serializers.CharField(max_length=255)
    author_id = serializers.CharField(max_length=255)


class PullRequestMergeSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(max_length=255)


class PullRequestReassignSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(max_length=255)
    old_reviewer_id = serializers.CharField(max_length=255)
    new_reviewer_id = serializers.CharField(max_length=255)
