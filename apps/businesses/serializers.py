"""
Serializers for business endpoints.
"""
from rest_framework import serializers

from apps.core.models import Business


class BusinessSerializer(serializers.ModelSerializer):
    ownerId = serializers.IntegerField(source='owner_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Business
        fields = ['id', 'name', 'ownerId', 'createdAt', 'updatedAt']


class BusinessInputSerializer(serializers.Serializer):
    """Validates the create/update payload: { name }."""
    name = serializers.CharField(max_length=255, allow_blank=False, trim_whitespace=True)


class MemberInviteSerializer(serializers.Serializer):
    """Payload for inviting an existing user: { userId, role? }."""
    userId = serializers.IntegerField(min_value=1)
    role = serializers.CharField(max_length=125, required=False)


class RoleAssignmentSerializer(serializers.Serializer):
    """Payload for changing a member's role: { role }."""
    role = serializers.CharField(max_length=125)
