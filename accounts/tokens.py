from rest_framework.exceptions import PermissionDenied
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .access_policy import AccessPolicy


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Token pair whose claims carry what the client needs to route by position."""

    def validate(self, attrs):
        data = super().validate(attrs)
        if self.user.is_blocked:
            raise PermissionDenied("User blocked")
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["name"] = user.full_name
        token["position_level"] = user.position_level
        token["can_approve"] = AccessPolicy.can_approve(user)
        return token
