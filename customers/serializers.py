import re

from rest_framework import serializers

from .models import Customer


PHONE_RE = re.compile(r"^[0-9+\-() ]*$")


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = (
            "id",
            "name",
            "address",
            "phone",
            "industry",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("created_at", "updated_at")

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Customer name is required.")
        return value

    def validate_phone(self, value):
        if value and not PHONE_RE.match(value):
            raise serializers.ValidationError("Phone may contain digits, spaces, +, - and parentheses only.")
        return value


class CustomerShortSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ("id", "name")
