from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import Position, User


# =========================
# POSITION
# =========================

class PositionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Position
        fields = ("id", "name", "level")


# =========================
# USER SERIALIZER (READ)
# =========================

class UserSerializer(serializers.ModelSerializer):
    position = PositionSerializer(read_only=True)
    position_level = serializers.IntegerField(read_only=True)
    full_name = serializers.CharField(read_only=True)
    manager_id = serializers.IntegerField(read_only=True)
    director_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "position",
            "position_level",
            "manager_id",
            "director_id",
            "is_superuser",
        )


# =========================
# LOGIN / PASSWORD
# =========================

class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(help_text="Username or email address.")
    password = serializers.CharField(trim_whitespace=False)


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True, trim_whitespace=False)
    new_password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_current_password(self, value):
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate(self, attrs):
        user = self.context["request"].user
        try:
            validate_password(attrs["new_password"], user)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"new_password": list(exc.messages)})
        return attrs


# =========================
# SALESPERSONS
# =========================

class SalespersonSerializer(serializers.ModelSerializer):
    """
    Director-facing salesperson record.

    ``email`` is declared explicitly so duplicate addresses reach the view,
    which answers them with a 409 instead of a field error.
    """

    email = serializers.EmailField(max_length=254)
    username = serializers.CharField(max_length=150, required=False)
    password = serializers.CharField(write_only=True, required=False, trim_whitespace=False)
    full_name = serializers.CharField(read_only=True)
    position = PositionSerializer(read_only=True)
    position_id = serializers.PrimaryKeyRelatedField(
        source="position",
        queryset=Position.objects.all(),
        write_only=True,
    )
    manager_id = serializers.PrimaryKeyRelatedField(
        source="manager",
        queryset=User.objects.all(),
        required=False,
        allow_null=True,
    )
    director_id = serializers.PrimaryKeyRelatedField(
        source="director",
        queryset=User.objects.all(),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "email",
            "password",
            "first_name",
            "last_name",
            "full_name",
            "position",
            "position_id",
            "manager_id",
            "director_id",
            "is_active",
            "is_blocked",
            "date_joined",
        )
        read_only_fields = ("date_joined",)

    def validate_email(self, value):
        return value.strip().lower()

    def validate_manager_id(self, manager):
        if manager is not None and manager.position_level != Position.Level.MANAGER:
            raise serializers.ValidationError("The manager must hold a manager (課長) position.")
        return manager

    def validate_director_id(self, director):
        if director is not None and director.position_level != Position.Level.DIRECTOR:
            raise serializers.ValidationError("The director must hold a director (部長) position.")
        return director

    def validate(self, attrs):
        instance = self.instance
        if instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})

        if instance is None and not attrs.get("username"):
            attrs["username"] = attrs["email"]

        username = attrs.get("username")
        if username:
            clash = User.objects.filter(username=username)
            if instance is not None:
                clash = clash.exclude(pk=instance.pk)
            if clash.exists():
                raise serializers.ValidationError({"username": "A user with that username already exists."})

        if instance is not None:
            for field in ("manager", "director"):
                related = attrs.get(field)
                if related is not None and related.pk == instance.pk:
                    raise serializers.ValidationError({f"{field}_id": "A salesperson cannot report to themselves."})

        password = attrs.get("password")
        if password:
            try:
                validate_password(password)
            except DjangoValidationError as exc:
                raise serializers.ValidationError({"password": list(exc.messages)})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
