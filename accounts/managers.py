from django.apps import apps
from django.contrib.auth.models import UserManager as DjangoUserManager


class UserManager(DjangoUserManager):

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        Position = apps.get_model("accounts", "Position")
        director_position = Position.objects.filter(level=Position.Level.DIRECTOR).first()
        if director_position is None:
            director_position = Position.objects.create(
                name=Position.Level.DIRECTOR.label,
                level=Position.Level.DIRECTOR,
            )
        extra_fields.setdefault("position", director_position)

        return super().create_superuser(username, email, password, **extra_fields)

    def active(self):
        return self.filter(is_active=True)
