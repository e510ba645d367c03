from django.core.management.base import BaseCommand
from django.db import transaction

from accounts.models import Position, User
from customers.models import Customer


POSITIONS = (
    ("担当", Position.Level.STAFF),
    ("課長", Position.Level.MANAGER),
    ("部長", Position.Level.DIRECTOR),
)

CUSTOMERS = (
    ("株式会社ABC", "東京都千代田区丸の内1-1-1", "03-1234-5678", "製造業"),
    ("株式会社XYZ", "東京都港区六本木2-2-2", "03-2345-6789", "IT・通信"),
    ("DEF株式会社", "大阪府大阪市北区梅田3-3-3", "06-3456-7890", "小売・流通"),
    ("GHI商事", "愛知県名古屋市中区栄4-4-4", "052-4567-8901", "金融・保険"),
)


class Command(BaseCommand):
    help = "Creates the position master, a demo sales hierarchy and sample customers."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="password123", help="Password for every demo account.")

    def _upsert_user(self, *, email, last_name, first_name, position, password, manager=None, director=None):
        user, _ = User.objects.update_or_create(
            email=email,
            defaults={
                "username": email.split("@", 1)[0],
                "last_name": last_name,
                "first_name": first_name,
                "position": position,
                "manager": manager,
                "director": director,
                "is_active": True,
            },
        )
        user.set_password(password)
        user.save(update_fields=["password"])
        return user

    @transaction.atomic
    def handle(self, *args, **options):
        password = options["password"]

        positions = {}
        for name, level in POSITIONS:
            position, _ = Position.objects.get_or_create(level=level, defaults={"name": name})
            positions[level] = position
        self.stdout.write(f"Positions: {', '.join(p.name for p in positions.values())}")

        director = self._upsert_user(
            email="director@example.com",
            last_name="田中",
            first_name="部長",
            position=positions[Position.Level.DIRECTOR],
            password=password,
        )
        manager = self._upsert_user(
            email="manager@example.com",
            last_name="鈴木",
            first_name="課長",
            position=positions[Position.Level.MANAGER],
            password=password,
            director=director,
        )
        staff = [
            self._upsert_user(
                email=email,
                last_name=last_name,
                first_name=first_name,
                position=positions[Position.Level.STAFF],
                password=password,
                manager=manager,
                director=director,
            )
            for email, last_name, first_name in (
                ("yamada@example.com", "山田", "太郎"),
                ("sato@example.com", "佐藤", "花子"),
            )
        ]
        self.stdout.write(f"Salespersons: {', '.join(u.full_name for u in [director, manager, *staff])}")

        for name, address, phone, industry in CUSTOMERS:
            Customer.objects.update_or_create(
                name=name,
                defaults={"address": address, "phone": phone, "industry": industry, "is_active": True},
            )
        self.stdout.write(f"Customers: {len(CUSTOMERS)}")

        self.stdout.write(self.style.SUCCESS("Demo data prepared."))
        self.stdout.write(f"Login: director@example.com / manager@example.com / yamada@example.com ({password})")
