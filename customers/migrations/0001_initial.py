from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="顧客名")),
                ("address", models.CharField(blank=True, default="", max_length=255, verbose_name="住所")),
                ("phone", models.CharField(blank=True, default="", max_length=20, verbose_name="電話番号")),
                ("industry", models.CharField(blank=True, default="", max_length=50, verbose_name="業種")),
                ("is_active", models.BooleanField(default=True, verbose_name="有効")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "顧客",
                "verbose_name_plural": "顧客",
                "ordering": ["name", "id"],
                "indexes": [
                    models.Index(fields=["name"], name="customers_name_idx"),
                    models.Index(fields=["industry"], name="customers_industry_idx"),
                    models.Index(fields=["is_active"], name="customers_is_active_idx"),
                ],
            },
        ),
    ]
