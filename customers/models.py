from django.db import models


class Customer(models.Model):
    name = models.CharField("顧客名", max_length=100)
    address = models.CharField("住所", max_length=255, blank=True, default="")
    phone = models.CharField("電話番号", max_length=20, blank=True, default="")
    industry = models.CharField("業種", max_length=50, blank=True, default="")
    is_active = models.BooleanField("有効", default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]
        verbose_name = "顧客"
        verbose_name_plural = "顧客"
        indexes = [
            models.Index(fields=["name"], name="customers_name_idx"),
            models.Index(fields=["industry"], name="customers_industry_idx"),
            models.Index(fields=["is_active"], name="customers_is_active_idx"),
        ]

    def __str__(self):
        return self.name
