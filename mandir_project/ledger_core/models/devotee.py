from django.db import models
from ..managers import ActiveManager


# ---------- Devotee (invoice counterparty) ----------
class Devotee(models.Model):
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=32, blank=True, default="")
    address = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ActiveManager()

    class Meta:
        db_table = "devotees"
        ordering = ("name",)

    def __str__(self):
        return self.name
