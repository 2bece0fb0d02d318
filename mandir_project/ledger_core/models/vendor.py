from django.db import models, transaction
from ..managers import ActiveManager


# ---------- Vendor (supplier we receive bills from) ----------
class Vendor(models.Model):
    # VND-YYYY-NNNN, assigned by the numbering service when left blank
    vendor_code = models.CharField(max_length=32, unique=True, blank=True)
    name = models.CharField(max_length=200)
    contact_person = models.CharField(max_length=200, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=32, blank=True, default="")
    address = models.TextField(blank=True, default="")
    # 15-character GST identification number
    gstin = models.CharField(max_length=15, blank=True, default="")
    payment_terms = models.CharField(max_length=100, blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ActiveManager()

    class Meta:
        db_table = "vendors"
        ordering = ("name",)

    def __str__(self):
        return f"{self.vendor_code} {self.name}".strip()

    def save(self, *args, **kwargs):
        if not self.vendor_code:
            from ..services.numbering import next_document_number

            # number and row must commit together
            with transaction.atomic():
                self.vendor_code = next_document_number("VND")
                self.full_clean()
                return super().save(*args, **kwargs)
        self.full_clean()
        return super().save(*args, **kwargs)
