from django.conf import settings
from django.db import models


# ---------- AuditLog ----------
class AuditLog(models.Model):  # One row per posting action
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL
    )
    action = models.CharField(max_length=50)  # e.g. "bill.created", "journal.posted"
    object_type = models.CharField(max_length=100)  # e.g. "Bill"
    object_id = models.CharField(max_length=64)  # PK of the affected object
    # Stores a snapshot of what was posted
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "audit_log"
        indexes = [
            models.Index(fields=["object_type", "object_id"], name="audit_object_idx"),
            models.Index(fields=["created_at"], name="audit_created_idx"),
        ]
        ordering = ("-created_at",)

    def __str__(self):
        return f"{self.created_at:%Y-%m-%d %H:%M} {self.action} {self.object_type}#{self.object_id}"
