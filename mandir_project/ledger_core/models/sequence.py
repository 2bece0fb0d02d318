from django.db import models


class DocumentSequence(models.Model):
    """Last number handed out for one prefix, e.g. "BILL-2025-" -> 7."""

    prefix = models.CharField(max_length=32, unique=True)
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "document_sequences"

    def __str__(self):
        return f"{self.prefix}{self.last_value:04d}"
