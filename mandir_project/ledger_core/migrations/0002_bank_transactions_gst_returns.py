from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def amount():
    return models.DecimalField(
        decimal_places=2,
        default=Decimal("0.00"),
        max_digits=18,
        validators=[django.core.validators.MinValueValidator(0)],
    )


class Migration(migrations.Migration):

    dependencies = [
        ("ledger_core", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.AddField(
            model_name="bankaccount",
            name="last_reconciled_at",
            field=models.DateField(blank=True, null=True),
        ),
        migrations.CreateModel(
            name="BankTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("transaction_date", models.DateField()),
                (
                    "transaction_type",
                    models.CharField(
                        choices=[("credit", "Credit (deposit)"), ("debit", "Debit (withdrawal)")],
                        max_length=10,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=18,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("reference_number", models.CharField(blank=True, default="", max_length=100)),
                ("description", models.TextField(blank=True, default="")),
                ("is_reconciled", models.BooleanField(default=False)),
                ("reconciled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "bank_account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="ledger_core.bankaccount",
                    ),
                ),
                (
                    "reconciled_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "bank_transactions",
                "ordering": ("-transaction_date", "-id"),
                "indexes": [
                    models.Index(
                        fields=["bank_account", "is_reconciled"], name="bank_tx_reconciled_idx"
                    ),
                    models.Index(fields=["transaction_date"], name="bank_tx_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="GSTReturn",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("return_period", models.CharField(max_length=9)),
                (
                    "return_type",
                    models.CharField(
                        choices=[("GSTR-1", "GSTR-1"), ("GSTR-3B", "GSTR-3B"), ("GSTR-9", "GSTR-9")],
                        default="GSTR-3B",
                        max_length=10,
                    ),
                ),
                ("filing_date", models.DateField(blank=True, null=True)),
                ("taxable_value", amount()),
                ("cgst_amount", amount()),
                ("sgst_amount", amount()),
                ("igst_amount", amount()),
                ("total_tax_amount", amount()),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("filed", "Filed")],
                        default="draft",
                        max_length=10,
                    ),
                ),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "gst_returns",
                "ordering": ("-return_period", "return_type"),
                "constraints": [
                    models.UniqueConstraint(
                        fields=("return_period", "return_type"), name="uq_gst_return_period_type"
                    ),
                ],
            },
        ),
    ]
