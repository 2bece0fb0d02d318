from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def money(**kwargs):
    kwargs.setdefault("default", Decimal("0.00"))
    return models.DecimalField(decimal_places=2, max_digits=18, **kwargs)


def rate():
    return models.DecimalField(
        decimal_places=2,
        default=Decimal("0.00"),
        max_digits=5,
        validators=[
            django.core.validators.MinValueValidator(0),
            django.core.validators.MaxValueValidator(100),
        ],
    )


def user_fk(related_name="+"):
    return models.ForeignKey(
        blank=True,
        null=True,
        on_delete=django.db.models.deletion.SET_NULL,
        related_name=related_name,
        to=settings.AUTH_USER_MODEL,
    )


def period_fk(related_name="+"):
    return models.ForeignKey(
        blank=True,
        null=True,
        on_delete=django.db.models.deletion.PROTECT,
        related_name=related_name,
        to="ledger_core.period",
    )


PAYMENT_STATUS = [("unpaid", "Unpaid"), ("partial", "Partial"), ("paid", "Paid")]
PAYMENT_MODES = [
    ("cash", "Cash"),
    ("cheque", "Cheque"),
    ("online_transfer", "Online Transfer"),
    ("upi", "UPI"),
    ("card", "Card"),
    ("dd", "Demand Draft"),
]


def taxed_document_fields():
    return [
        ("due_date", models.DateField(blank=True, null=True)),
        ("subtotal", money(validators=[django.core.validators.MinValueValidator(0)])),
        ("gst_rate", rate()),
        ("gst_amount", money()),
        ("total", money()),
        ("paid_amount", money()),
        (
            "payment_status",
            models.CharField(choices=PAYMENT_STATUS, default="unpaid", max_length=10),
        ),
        ("description", models.TextField(blank=True, default="")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("created_by", user_fk()),
        ("period", period_fk()),
    ]


def payment_fields():
    return [
        ("payment_date", models.DateField()),
        (
            "amount",
            money(validators=[django.core.validators.MinValueValidator(Decimal("0.01"))]),
        ),
        ("payment_mode", models.CharField(choices=PAYMENT_MODES, max_length=20)),
        ("reference_number", models.CharField(blank=True, default="", max_length=100)),
        ("description", models.TextField(blank=True, default="")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        (
            "bank_account",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name="+",
                to="ledger_core.bankaccount",
            ),
        ),
        ("created_by", user_fk()),
        ("period", period_fk()),
    ]


def pk():
    return ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID"))


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                pk(),
                ("code", models.CharField(max_length=32, unique=True)),
                ("name", models.CharField(max_length=200)),
                (
                    "ac_type",
                    models.CharField(
                        choices=[
                            ("asset", "Asset"),
                            ("liability", "Liability"),
                            ("equity", "Equity"),
                            ("income", "Income"),
                            ("expense", "Expense"),
                        ],
                        max_length=10,
                    ),
                ),
                ("is_gst_applicable", models.BooleanField(default=False)),
                ("gst_rate", rate()),
                ("opening_balance", money()),
                ("current_balance", money()),
                ("description", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="children",
                        to="ledger_core.account",
                    ),
                ),
            ],
            options={
                "db_table": "chart_of_accounts",
                "ordering": ("code",),
                "indexes": [
                    models.Index(fields=["ac_type"], name="coa_ac_type_idx"),
                    models.Index(fields=["parent"], name="coa_parent_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Period",
            fields=[
                pk(),
                ("name", models.CharField(max_length=50, unique=True)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[("open", "Open"), ("closed", "Closed")],
                        default="open",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "financial_periods",
                "ordering": ("start_date",),
                "indexes": [
                    models.Index(fields=["status", "start_date"], name="period_status_start_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Devotee",
            fields=[
                pk(),
                ("name", models.CharField(max_length=200)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("phone", models.CharField(blank=True, default="", max_length=32)),
                ("address", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"db_table": "devotees", "ordering": ("name",)},
        ),
        migrations.CreateModel(
            name="Vendor",
            fields=[
                pk(),
                ("vendor_code", models.CharField(blank=True, max_length=32, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("contact_person", models.CharField(blank=True, default="", max_length=200)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("phone", models.CharField(blank=True, default="", max_length=32)),
                ("address", models.TextField(blank=True, default="")),
                ("gstin", models.CharField(blank=True, default="", max_length=15)),
                ("payment_terms", models.CharField(blank=True, default="", max_length=100)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"db_table": "vendors", "ordering": ("name",)},
        ),
        migrations.CreateModel(
            name="BankAccount",
            fields=[
                pk(),
                ("account_name", models.CharField(max_length=200)),
                ("bank_name", models.CharField(max_length=200)),
                ("account_number", models.CharField(max_length=34, unique=True)),
                ("ifsc_code", models.CharField(blank=True, default="", max_length=11)),
                ("branch", models.CharField(blank=True, default="", max_length=200)),
                (
                    "account_type",
                    models.CharField(
                        choices=[
                            ("savings", "Savings"),
                            ("current", "Current"),
                            ("fixed_deposit", "Fixed Deposit"),
                        ],
                        default="savings",
                        max_length=20,
                    ),
                ),
                ("opening_balance", money()),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "ledger_account",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bank_accounts",
                        to="ledger_core.account",
                    ),
                ),
            ],
            options={"db_table": "bank_accounts", "ordering": ("bank_name", "account_name")},
        ),
        migrations.CreateModel(
            name="DocumentSequence",
            fields=[
                pk(),
                ("prefix", models.CharField(max_length=32, unique=True)),
                ("last_value", models.PositiveIntegerField(default=0)),
            ],
            options={"db_table": "document_sequences"},
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                pk(),
                ("action", models.CharField(max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=64)),
                ("changes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "audit_log",
                "ordering": ("-created_at",),
                "indexes": [
                    models.Index(fields=["object_type", "object_id"], name="audit_object_idx"),
                    models.Index(fields=["created_at"], name="audit_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Bill",
            fields=[pk()]
            + taxed_document_fields()
            + [
                ("bill_number", models.CharField(max_length=32, unique=True)),
                ("bill_date", models.DateField()),
                (
                    "vendor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bills",
                        to="ledger_core.vendor",
                    ),
                ),
                (
                    "expense_account",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="ledger_core.account",
                    ),
                ),
            ],
            options={
                "db_table": "bills",
                "ordering": ("-bill_date", "-id"),
                "indexes": [
                    models.Index(fields=["payment_status"], name="bill_status_idx"),
                    models.Index(fields=["bill_date"], name="bill_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BillPayment",
            fields=[pk()]
            + payment_fields()
            + [
                (
                    "bill",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="ledger_core.bill",
                    ),
                ),
            ],
            options={"db_table": "bill_payments", "ordering": ("payment_date", "id")},
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[pk()]
            + taxed_document_fields()
            + [
                ("invoice_number", models.CharField(max_length=32, unique=True)),
                ("invoice_date", models.DateField()),
                (
                    "devotee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="ledger_core.devotee",
                    ),
                ),
                (
                    "income_account",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="ledger_core.account",
                    ),
                ),
            ],
            options={
                "db_table": "invoices",
                "ordering": ("-invoice_date", "-id"),
                "indexes": [
                    models.Index(fields=["payment_status"], name="invoice_status_idx"),
                    models.Index(fields=["invoice_date"], name="invoice_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoicePayment",
            fields=[pk()]
            + payment_fields()
            + [
                (
                    "invoice",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="ledger_core.invoice",
                    ),
                ),
            ],
            options={"db_table": "invoice_payments", "ordering": ("payment_date", "id")},
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[pk()]
            + taxed_document_fields()
            + [
                ("expense_number", models.CharField(max_length=32, unique=True)),
                ("expense_date", models.DateField()),
                (
                    "payment_mode",
                    models.CharField(blank=True, choices=PAYMENT_MODES, default="", max_length=20),
                ),
                ("reference_number", models.CharField(blank=True, default="", max_length=100)),
                (
                    "expense_category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="ledger_core.account",
                    ),
                ),
                (
                    "vendor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expenses",
                        to="ledger_core.vendor",
                    ),
                ),
                (
                    "bank_account",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="ledger_core.bankaccount",
                    ),
                ),
            ],
            options={"db_table": "expenses", "ordering": ("-expense_date", "-id")},
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                pk(),
                ("entry_number", models.CharField(max_length=32, unique=True)),
                ("entry_date", models.DateField()),
                ("description", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(choices=[("posted", "Posted")], default="posted", max_length=10),
                ),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("created_by", user_fk()),
                ("posted_by", user_fk()),
                (
                    "offsets",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="offset_entries",
                        to="ledger_core.journalentry",
                    ),
                ),
                (
                    "period",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        to="ledger_core.period",
                    ),
                ),
            ],
            options={
                "db_table": "journal_entries",
                "ordering": ("-entry_date", "-id"),
                "verbose_name_plural": "journal entries",
                "indexes": [
                    models.Index(fields=["entry_date"], name="je_entry_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalEntryLine",
            fields=[
                pk(),
                ("line_number", models.PositiveIntegerField()),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("debit_amount", money()),
                ("credit_amount", money()),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        to="ledger_core.account",
                    ),
                ),
                (
                    "entry",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="ledger_core.journalentry",
                    ),
                ),
            ],
            options={
                "db_table": "journal_entry_lines",
                "ordering": ("entry", "line_number"),
                "constraints": [
                    models.UniqueConstraint(fields=("entry", "line_number"), name="uq_jel_entry_line"),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerRow",
            fields=[
                pk(),
                ("transaction_date", models.DateField()),
                (
                    "reference_type",
                    models.CharField(
                        choices=[
                            ("Bill", "Bill"),
                            ("Bill Payment", "Bill Payment"),
                            ("Invoice", "Invoice"),
                            ("Invoice Payment", "Invoice Payment"),
                            ("Expense", "Expense"),
                            ("Journal", "Journal"),
                        ],
                        max_length=20,
                    ),
                ),
                ("reference_id", models.BigIntegerField()),
                ("description", models.TextField(blank=True, default="")),
                ("debit_amount", money()),
                ("credit_amount", money()),
                ("balance", models.DecimalField(decimal_places=2, max_digits=18)),
                ("gst_applicable", models.BooleanField(default=False)),
                (
                    "gst_rate",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5),
                ),
                ("gst_amount", money()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_rows",
                        to="ledger_core.account",
                    ),
                ),
                ("created_by", user_fk()),
                (
                    "period",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_rows",
                        to="ledger_core.period",
                    ),
                ),
            ],
            options={
                "db_table": "general_ledger",
                "ordering": ("transaction_date", "id"),
                "indexes": [
                    models.Index(fields=["account", "transaction_date"], name="gl_account_date_idx"),
                    models.Index(fields=["reference_type", "reference_id"], name="gl_reference_idx"),
                    models.Index(fields=["period"], name="gl_period_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(debit_amount__gt=0, credit_amount=0)
                            | models.Q(debit_amount=0, credit_amount__gt=0)
                        ),
                        name="ck_gl_one_side",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Budget",
            fields=[
                pk(),
                ("financial_year", models.CharField(max_length=9)),
                (
                    "budgeted_amount",
                    money(validators=[django.core.validators.MinValueValidator(0)]),
                ),
                ("actual_amount", money()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="budgets",
                        to="ledger_core.account",
                    ),
                ),
            ],
            options={
                "db_table": "budgets",
                "ordering": ("financial_year", "account__code"),
                "constraints": [
                    models.UniqueConstraint(
                        fields=("financial_year", "account"), name="uq_budget_year_account"
                    ),
                ],
            },
        ),
    ]
