# Generated manually for EBarimtReceipt, PosApiLog and OperatorMerchantRequest

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("billing", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="EBarimtReceipt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("SUCCESS", "Success"), ("FAILED", "Failed"), ("CANCELED", "Canceled")], db_index=True, default="PENDING", max_length=10)),
                ("total_amount", models.BigIntegerField()),
                ("merchant_tin", models.CharField(max_length=14)),
                ("pos_no", models.CharField(max_length=50)),
                ("branch_no", models.CharField(max_length=50)),
                ("district_code", models.CharField(max_length=10)),
                ("bill_id_suffix", models.CharField(blank=True, max_length=8)),
                ("ddtd", models.CharField(blank=True, max_length=33, null=True, unique=True)),
                ("printed_at", models.DateTimeField(blank=True, null=True)),
                ("printed_at_text", models.CharField(blank=True, max_length=19, null=True)),
                ("error_message", models.TextField(blank=True, null=True)),
                ("issue_raw_request", models.JSONField(blank=True, null=True)),
                ("issue_raw_response", models.JSONField(blank=True, null=True)),
                ("cancel_raw_request", models.JSONField(blank=True, null=True)),
                ("cancel_raw_response", models.JSONField(blank=True, null=True)),
                ("attempt_no", models.PositiveIntegerField(default=0)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("canceled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("invoice", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="ebarimt_receipt", to="billing.invoice")),
                ("issued_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("canceled_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "eBarimt Receipt",
                "verbose_name_plural": "eBarimt Receipts",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="PosApiLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("endpoint", models.CharField(max_length=255)),
                ("method", models.CharField(max_length=10)),
                ("request_payload", models.JSONField(blank=True, null=True)),
                ("response_payload", models.JSONField(blank=True, null=True)),
                ("status_code", models.IntegerField(blank=True, null=True)),
                ("error_message", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "POSAPI Log",
                "verbose_name_plural": "POSAPI Logs",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="OperatorMerchantRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("pos_no", models.CharField(max_length=50)),
                ("merchant_tin", models.CharField(max_length=14)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("APPROVED", "Approved"), ("FAILED", "Failed")], default="PENDING", max_length=10)),
                ("raw_request", models.JSONField(default=dict)),
                ("raw_response", models.JSONField(blank=True, null=True)),
                ("error_message", models.TextField(blank=True, null=True)),
                ("requested_at", models.DateTimeField()),
                ("decided_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "Operator Merchant Request",
                "verbose_name_plural": "Operator Merchant Requests",
                "ordering": ["-requested_at"],
            },
        ),
    ]
