import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PayCustomer",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "processor",
                    models.CharField(
                        choices=[
                            ("stripe", "Stripe"),
                            ("braintree", "Braintree"),
                            ("paddle", "Paddle"),
                        ],
                        db_index=True,
                        help_text="Payment processor that owns this customer",
                        max_length=20,
                    ),
                ),
                (
                    "processor_id",
                    models.CharField(
                        help_text="Processor customer ID (cus_xxx)",
                        max_length=255,
                    ),
                ),
                (
                    "stripe_account",
                    models.CharField(
                        blank=True,
                        help_text="Stripe connected account ID (acct_xxx) for API scoping",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "default",
                    models.BooleanField(
                        default=False,
                        help_text="Whether this is the owner's default customer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pay Customer",
                "verbose_name_plural": "Pay Customers",
                "db_table": "pay_customers",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("processor", "processor_id"),
                        name="unique_pay_customer_per_processor",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="PaySubscription",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "processor_id",
                    models.CharField(
                        help_text="Processor subscription ID (sub_xxx)",
                        max_length=255,
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        default="default",
                        help_text="Local name for the subscription",
                        max_length=255,
                    ),
                ),
                (
                    "processor_plan",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Processor price or plan ID (price_xxx)",
                        max_length=255,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        db_index=True,
                        default="active",
                        help_text="Processor subscription status",
                        max_length=32,
                    ),
                ),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Number of seats",
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        help_text="Customer that owns this subscription",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="subscriptions",
                        to="pay.paycustomer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pay Subscription",
                "verbose_name_plural": "Pay Subscriptions",
                "db_table": "pay_subscriptions",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("customer", "processor_id"),
                        name="unique_pay_subscription_per_customer",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="PayCharge",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "processor_id",
                    models.CharField(
                        db_index=True,
                        help_text="Processor charge ID (ch_xxx)",
                        max_length=255,
                    ),
                ),
                (
                    "amount",
                    models.BigIntegerField(
                        help_text="Charged amount in smallest currency unit (e.g., cents)",
                    ),
                ),
                (
                    "amount_refunded",
                    models.BigIntegerField(
                        default=0,
                        help_text="Refunded amount in smallest currency unit",
                    ),
                ),
                (
                    "application_fee_amount",
                    models.BigIntegerField(
                        blank=True,
                        help_text="Application fee in smallest currency unit",
                        null=True,
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        default="usd",
                        help_text="ISO 4217 currency code (lowercase)",
                        max_length=3,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        db_index=True,
                        default=django.utils.timezone.now,
                        help_text="When the processor created this charge",
                    ),
                ),
                (
                    "stripe_account",
                    models.CharField(
                        blank=True,
                        help_text="Stripe connected account ID (acct_xxx) for API scoping",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "payment_method_type",
                    models.CharField(
                        blank=True,
                        help_text="Payment method type tag (card, sepa_debit, ideal, ...)",
                        max_length=64,
                        null=True,
                    ),
                ),
                ("brand", models.CharField(blank=True, max_length=64, null=True)),
                ("last4", models.CharField(blank=True, max_length=4, null=True)),
                (
                    "exp_month",
                    models.PositiveSmallIntegerField(blank=True, null=True),
                ),
                (
                    "exp_year",
                    models.PositiveSmallIntegerField(blank=True, null=True),
                ),
                ("bank", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "customer",
                    models.ForeignKey(
                        help_text="Customer that was charged",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="charges",
                        to="pay.paycustomer",
                    ),
                ),
                (
                    "subscription",
                    models.ForeignKey(
                        blank=True,
                        help_text="Subscription that generated this charge, if any",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="charges",
                        to="pay.paysubscription",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pay Charge",
                "verbose_name_plural": "Pay Charges",
                "db_table": "pay_charges",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("customer", "processor_id"),
                        name="unique_pay_charge_per_customer",
                    )
                ],
            },
        ),
    ]
