import django.core.validators
from django.db import migrations, models


VEHICLE_STATUS_CHOICES = [("load", "Load"), ("empty", "Empty")]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Bill",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("bill_no", models.CharField(max_length=50, unique=True)),
                ("ticket_no", models.CharField(db_index=True, max_length=50)),
                ("vehicle_no", models.CharField(db_index=True, max_length=20)),
                ("party_name", models.CharField(max_length=150)),
                ("product_name", models.CharField(max_length=150)),
                ("gross_weight", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("tare_weight", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("net_weight", models.DecimalField(blank=True, decimal_places=2, editable=False, max_digits=12, null=True)),
                ("charges", models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("front_image", models.TextField(blank=True, null=True)),
                ("rear_image", models.TextField(blank=True, null=True)),
                ("status", models.CharField(choices=[("OPEN", "Open"), ("CLOSED", "Closed"), ("PRINTED", "Printed")], default="OPEN", max_length=10)),
                ("first_weight_type", models.CharField(choices=[("gross", "Gross"), ("tare", "Tare"), ("one-time", "One-time")], max_length=10)),
                ("first_vehicle_status", models.CharField(blank=True, choices=VEHICLE_STATUS_CHOICES, max_length=10, null=True)),
                ("second_vehicle_status", models.CharField(blank=True, choices=VEHICLE_STATUS_CHOICES, max_length=10, null=True)),
                ("second_weight_at", models.DateTimeField(blank=True, null=True)),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("closed_at", models.DateTimeField(blank=True, null=True)),
                ("printed_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="StoredTare",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("vehicle_no", models.CharField(max_length=20, unique=True)),
                ("tare_weight", models.DecimalField(decimal_places=2, max_digits=12)),
                ("stored_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
            ],
            options={
                "ordering": ["-stored_at"],
            },
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ticket_no", models.CharField(max_length=50, unique=True)),
                ("vehicle_no", models.CharField(db_index=True, max_length=20)),
                ("party_name", models.CharField(max_length=150)),
                ("product_name", models.CharField(max_length=150)),
                ("vehicle_status", models.CharField(choices=VEHICLE_STATUS_CHOICES, max_length=10)),
                ("gross_weight", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("tare_weight", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("first_weight_type", models.CharField(choices=[("gross", "Gross"), ("tare", "Tare")], max_length=10)),
                ("charges", models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("front_image", models.TextField(blank=True, null=True)),
                ("rear_image", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
