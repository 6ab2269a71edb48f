from django.db import migrations, models


SOURCE_CHOICES = [("master", "Master"), ("walk-in", "Walk-in")]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Party",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("party_name", models.CharField(max_length=150, unique=True)),
                ("contact_person", models.CharField(blank=True, max_length=100)),
                ("contact_no", models.CharField(blank=True, max_length=15)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("address", models.TextField(blank=True)),
                ("source", models.CharField(choices=SOURCE_CHOICES, default="master", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["party_name"],
                "verbose_name_plural": "parties",
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(max_length=150, unique=True)),
                ("category", models.CharField(blank=True, max_length=100)),
                ("unit", models.CharField(default="KG", max_length=10)),
                ("source", models.CharField(choices=SOURCE_CHOICES, default="master", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["product_name"],
            },
        ),
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("vehicle_no", models.CharField(max_length=20, unique=True)),
                ("vehicle_type", models.CharField(blank=True, max_length=50)),
                ("capacity", models.PositiveIntegerField(default=0)),
                ("owner_name", models.CharField(blank=True, max_length=100)),
                ("contact_no", models.CharField(blank=True, max_length=15)),
                ("source", models.CharField(choices=SOURCE_CHOICES, default="master", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["vehicle_no"],
            },
        ),
    ]
