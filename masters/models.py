from django.db import models

SOURCE_CHOICES = (
    ('master', 'Master'),
    ('walk-in', 'Walk-in'),
)


class Vehicle(models.Model):
    vehicle_no = models.CharField(max_length=20, unique=True)
    vehicle_type = models.CharField(max_length=50, blank=True)
    capacity = models.PositiveIntegerField(default=0)
    owner_name = models.CharField(max_length=100, blank=True)
    contact_no = models.CharField(max_length=15, blank=True)
    source = models.CharField(max_length=10, choices=SOURCE_CHOICES, default='master')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['vehicle_no']

    def __str__(self):
        return self.vehicle_no


class Party(models.Model):
    party_name = models.CharField(max_length=150, unique=True)
    contact_person = models.CharField(max_length=100, blank=True)
    contact_no = models.CharField(max_length=15, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    source = models.CharField(max_length=10, choices=SOURCE_CHOICES, default='master')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['party_name']
        verbose_name_plural = 'parties'

    def __str__(self):
        return self.party_name


class Product(models.Model):
    product_name = models.CharField(max_length=150, unique=True)
    category = models.CharField(max_length=100, blank=True)
    unit = models.CharField(max_length=10, default='KG')
    source = models.CharField(max_length=10, choices=SOURCE_CHOICES, default='master')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['product_name']

    def __str__(self):
        return self.product_name
