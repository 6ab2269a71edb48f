from rest_framework import serializers
from .models import Vehicle, Party, Product


class VehicleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vehicle
        fields = ['id', 'vehicle_no', 'vehicle_type', 'capacity', 'owner_name', 'contact_no', 'source', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_vehicle_no(self, value):
        return value.strip().upper()


class PartySerializer(serializers.ModelSerializer):
    class Meta:
        model = Party
        fields = ['id', 'party_name', 'contact_person', 'contact_no', 'email', 'address', 'source', 'created_at']
        read_only_fields = ['id', 'created_at']


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ['id', 'product_name', 'category', 'unit', 'source', 'created_at']
        read_only_fields = ['id', 'created_at']
