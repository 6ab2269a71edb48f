# weighments/api/serializers/weighment_serializers.py

from rest_framework import serializers

from weighments.models import Bill, StoredTare, Ticket
from weighments.services.tare_store import TareStore


class TicketSerializer(serializers.ModelSerializer):
    class Meta:
        model = Ticket
        fields = [
            'id', 'ticket_no', 'vehicle_no', 'party_name', 'product_name',
            'vehicle_status', 'gross_weight', 'tare_weight', 'first_weight_type',
            'charges', 'front_image', 'rear_image', 'created_at',
        ]
        read_only_fields = fields


class BillSerializer(serializers.ModelSerializer):
    class Meta:
        model = Bill
        fields = [
            'id', 'bill_no', 'ticket_no', 'vehicle_no', 'party_name', 'product_name',
            'gross_weight', 'tare_weight', 'net_weight', 'charges',
            'front_image', 'rear_image', 'status', 'first_weight_type',
            'first_vehicle_status', 'second_vehicle_status', 'second_weight_at',
            'remarks', 'created_at', 'updated_at', 'closed_at', 'printed_at',
        ]
        read_only_fields = fields


class BillListSerializer(BillSerializer):
    """Ledger listing without the (large) encoded images."""

    class Meta(BillSerializer.Meta):
        fields = [f for f in BillSerializer.Meta.fields if f not in ('front_image', 'rear_image')]
        read_only_fields = fields


class TareExpirySerializer(serializers.Serializer):
    is_expired = serializers.BooleanField()
    days_remaining = serializers.IntegerField()
    hours_remaining = serializers.IntegerField()
    expiry_date = serializers.DateTimeField()


class StoredTareSerializer(serializers.ModelSerializer):
    expiry = serializers.SerializerMethodField()

    class Meta:
        model = StoredTare
        fields = ['vehicle_no', 'tare_weight', 'stored_at', 'updated_at', 'expiry']
        read_only_fields = fields

    def get_expiry(self, obj):
        store = self.context.get('tare_store') or TareStore()
        return TareExpirySerializer(store.expiry_info_for(obj)).data
