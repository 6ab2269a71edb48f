# weighments/api/serializers/capture_serializer.py

from rest_framework import serializers

from weighments.services.operations import (
    CapturedImages,
    CloseTicket,
    NewGross,
    NewOneTime,
    NewTare,
    OperationType,
    WeightReading,
)

NEW_OPERATIONS = {
    'gross': NewGross,
    'tare': NewTare,
    'one-time': NewOneTime,
}


class WeighmentCaptureSerializer(serializers.Serializer):
    """
    One capture request from the operator console.
    Field presence is only type-checked here; which fields an operation needs
    is enforced by the engine so API and direct callers get the same errors.
    """
    operation_type = serializers.ChoiceField(choices=[t.value for t in OperationType])
    weight_type = serializers.ChoiceField(choices=list(NEW_OPERATIONS), default='gross')
    live_weight = serializers.DecimalField(max_digits=12, decimal_places=2)
    is_stable = serializers.BooleanField()

    vehicle_no = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    party_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    product_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    ticket_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    charges = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True, default=None)
    front_image = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    rear_image = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    remarks = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    refresh = serializers.BooleanField(required=False, default=False)

    def get_reading(self):
        data = self.validated_data
        return WeightReading(live_weight=data['live_weight'], is_stable=data['is_stable'])

    def get_images(self):
        data = self.validated_data
        images = CapturedImages(front_image=data['front_image'] or None, rear_image=data['rear_image'] or None)
        return images if images else None

    def build_operation(self, engine):
        data = self.validated_data
        operation_type = OperationType(data['operation_type'])
        charges = data['charges']

        if operation_type == OperationType.UPDATE:
            return CloseTicket(
                ticket_id=data['ticket_id'],
                charges=charges,
                images=self.get_images(),
                remarks=data['remarks'],
            )

        common = dict(
            party_name=data['party_name'],
            product_name=data['product_name'],
            charges=charges if charges is not None else 0,
            images=self.get_images(),
            remarks=data['remarks'] or '',
        )

        if operation_type == OperationType.STORED_TARE:
            return engine.resolve_stored_tare(
                vehicle_no=data['vehicle_no'],
                refresh=data['refresh'],
                **common,
            )

        operation_class = NEW_OPERATIONS[data['weight_type']]
        return operation_class(vehicle_no=data['vehicle_no'], **common)
