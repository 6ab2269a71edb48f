from rest_framework import serializers

from core.serial_numbers import RESET_FREQUENCIES, YEAR_FORMATS


class SerialNumberConfigSerializer(serializers.Serializer):
    prefix = serializers.CharField(max_length=20, allow_blank=True)
    separator = serializers.CharField(max_length=3, allow_blank=True, trim_whitespace=False)
    include_year = serializers.BooleanField()
    include_month = serializers.BooleanField()
    year_format = serializers.ChoiceField(choices=YEAR_FORMATS)
    counter_start = serializers.IntegerField(min_value=0)
    counter_padding = serializers.IntegerField(min_value=0, max_value=10)
    current_counter = serializers.IntegerField(min_value=0, required=False)
    reset_frequency = serializers.ChoiceField(choices=RESET_FREQUENCIES)
    last_reset_date = serializers.CharField(read_only=True, allow_null=True)
    reset_counter_now = serializers.BooleanField(write_only=True, required=False, default=False)


class SerialNumberPreviewSerializer(serializers.Serializer):
    prefix = serializers.CharField(max_length=20, allow_blank=True, required=False)
    separator = serializers.CharField(max_length=3, allow_blank=True, required=False, trim_whitespace=False)
    include_year = serializers.BooleanField(required=False)
    include_month = serializers.BooleanField(required=False)
    year_format = serializers.ChoiceField(choices=YEAR_FORMATS, required=False)
    counter_padding = serializers.IntegerField(min_value=0, max_value=10, required=False)
    current_counter = serializers.IntegerField(min_value=0, required=False)
