from rest_framework import serializers
from .models import RestoTable


class RestoTableSerializer(serializers.ModelSerializer):
    class Meta:
        model = RestoTable
        fields = ['table_name', 'seat_capacity']
        read_only_fields = fields
