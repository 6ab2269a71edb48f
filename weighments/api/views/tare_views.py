# weighments/api/views/tare_views.py

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from weighments.api.serializers import StoredTareSerializer, TareExpirySerializer
from weighments.services.tare_store import TareStore


class StoredTareListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        store = TareStore()
        serializer = StoredTareSerializer(store.list(), many=True, context={'tare_store': store})
        return Response(serializer.data)


class StoredTareByVehicleView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, vehicle_no):
        store = TareStore()
        tare = store.get_by_vehicle(vehicle_no)
        if tare is None:
            return Response({"error": f"No stored tare for {vehicle_no}"}, status=status.HTTP_404_NOT_FOUND)
        return Response(StoredTareSerializer(tare, context={'tare_store': store}).data)


class StoredTareExpiryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, vehicle_no):
        info = TareStore().expiry_info(vehicle_no)
        if info is None:
            return Response({"error": f"No stored tare for {vehicle_no}"}, status=status.HTTP_404_NOT_FOUND)
        return Response(TareExpirySerializer(info).data)
