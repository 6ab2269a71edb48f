import logging
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny

from core.serial_numbers import SerialNumberGenerator
from core.serializers import SerialNumberConfigSerializer, SerialNumberPreviewSerializer

logger = logging.getLogger(__name__)


# ✅ NEXT SERIAL NUMBER (peek only, counter advances when a weighment commits)
class SerialNumberNextView(APIView):
    def get(self, request):
        serial_no = SerialNumberGenerator().peek()
        return Response({"serial_no": serial_no}, status=status.HTTP_200_OK)


# ✅ SERIAL NUMBER CONFIGURATION
class SerialNumberConfigView(APIView):
    def get(self, request):
        config = SerialNumberGenerator().get_config()
        return Response(SerialNumberConfigSerializer(config.to_dict()).data)

    def put(self, request):
        serializer = SerialNumberConfigSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        data = dict(serializer.validated_data)
        reset_counter_now = data.pop("reset_counter_now", False)
        config = SerialNumberGenerator().update_config(reset_counter_now=reset_counter_now, **data)

        logger.info(f"Serial number config updated by user: {request.user}")
        return Response(SerialNumberConfigSerializer(config.to_dict()).data)


# ✅ SERIAL NUMBER FORMAT PREVIEW
class SerialNumberPreviewView(APIView):
    def post(self, request):
        serializer = SerialNumberPreviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        preview = SerialNumberGenerator().preview(**serializer.validated_data)
        return Response({"preview": preview})


# ✅ HEALTH CHECK API
class HealthCheckView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            "status": "ok",
            "message": "Server is healthy"
        }, status=status.HTTP_200_OK)
