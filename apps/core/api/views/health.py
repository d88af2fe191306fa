from django.utils import timezone
from django.utils.translation import gettext as _
from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView


class HealthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    timestamp = serializers.DateTimeField()


class HealthView(APIView):
    """Liveness check. Does not require an API key and never touches the device."""

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Health check",
        responses={200: HealthResponseSerializer},
        tags=["Health"],
    )
    def get(self, request):
        return Response(
            {"message": _("ZKTeco Bridge Server is running"), "timestamp": timezone.now()},
            status=status.HTTP_200_OK,
        )
