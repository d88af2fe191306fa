from django.utils.translation import gettext as _
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.response import Response

from apps.devices.api.serializers import (
    MessageResponseSerializer,
    UserEnrollSerializer,
    UserListResponseSerializer,
    UserSerializer,
)

from .base import DeviceSessionAPIView


class UserEnrollView(DeviceSessionAPIView):
    serializer_class = UserEnrollSerializer

    @extend_schema(
        summary="Enroll user",
        description="Creates the user on the device, or overwrites the user already stored under `uid`.",
        request=UserEnrollSerializer,
        responses={200: UserSerializer, 400: OpenApiResponse(description="Invalid input")},
        examples=[
            OpenApiExample(
                "Enroll",
                value={"uid": 7, "user_id": "emp007", "name": "A. Smith", "role": 0, "card_number": 0},
                request_only=True,
            )
        ],
        tags=["Users"],
    )
    def post(self, request):
        serializer = UserEnrollSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = self.get_session().enroll_user(serializer.to_record())
        return Response(
            {"message": _("User enrolled successfully"), "user": UserSerializer(record).data},
            status=status.HTTP_200_OK,
        )


class UserListView(DeviceSessionAPIView):
    @extend_schema(
        summary="List users",
        description="Reads the full user table from the device.",
        responses={200: UserListResponseSerializer},
        tags=["Users"],
    )
    def get(self, request):
        users = self.get_session().list_users()
        return Response(
            {"count": len(users), "results": UserSerializer(users, many=True).data},
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Clear all users",
        description="Erases every user on the device. This cannot be undone.",
        responses={200: MessageResponseSerializer},
        tags=["Users"],
    )
    def delete(self, request):
        self.get_session().clear_all_users()
        return Response({"message": _("All users cleared successfully")}, status=status.HTTP_200_OK)


class UserDetailView(DeviceSessionAPIView):
    @extend_schema(
        summary="Get user",
        responses={200: UserSerializer, 404: OpenApiResponse(description="User not found")},
        tags=["Users"],
    )
    def get(self, request, uid: int):
        user = self.get_session().get_user(uid)
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Delete user",
        responses={200: MessageResponseSerializer, 422: OpenApiResponse(description="Device refused the delete")},
        tags=["Users"],
    )
    def delete(self, request, uid: int):
        self.get_session().delete_user(uid)
        return Response({"message": _("User deleted successfully")}, status=status.HTTP_200_OK)
