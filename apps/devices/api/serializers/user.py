from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.devices.constants import UserRole
from apps.devices.zk import ZKUserRecord


class UserEnrollSerializer(serializers.Serializer):
    """Serializer for enrolling (creating or overwriting) a user on the device.

    ``uid`` is the device slot; enrolling an existing ``uid`` overwrites it.
    No uniqueness check is done on ``user_id``.
    """

    uid = serializers.IntegerField(
        min_value=1,
        max_value=65535,
        help_text="Device-side numeric user slot",
        error_messages={"required": _("uid, user_id, and name are required")},
    )
    user_id = serializers.CharField(
        max_length=24,
        help_text="User identifier (e.g. employee code)",
        error_messages={"required": _("uid, user_id, and name are required")},
    )
    name = serializers.CharField(
        max_length=24,
        help_text="Display name",
        error_messages={"required": _("uid, user_id, and name are required")},
    )
    password = serializers.CharField(
        max_length=8,
        required=False,
        allow_blank=True,
        default="",
        write_only=True,
        help_text="Keypad password stored on the device",
    )
    role = serializers.IntegerField(
        min_value=0,
        max_value=UserRole.ADMIN,
        required=False,
        default=UserRole.NORMAL,
        help_text="Privilege level (0 = normal user, 14 = admin)",
    )
    card_number = serializers.IntegerField(
        min_value=0,
        required=False,
        default=0,
        help_text="RFID card number (0 = none)",
    )

    def to_record(self) -> ZKUserRecord:
        return ZKUserRecord(**self.validated_data)


class UserSerializer(serializers.Serializer):
    uid = serializers.IntegerField()
    user_id = serializers.CharField()
    name = serializers.CharField()
    role = serializers.IntegerField()
    card_number = serializers.IntegerField()


class UserListResponseSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    results = UserSerializer(many=True)
