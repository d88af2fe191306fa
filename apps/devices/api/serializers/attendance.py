from rest_framework import serializers


class AttendanceRecordSerializer(serializers.Serializer):
    uid = serializers.IntegerField()
    user_id = serializers.CharField()
    timestamp = serializers.DateTimeField()
    status = serializers.IntegerField(help_text="Verification mode reported by the device")
    punch = serializers.IntegerField(help_text="Punch type reported by the device")


class AttendanceListResponseSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    results = AttendanceRecordSerializer(many=True)
