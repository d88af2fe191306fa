from rest_framework.views import APIView

from apps.devices.apps import get_device_session
from apps.devices.zk import ZKDeviceSession


class DeviceSessionAPIView(APIView):
    """Base view for endpoints that drive the device session.

    The session is injected with ``as_view(session=...)``; views built without
    one use the session owned by the devices app.
    """

    session: ZKDeviceSession | None = None

    def get_session(self) -> ZKDeviceSession:
        if self.session is not None:
            return self.session
        return get_device_session()
