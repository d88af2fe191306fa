import atexit

from django.apps import AppConfig


class DevicesConfig(AppConfig):
    """Configuration for the Devices app.

    Builds the process-wide device session once the app registry is ready and
    closes it at interpreter exit. Views reach it through ``get_device_session``.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.devices"
    verbose_name = "Devices"

    session = None

    def ready(self):
        from apps.devices.zk import ZKDeviceSession

        self.session = ZKDeviceSession.from_settings()
        atexit.register(self.session.close)


def get_device_session():
    """Return the device session owned by the devices app."""
    from django.apps import apps

    return apps.get_app_config("devices").session
