from .errors import page_not_found
from .health import HealthView

__all__ = [
    "HealthView",
    "page_not_found",
]
