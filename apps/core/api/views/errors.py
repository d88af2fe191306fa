from django.http import JsonResponse
from django.utils.translation import gettext as _


def page_not_found(request, exception=None):
    """JSON 404 for unmatched routes; the response middleware adds the envelope."""
    return JsonResponse({"detail": _("Endpoint not found")}, status=404)
