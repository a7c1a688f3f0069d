from django.conf import settings
from django.http import HttpResponseRedirect


class HttpResponseSeeOther(HttpResponseRedirect):
    status_code = 303


def redirect_to_landing() -> HttpResponseSeeOther:
    """Send a page load back to the unauthenticated landing page."""
    return HttpResponseSeeOther(settings.LANDING_URL)
