# path() defines a URL route.
# include() loads URL routes from another app (splits URLs into multiple files).
from django.urls import include, path
# Gives access to project settings like DEBUG.
from django.conf import settings
# Helper to serve static files (CSS/JS/images) in development.
from django.contrib.staticfiles.urls import staticfiles_urlpatterns

urlpatterns = [
    path("", include("apps.accounts.urls")),
    path("", include("apps.scheduling.urls")),
]

if settings.DEBUG:
    urlpatterns += staticfiles_urlpatterns()
