from django.conf import settings
from django.contrib import admin
from django.urls import path, include
from django.conf.urls.static import static

from liturgy import urls as liturgy_urls
from liturgy.api.v1.urls import urlpatterns as api_urls

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include(liturgy_urls)),
    path("api/v1/", include((api_urls, "api"))),
] + static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

handler404 = "core.views.error_404"
