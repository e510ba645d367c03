from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .health import health_check

admin.site.site_header = "営業日報 管理"
admin.site.site_title = "営業日報 管理画面"
admin.site.index_title = "システム管理"

urlpatterns = [
    path("health/", health_check, name="health"),
    path("admin/", admin.site.urls),

    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    path("api/v1/", include("accounts.urls")),
    path("api/v1/", include("customers.urls")),
    path("api/v1/", include("reports.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
