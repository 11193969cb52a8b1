from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('apps.catalog.api.urls')),
    path('api/', include('apps.mailer.urls')),
    path('', include('apps.catalog.urls')),
]
