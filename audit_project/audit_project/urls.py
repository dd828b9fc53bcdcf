from django.contrib import admin
from django.urls import path


urlpatterns = [
    # DJANGO ADMIN (TARGETS, EMAIL SETTINGS, NOTIFICATIONS)
    path("admin/", admin.site.urls),
]
