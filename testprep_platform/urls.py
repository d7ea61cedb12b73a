from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # --- Authentication & profile ---
    path('api/', include('users.urls')),

    # --- Catalog & pricing ---
    path('api/', include('catalog.urls')),

    # --- Purchases ---
    path('api/', include('enrollments.urls')),

    # --- Papers, answer sheets, evaluation ---
    path('api/', include('papers.urls')),
    path('api/', include('submissions.urls')),

    # --- Audit log & signed file downloads ---
    path('api/', include('cores.urls')),
]
