# weighbridge_backend/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # -------------------------
    # Admin Panel
    # -------------------------
    path('admin/', admin.site.urls),

    # -------------------------
    # Core (health, serial numbers)
    # -------------------------
    path('api/core/', include('core.urls')),

    # -------------------------
    # Master data (vehicles, parties, products)
    # -------------------------
    path('api/masters/', include('masters.urls')),

    # -------------------------
    # Reports
    # -------------------------
    path('api/reports/', include('reports.urls')),

    # -------------------------
    # Weighments (tickets, bills, tares, capture)
    # -------------------------
    path('api/', include('weighments.urls')),  # keep last, broad patterns
]
