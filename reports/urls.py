from django.urls import path
from .views import WeighmentExportView, WeighmentReportView

urlpatterns = [
    path('weighments/', WeighmentReportView.as_view(), name='weighment-report'),
    path('weighments/export/', WeighmentExportView.as_view(), name='weighment-export'),
]
