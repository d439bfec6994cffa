from django.urls import path

from .views import (
    CompanyInfoRatingView, CompanyInfoView, ESGDataView, ESGPointsUpdateView,
    ESGRecordListView, ESGReviewView, ESGSubmitView, ESGUpdateView,
    admin_dashboard_api, supplier_dashboard_api,
)

urlpatterns = [
    # ESG record lifecycle
    path('esg/update/', ESGUpdateView.as_view(), name='esg-update'),
    path('esg/data/', ESGDataView.as_view(), name='esg-data'),
    path('esg/submit/', ESGSubmitView.as_view(), name='esg-submit'),
    path('esg/review/<int:record_id>/', ESGReviewView.as_view(), name='esg-review'),
    path('esg/update-points/', ESGPointsUpdateView.as_view(), name='esg-update-points'),
    path('esg/all/', ESGRecordListView.as_view(), name='esg-all'),

    # Company information
    path('company-info/', CompanyInfoView.as_view(), name='company-info'),
    path('company-info/rating/', CompanyInfoRatingView.as_view(), name='company-info-rating'),

    # Dashboards
    path('dashboard/', supplier_dashboard_api, name='esg-dashboard'),
    path('admin/dashboard/', admin_dashboard_api, name='admin-dashboard'),
]
