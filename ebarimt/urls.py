"""URL configuration for ebarimt app."""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from . import views
from . import views_auth

urlpatterns = [
    path("api/token/", views_auth.StaffTokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/ebarimt/invoices/<int:invoice_id>/issue/", views.api_issue_ebarimt, name="ebarimt_issue"),
    path("api/ebarimt/invoices/<int:invoice_id>/refund/", views.api_refund_ebarimt, name="ebarimt_refund"),
    path("api/ebarimt/posapi/info/", views.api_posapi_info, name="ebarimt_posapi_info"),
    path("api/ebarimt/posapi/send/", views.api_posapi_send, name="ebarimt_posapi_send"),
    path("api/ebarimt/bank-accounts/", views.api_bank_accounts, name="ebarimt_bank_accounts"),
    path("api/ebarimt/operator/merchant-request/", views.api_operator_merchant_request, name="ebarimt_operator_merchant_request"),
    path("api/ebarimt/operator/merchant-request/<int:pk>/approve/", views.api_operator_merchant_approve, name="ebarimt_operator_merchant_approve"),
    path("api/ebarimt/operator/merchant-request/<int:pk>/", views.api_operator_merchant_detail, name="ebarimt_operator_merchant_detail"),
]
