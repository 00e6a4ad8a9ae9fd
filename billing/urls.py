"""URL configuration for billing app."""

from django.urls import path

from . import views

urlpatterns = [
    path("api/invoices/<int:invoice_id>/buyer/", views.invoice_buyer_update_api, name="invoice_buyer_update_api"),
]
