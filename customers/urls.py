from django.urls import path

from .views import CustomerDetailAPIView, CustomerListCreateAPIView, IndustryListAPIView


urlpatterns = [
    path("customers/", CustomerListCreateAPIView.as_view(), name="customer-list"),
    path("customers/<int:pk>/", CustomerDetailAPIView.as_view(), name="customer-detail"),
    path("industries/", IndustryListAPIView.as_view(), name="industry-list"),
]
