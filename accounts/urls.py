from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    LoginView,
    MeView,
    PasswordChangeView,
    PositionListAPIView,
    SalespersonDetailAPIView,
    SalespersonListCreateAPIView,
)

urlpatterns = [
    # AUTH
    path("auth/login/", LoginView.as_view(), name="auth-login"),
    path("auth/refresh/", TokenRefreshView.as_view(), name="auth-refresh"),
    path("auth/me/", MeView.as_view(), name="auth-me"),
    path("auth/password/", PasswordChangeView.as_view(), name="auth-password"),

    # SALESPERSONS
    path("salespersons/", SalespersonListCreateAPIView.as_view(), name="salesperson-list"),
    path("salespersons/<int:pk>/", SalespersonDetailAPIView.as_view(), name="salesperson-detail"),

    # POSITIONS
    path("positions/", PositionListAPIView.as_view(), name="position-list"),
]
