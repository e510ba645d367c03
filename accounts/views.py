from django.contrib.auth import authenticate
from django.db.models import Q
from rest_framework import status
from rest_framework.generics import ListCreateAPIView, RetrieveUpdateDestroyAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.pagination import StandardPagination
from common.utils import parse_bool

from .audit import AccountsAuditService
from .models import Position, User
from .permissions import IsSalespersonAdmin
from .serializers import (
    LoginSerializer,
    PasswordChangeSerializer,
    PositionSerializer,
    SalespersonSerializer,
    UserSerializer,
)
from .throttles import LoginRateThrottle
from .tokens import CustomTokenObtainPairSerializer


# ================= LOGIN =================

class LoginView(APIView):
    authentication_classes = []
    permission_classes = []
    throttle_classes = [LoginRateThrottle]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        login = serializer.validated_data["username"].strip()
        password = serializer.validated_data["password"]

        existing_user = User.objects.filter(username=login).first()
        if not existing_user:
            existing_user = User.objects.filter(email__iexact=login).first()

        auth_username = existing_user.username if existing_user else login
        user = authenticate(request, username=auth_username, password=password)

        if user is None:
            # inactive accounts fail authenticate() even with the right password
            if existing_user and not existing_user.is_active and existing_user.check_password(password):
                AccountsAuditService.log_login_blocked(request, existing_user)
                return Response({"detail": "User blocked"}, status=status.HTTP_403_FORBIDDEN)

            AccountsAuditService.log_login_failed(request, login, existing_user)
            return Response({"detail": "Invalid credentials"}, status=status.HTTP_400_BAD_REQUEST)

        if user.is_blocked:
            AccountsAuditService.log_login_blocked(request, user)
            return Response({"detail": "User blocked"}, status=status.HTTP_403_FORBIDDEN)

        refresh = CustomTokenObtainPairSerializer.get_token(user)
        AccountsAuditService.log_login_success(request, user)

        return Response({
            "access": str(refresh.access_token),
            "refresh": str(refresh),
            "user": UserSerializer(user).data,
        })


# ================= PROFILE =================

class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class PasswordChangeView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request):
        serializer = PasswordChangeSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        request.user.set_password(serializer.validated_data["new_password"])
        request.user.save(update_fields=["password"])
        AccountsAuditService.log_password_changed(request)
        return Response({"detail": "Password changed successfully."}, status=status.HTTP_200_OK)


# ================= POSITIONS =================

class PositionListAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        positions = Position.objects.all()
        return Response({"items": PositionSerializer(positions, many=True).data})


# ================= SALESPERSONS =================

def _duplicate_email_response():
    return Response(
        {"code": "DUPLICATE_EMAIL", "detail": "This email address is already registered."},
        status=status.HTTP_409_CONFLICT,
    )


def _email_taken(email: str, exclude_pk=None) -> bool:
    qs = User.objects.filter(email__iexact=email)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


class SalespersonListCreateAPIView(ListCreateAPIView):
    serializer_class = SalespersonSerializer
    permission_classes = [IsAuthenticated, IsSalespersonAdmin]
    pagination_class = StandardPagination

    def get_queryset(self):
        qs = User.objects.select_related("position")
        params = self.request.query_params

        position_id = params.get("position_id")
        if position_id and position_id.isdigit():
            qs = qs.filter(position_id=int(position_id))

        is_active = parse_bool(params.get("is_active"))
        if is_active is not None:
            qs = qs.filter(is_active=is_active)

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(username__icontains=q)
                | Q(email__icontains=q)
                | Q(first_name__icontains=q)
                | Q(last_name__icontains=q)
            )

        return qs.order_by("id")

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if _email_taken(serializer.validated_data["email"]):
            return _duplicate_email_response()

        user = serializer.save()
        AccountsAuditService.log_salesperson_created(request, user)
        return Response(self.get_serializer(user).data, status=status.HTTP_201_CREATED)


class SalespersonDetailAPIView(RetrieveUpdateDestroyAPIView):
    queryset = User.objects.select_related("position")
    serializer_class = SalespersonSerializer
    permission_classes = [IsAuthenticated, IsSalespersonAdmin]

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data.get("email")
        if email and _email_taken(email, exclude_pk=instance.pk):
            return _duplicate_email_response()

        changed = set(serializer.validated_data.keys())
        user = serializer.save()
        AccountsAuditService.log_salesperson_updated(request, user, changed)
        return Response(self.get_serializer(user).data)

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response(
                {"code": "FORBIDDEN", "detail": "You cannot deactivate your own account."},
                status=status.HTTP_403_FORBIDDEN,
            )
        if user.is_active:
            user.is_active = False
            user.save(update_fields=["is_active"])
            AccountsAuditService.log_salesperson_deactivated(request, user)
        return Response(status=status.HTTP_204_NO_CONTENT)
