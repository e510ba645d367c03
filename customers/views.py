from django.db.models import Q
from rest_framework import status
from rest_framework.generics import ListCreateAPIView, RetrieveUpdateDestroyAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsCustomerEditorOrReadOnly
from common.pagination import StandardPagination
from common.utils import parse_bool

from .audit import CustomersAuditService
from .models import Customer
from .serializers import CustomerSerializer


class CustomerListCreateAPIView(ListCreateAPIView):
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated, IsCustomerEditorOrReadOnly]
    pagination_class = StandardPagination

    def get_queryset(self):
        qs = Customer.objects.all()
        params = self.request.query_params

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(address__icontains=q))

        industry = (params.get("industry") or "").strip()
        if industry:
            qs = qs.filter(industry=industry)

        is_active = parse_bool(params.get("is_active"))
        if is_active is not None:
            qs = qs.filter(is_active=is_active)

        return qs.order_by("name", "id")

    def perform_create(self, serializer):
        customer = serializer.save()
        CustomersAuditService.log_customer_created(self.request, customer)


class CustomerDetailAPIView(RetrieveUpdateDestroyAPIView):
    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated, IsCustomerEditorOrReadOnly]

    def perform_update(self, serializer):
        changed = set(serializer.validated_data.keys())
        customer = serializer.save()
        CustomersAuditService.log_customer_updated(self.request, customer, changed)

    def destroy(self, request, *args, **kwargs):
        customer = self.get_object()
        if customer.is_active:
            customer.is_active = False
            customer.save(update_fields=["is_active", "updated_at"])
            CustomersAuditService.log_customer_deactivated(request, customer)
        return Response(status=status.HTTP_204_NO_CONTENT)


class IndustryListAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        industries = (
            Customer.objects.filter(is_active=True)
            .exclude(industry="")
            .values_list("industry", flat=True)
            .distinct()
            .order_by("industry")
        )
        return Response({"items": list(industries)})
