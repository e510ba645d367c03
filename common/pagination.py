from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    page_query_param = "page"
    page_size_query_param = "per_page"
    max_page_size = 100

    def get_page_size(self, request):
        self.page_size = getattr(settings, "REPORTS_PAGE_SIZE", 20)
        return super().get_page_size(request)

    def get_paginated_response(self, data):
        return Response(
            {
                "items": data,
                "pagination": {
                    "current_page": self.page.number,
                    "per_page": self.page.paginator.per_page,
                    "total_pages": self.page.paginator.num_pages,
                    "total_count": self.page.paginator.count,
                },
            }
        )
