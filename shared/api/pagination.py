"""Canonical paged list returned by every paged endpoint."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework.pagination import PageNumberPagination  # type: ignore
from rest_framework.response import Response  # type: ignore


class StandardPagination(PageNumberPagination):
    """
    ``{"data": [...], "total", "per_page", "current_page", "last_page"}``

    An empty result still reports ``current_page=1`` and ``last_page=1``.
    """

    page_size_query_param = "per_page"

    def __init__(self) -> None:
        self.page_size = getattr(settings, "STAYBOOK_PAGE_SIZE", 20)
        self.max_page_size = getattr(settings, "STAYBOOK_MAX_PAGE_SIZE", 100)

    def get_paginated_response(self, data):  # type: ignore
        paginator = self.page.paginator
        return Response(
            {
                "data": data,
                "total": paginator.count,
                "per_page": paginator.per_page,
                "current_page": self.page.number,
                "last_page": paginator.num_pages,
            }
        )

    def get_paginated_response_schema(self, schema):  # type: ignore
        return {
            "type": "object",
            "properties": {
                "data": schema,
                "total": {"type": "integer"},
                "per_page": {"type": "integer"},
                "current_page": {"type": "integer"},
                "last_page": {"type": "integer"},
            },
        }
