"""Pagination classes shared by the API views."""

from rest_framework.pagination import LimitOffsetPagination


class OrderHistoryPagination(LimitOffsetPagination):
    """Newest-first order history, restartable via ``limit`` / ``offset``.

    ``limit`` defaults to ``PAGE_SIZE``.
    """

    max_limit = 1000

    def set_window(self, request, limit: int, offset: int, count: int) -> None:
        """Prime the paginator for a page fetched outside ``paginate_queryset``."""
        self.request = request
        self.limit = limit
        self.offset = offset
        self.count = count
