"""
Pagination for API list endpoints.
"""

from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """
    Page-number pagination with a client-selectable page size.

    ``?page=2&page_size=20``; the page size is capped at ``max_page_size``.
    """

    page_size = 50
    page_size_query_param = "page_size"
    max_page_size = 200
