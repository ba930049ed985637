from rest_framework.viewsets import ReadOnlyModelViewSet
from django_filters.rest_framework import DjangoFilterBackend

from .models import RestoTable
from .serializers import RestoTableSerializer


class RestoTableViewSet(ReadOnlyModelViewSet):
    """
    Read-only access to the table catalog.
    Catalog changes go through the admin site.
    """

    queryset = RestoTable.objects.all()
    serializer_class = RestoTableSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = {
        "seat_capacity": ["exact", "gte", "lte"],
    }
