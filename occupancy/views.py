from rest_framework.views import APIView
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiResponse

from occupancy.models import TableState
from occupancy.serializers import (
    AssignTableSerializer,
    ReleaseTableSerializer,
    EmptyTablesCountSerializer,
    BusyTablesCountSerializer,
    TableCountsSerializer,
    EmptyTablesSerializer,
    BusyTablesSerializer,
    TableOverviewSerializer,
    TableSnapshotSerializer,
)
from occupancy.services.table_state import TableStateService
from config import permissions


class EmptyTablesCountView(APIView):
    """
    Number of tables currently empty today.
    """

    @extend_schema(responses={200: EmptyTablesCountSerializer})
    def get(self, request):
        return Response(
            {
                "emptyTablesCount": TableStateService.count_by_status(
                    TableState.Status.EMPTY
                )
            }
        )


class BusyTablesCountView(APIView):
    """
    Number of tables currently busy today.
    """

    @extend_schema(responses={200: BusyTablesCountSerializer})
    def get(self, request):
        return Response(
            {
                "busyTablesCount": TableStateService.count_by_status(
                    TableState.Status.BUSY
                )
            }
        )


class AllTableCountsView(APIView):
    @extend_schema(responses={200: TableCountsSerializer})
    def get(self, request):
        return Response(TableStateService.counts())


class EmptyTablesView(APIView):
    """
    Empty tables with their seat capacity.
    """

    @extend_schema(responses={200: EmptyTablesSerializer})
    def get(self, request):
        return Response(
            {"emptyTables": TableStateService.list_by_status(TableState.Status.EMPTY)}
        )


class BusyTablesView(APIView):
    """
    Busy tables with their seat capacity and guest count.
    """

    @extend_schema(responses={200: BusyTablesSerializer})
    def get(self, request):
        return Response(
            {"busyTables": TableStateService.list_by_status(TableState.Status.BUSY)}
        )


class TableOverviewView(APIView):
    """
    Dashboard payload for the front-of-house tables page.
    """

    @extend_schema(responses={200: TableOverviewSerializer})
    def get(self, request):
        return Response(TableStateService.overview())


class AssignTableView(APIView):
    """
    API endpoint to seat guests at a table.
    Returns the refreshed counts and listings.
    """

    permission_classes = [permissions.CanChangeTableState]

    @extend_schema(
        summary="Assign a table",
        request=AssignTableSerializer,
        responses={
            200: TableSnapshotSerializer,
            400: OpenApiResponse(description="Missing or invalid tableName / guestCount"),
        },
    )
    def post(self, request):
        serializer = AssignTableSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = TableStateService.assign_table(
            table_name=data["tableName"],
            guest_count=data["guestCount"],
        )
        return Response(result)


class ReleaseTableView(APIView):
    """
    API endpoint to free a table.
    Returns the refreshed counts and listings.
    """

    permission_classes = [permissions.CanChangeTableState]

    @extend_schema(
        summary="Release a table",
        request=ReleaseTableSerializer,
        responses={
            200: TableSnapshotSerializer,
            400: OpenApiResponse(description="Missing or invalid tableName"),
        },
    )
    def post(self, request):
        serializer = ReleaseTableSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = TableStateService.release_table(
            table_name=serializer.validated_data["tableName"]
        )
        return Response(result)
