from rest_framework import serializers


class ReleaseTableSerializer(serializers.Serializer):
    """
    Serializer for table release requests.
    """

    tableName = serializers.CharField()


class AssignTableSerializer(ReleaseTableSerializer):
    """
    Serializer for table assignment requests.
    """

    guestCount = serializers.IntegerField(min_value=1)


class TableListingSerializer(serializers.Serializer):
    table_name = serializers.CharField()
    seat_capacity = serializers.IntegerField()


class BusyTableListingSerializer(TableListingSerializer):
    guest_count = serializers.IntegerField()


class EmptyTablesCountSerializer(serializers.Serializer):
    emptyTablesCount = serializers.IntegerField()


class BusyTablesCountSerializer(serializers.Serializer):
    busyTablesCount = serializers.IntegerField()


class TableCountsSerializer(EmptyTablesCountSerializer, BusyTablesCountSerializer):
    pass


class EmptyTablesSerializer(serializers.Serializer):
    emptyTables = TableListingSerializer(many=True)


class BusyTablesSerializer(serializers.Serializer):
    busyTables = BusyTableListingSerializer(many=True)


class TableOverviewSerializer(TableCountsSerializer, EmptyTablesSerializer):
    """
    Dashboard payload: both counts plus the empty tables.
    """


class TableSnapshotSerializer(TableOverviewSerializer, BusyTablesSerializer):
    """
    Result of a table transition, including the refreshed snapshot.
    """

    success = serializers.BooleanField()
    message = serializers.CharField()
