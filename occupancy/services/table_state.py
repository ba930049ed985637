# occupancy/services/table_state.py

import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from occupancy.models import TableState, TableStateEvent
from restaurant.models import RestoTable

logger = logging.getLogger(__name__)


class TableStateService:
    """
    Service class for table occupancy queries and transitions.
    """

    ASSIGNED_MESSAGE = "Table assigned successfully"
    RELEASED_MESSAGE = "Table released successfully"

    @staticmethod
    def _today_states(status: str):
        """
        Internal helper returning today's state rows for the given status.
        "Today" is the calendar date in the configured server timezone.
        """
        return TableState.objects.filter(
            status=status,
            timestamp__date=timezone.localdate(),
        )

    @staticmethod
    def _validate_table_name(table_name) -> str:
        if not isinstance(table_name, str) or not table_name.strip():
            raise ValidationError({"tableName": ["A non-empty table name is required."]})
        return table_name

    @staticmethod
    def _validate_guest_count(guest_count) -> int:
        if isinstance(guest_count, bool) or not isinstance(guest_count, int):
            raise ValidationError({"guestCount": ["A valid integer is required."]})
        if guest_count < 1:
            raise ValidationError(
                {"guestCount": ["Ensure this value is greater than or equal to 1."]}
            )
        return guest_count

    @classmethod
    def count_by_status(cls, status: str) -> int:
        return cls._today_states(status).count()

    @classmethod
    def list_by_status(cls, status: str) -> list:
        """
        Join today's state rows with the catalog.
        Busy listings also carry the guest count.
        """
        extra = ["guest_count"] if status == TableState.Status.BUSY else []

        return list(
            cls._today_states(status).values(
                *extra,
                table_name=F("table__table_name"),
                seat_capacity=F("table__seat_capacity"),
            )
        )

    @classmethod
    def counts(cls) -> dict:
        return {
            "emptyTablesCount": cls.count_by_status(TableState.Status.EMPTY),
            "busyTablesCount": cls.count_by_status(TableState.Status.BUSY),
        }

    @classmethod
    def snapshot(cls) -> dict:
        """
        Counts plus both listings, returned after every transition so the
        caller can resynchronize without a second request.
        """
        return {
            **cls.counts(),
            "emptyTables": cls.list_by_status(TableState.Status.EMPTY),
            "busyTables": cls.list_by_status(TableState.Status.BUSY),
        }

    @classmethod
    def overview(cls) -> dict:
        """Payload for the front-of-house dashboard page."""
        return {
            **cls.counts(),
            "emptyTables": cls.list_by_status(TableState.Status.EMPTY),
        }

    @staticmethod
    def _write_transition(table_names, status: str, guest_count: int) -> int:
        """
        Update every state row of the given tables and record one event per
        changed row. Returns the number of rows updated.
        """
        changed = list(
            TableState.objects.select_for_update()
            .filter(table_id__in=table_names)
            .values_list("table_id", flat=True)
        )
        if not changed:
            return 0

        TableState.objects.filter(table_id__in=table_names).update(
            status=status,
            guest_count=guest_count,
            timestamp=timezone.now(),
        )
        TableStateEvent.objects.bulk_create(
            TableStateEvent(table_name=name, status=status, guest_count=guest_count)
            for name in changed
        )
        return len(changed)

    @classmethod
    def _apply_transition(
        cls, table_name: str, status: str, guest_count: int, message: str
    ) -> dict:
        """
        Update the table's state rows and re-read the snapshot
        inside one transaction.
        Tables without a state row are left untouched.
        """
        with transaction.atomic():
            updated = cls._write_transition([table_name], status, guest_count)

            if updated:
                logger.info(
                    f"Table {table_name} set to {status} "
                    f"(guests={guest_count}, rows={updated})"
                )
            else:
                logger.warning(f"No state row for table {table_name}; nothing updated")

            snapshot = cls.snapshot()

        return {"success": True, "message": message, **snapshot}

    @classmethod
    def assign_table(cls, table_name: str, guest_count: int) -> dict:
        """
        Mark a table busy with the given number of guests.
        Re-assigning a busy table overwrites its guest count.
        """
        table_name = cls._validate_table_name(table_name)
        guest_count = cls._validate_guest_count(guest_count)

        return cls._apply_transition(
            table_name, TableState.Status.BUSY, guest_count, cls.ASSIGNED_MESSAGE
        )

    @classmethod
    def release_table(cls, table_name: str) -> dict:
        """
        Mark a table empty. Releasing an empty table is a harmless overwrite.
        """
        table_name = cls._validate_table_name(table_name)

        return cls._apply_transition(
            table_name, TableState.Status.EMPTY, 0, cls.RELEASED_MESSAGE
        )

    @classmethod
    def release_tables(cls, table_names) -> int:
        """
        Free several tables in one update, without building a snapshot.
        Used by the admin bulk action.
        """
        table_names = {cls._validate_table_name(name) for name in table_names}

        with transaction.atomic():
            updated = cls._write_transition(table_names, TableState.Status.EMPTY, 0)

        logger.info(f"Released {len(table_names)} tables (rows={updated})")
        return updated

    @classmethod
    def seed_missing_states(cls) -> int:
        """
        Create an empty state row for every catalog table that has none.
        Existing rows are never modified.
        """
        missing = RestoTable.objects.filter(states__isnull=True)
        created = TableState.objects.bulk_create(
            TableState(table=table, status=TableState.Status.EMPTY, guest_count=0)
            for table in missing
        )
        logger.info(f"Seeded {len(created)} missing table states")
        return len(created)
