from io import StringIO
from datetime import datetime, time, timedelta, timezone as dt_timezone

from django.conf import settings
from django.contrib.auth.models import User
from django.core.management import call_command
from django.db.models import ProtectedError
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from occupancy.models import TableState, TableStateEvent
from occupancy.services.table_state import TableStateService
from occupancy.tasks import seed_missing_table_states
from restaurant.models import RestoTable


class TableStateTestMixin:
    """Shared helpers for occupancy tests"""

    fixtures = ['resto_tables.json']

    def make_state(self, table_name, status=TableState.Status.EMPTY, guest_count=0, days_ago=0):
        return TableState.objects.create(
            table=RestoTable.objects.get(table_name=table_name),
            status=status,
            guest_count=guest_count,
            timestamp=timezone.now() - timedelta(days=days_ago),
        )

    def table_names(self, listing):
        return {row['table_name'] for row in listing}


class TableStateQueryTest(TableStateTestMixin, TestCase):
    """Unit tests for counts and listings"""

    def setUp(self):
        """Set up test data"""
        self.make_state('A1')
        self.make_state('A2')
        self.make_state('B1', status=TableState.Status.BUSY, guest_count=5)
        # Yesterday's row is not part of today's snapshot
        self.make_state('B2', status=TableState.Status.BUSY, guest_count=2, days_ago=1)

    def test_count_by_status(self):
        """Only rows stamped today are counted"""
        self.assertEqual(TableStateService.count_by_status(TableState.Status.EMPTY), 2)
        self.assertEqual(TableStateService.count_by_status(TableState.Status.BUSY), 1)

    def test_count_with_no_rows(self):
        TableState.objects.all().delete()

        self.assertEqual(TableStateService.count_by_status(TableState.Status.EMPTY), 0)
        self.assertEqual(TableStateService.count_by_status(TableState.Status.BUSY), 0)

    def test_counts_never_exceed_todays_rows(self):
        """Empty and busy counts together cover exactly today's rows"""
        counts = TableStateService.counts()
        todays_rows = TableState.objects.filter(
            timestamp__date=timezone.localdate()
        ).count()

        self.assertEqual(
            counts['emptyTablesCount'] + counts['busyTablesCount'], todays_rows
        )

    def test_list_empty_tables(self):
        """Empty listing joins seat capacity and omits guest count"""
        empty_tables = TableStateService.list_by_status(TableState.Status.EMPTY)

        self.assertEqual(len(empty_tables), 2)
        self.assertIn({'table_name': 'A1', 'seat_capacity': 4}, empty_tables)
        self.assertIn({'table_name': 'A2', 'seat_capacity': 2}, empty_tables)

    def test_list_busy_tables(self):
        """Busy listing includes the guest count"""
        busy_tables = TableStateService.list_by_status(TableState.Status.BUSY)

        self.assertEqual(
            busy_tables, [{'table_name': 'B1', 'seat_capacity': 6, 'guest_count': 5}]
        )

    def test_snapshot_shape(self):
        snapshot = TableStateService.snapshot()

        self.assertEqual(
            set(snapshot),
            {'emptyTablesCount', 'busyTablesCount', 'emptyTables', 'busyTables'},
        )

    def test_overview_shape(self):
        overview = TableStateService.overview()

        self.assertEqual(overview['emptyTablesCount'], 2)
        self.assertEqual(overview['busyTablesCount'], 1)
        self.assertEqual(self.table_names(overview['emptyTables']), {'A1', 'A2'})
        self.assertNotIn('busyTables', overview)


class TableTransitionTest(TableStateTestMixin, TestCase):
    """Unit tests for assign and release"""

    def setUp(self):
        """Set up test data"""
        self.make_state('A1')
        self.make_state('A2')

    def test_assign_empty_table(self):
        """Assigning moves the table from the empty to the busy listing"""
        result = TableStateService.assign_table('A1', 4)

        self.assertTrue(result['success'])
        self.assertEqual(result['message'], 'Table assigned successfully')

        empty_tables = TableStateService.list_by_status(TableState.Status.EMPTY)
        busy_tables = TableStateService.list_by_status(TableState.Status.BUSY)
        self.assertNotIn('A1', self.table_names(empty_tables))
        self.assertIn({'table_name': 'A1', 'seat_capacity': 4, 'guest_count': 4}, busy_tables)

    def test_assign_returns_refreshed_snapshot(self):
        result = TableStateService.assign_table('A1', 3)

        self.assertEqual(result['emptyTablesCount'], 1)
        self.assertEqual(result['busyTablesCount'], 1)
        self.assertEqual(self.table_names(result['emptyTables']), {'A2'})
        self.assertEqual(self.table_names(result['busyTables']), {'A1'})

    def test_reassign_busy_table_overwrites_guest_count(self):
        TableStateService.assign_table('A1', 2)
        TableStateService.assign_table('A1', 4)

        state = TableState.objects.get(table_id='A1')
        self.assertEqual(state.status, TableState.Status.BUSY)
        self.assertEqual(state.guest_count, 4)

    def test_release_after_assign(self):
        """Releasing resets the guest count and frees the table"""
        TableStateService.assign_table('A1', 4)
        result = TableStateService.release_table('A1')

        self.assertTrue(result['success'])
        self.assertEqual(result['message'], 'Table released successfully')

        state = TableState.objects.get(table_id='A1')
        self.assertEqual(state.status, TableState.Status.EMPTY)
        self.assertEqual(state.guest_count, 0)
        self.assertNotIn('A1', self.table_names(result['busyTables']))
        self.assertIn('A1', self.table_names(result['emptyTables']))

    def test_release_is_idempotent(self):
        TableStateService.assign_table('A1', 4)
        once = TableStateService.release_table('A1')
        twice = TableStateService.release_table('A1')

        self.assertEqual(once['emptyTablesCount'], twice['emptyTablesCount'])
        self.assertEqual(once['busyTablesCount'], twice['busyTablesCount'])
        self.assertEqual(
            self.table_names(once['emptyTables']), self.table_names(twice['emptyTables'])
        )

    def test_transition_refreshes_timestamp(self):
        state = self.make_state('B1', days_ago=2)

        TableStateService.assign_table('B1', 2)
        state.refresh_from_db()

        self.assertEqual(timezone.localtime(state.timestamp).date(), timezone.localdate())

    def test_assign_table_without_todays_row(self):
        """A table whose only row is from yesterday shows up once assigned"""
        self.make_state('B2', days_ago=1)
        empty_tables = TableStateService.list_by_status(TableState.Status.EMPTY)
        busy_tables = TableStateService.list_by_status(TableState.Status.BUSY)
        self.assertNotIn('B2', self.table_names(empty_tables))
        self.assertNotIn('B2', self.table_names(busy_tables))
        busy_before = TableStateService.count_by_status(TableState.Status.BUSY)

        TableStateService.assign_table('B2', 3)

        self.assertIn(
            {'table_name': 'B2', 'seat_capacity': 8, 'guest_count': 3},
            TableStateService.list_by_status(TableState.Status.BUSY),
        )
        self.assertEqual(
            TableStateService.count_by_status(TableState.Status.BUSY), busy_before + 1
        )

    def test_assign_unknown_table_is_noop(self):
        """Tables without a state row are silently left alone"""
        before = TableStateService.snapshot()

        result = TableStateService.assign_table('NOSUCHTABLE', 2)

        self.assertTrue(result['success'])
        self.assertEqual(result['emptyTablesCount'], before['emptyTablesCount'])
        self.assertEqual(result['busyTablesCount'], before['busyTablesCount'])
        self.assertFalse(TableStateEvent.objects.exists())

    def test_release_unknown_table_is_noop(self):
        result = TableStateService.release_table('NOSUCHTABLE')

        self.assertTrue(result['success'])
        self.assertEqual(result['emptyTablesCount'], 2)

    def test_transitions_are_recorded(self):
        TableStateService.assign_table('A1', 4)
        TableStateService.release_table('A1')

        events = list(
            TableStateEvent.objects.filter(table_name='A1')
            .order_by('id')
            .values_list('status', 'guest_count')
        )
        self.assertEqual(events, [('busy', 4), ('empty', 0)])


class TableTransitionValidationTest(TableStateTestMixin, TestCase):
    """Precondition checks on assign and release"""

    def setUp(self):
        self.make_state('A1')

    def test_assign_blank_table_name(self):
        with self.assertRaises(ValidationError) as ctx:
            TableStateService.assign_table('', 2)
        self.assertIn('tableName', ctx.exception.detail)

    def test_assign_zero_guests(self):
        with self.assertRaises(ValidationError) as ctx:
            TableStateService.assign_table('A1', 0)
        self.assertIn('guestCount', ctx.exception.detail)

    def test_assign_non_integer_guests(self):
        with self.assertRaises(ValidationError):
            TableStateService.assign_table('A1', '3')
        with self.assertRaises(ValidationError):
            TableStateService.assign_table('A1', True)

    def test_release_blank_table_name(self):
        with self.assertRaises(ValidationError):
            TableStateService.release_table('')
        with self.assertRaises(ValidationError):
            TableStateService.release_table(None)

    def test_failed_validation_does_not_mutate(self):
        with self.assertRaises(ValidationError):
            TableStateService.assign_table('A1', 0)

        state = TableState.objects.get(table_id='A1')
        self.assertEqual(state.status, TableState.Status.EMPTY)
        self.assertFalse(TableStateEvent.objects.exists())


class SeedTableStatesTest(TableStateTestMixin, TestCase):
    """Seeding state rows for catalog tables"""

    def test_seed_missing_states(self):
        existing = self.make_state('A1', status=TableState.Status.BUSY, guest_count=2)

        created = TableStateService.seed_missing_states()

        self.assertEqual(created, 3)
        self.assertEqual(TableState.objects.count(), 4)
        existing.refresh_from_db()
        self.assertEqual(existing.status, TableState.Status.BUSY)
        self.assertEqual(existing.guest_count, 2)

    def test_seed_is_idempotent(self):
        TableStateService.seed_missing_states()

        self.assertEqual(TableStateService.seed_missing_states(), 0)
        self.assertEqual(TableState.objects.count(), 4)

    def test_seed_command(self):
        out = StringIO()
        call_command('seed_table_states', stdout=out)

        self.assertIn('Seeded 4 table states', out.getvalue())
        self.assertEqual(TableStateService.count_by_status(TableState.Status.EMPTY), 4)

    def test_seed_task_leaves_existing_rows_alone(self):
        """Periodic seeding never re-stamps or re-counts older rows"""
        stale = self.make_state('A1', status=TableState.Status.BUSY, guest_count=3, days_ago=1)
        stamped_at = stale.timestamp

        result = seed_missing_table_states()

        self.assertEqual(result, {'seeded_count': 3})
        stale.refresh_from_db()
        self.assertEqual(stale.timestamp, stamped_at)
        self.assertEqual(stale.status, TableState.Status.BUSY)
        self.assertEqual(stale.guest_count, 3)
        self.assertEqual(TableStateService.count_by_status(TableState.Status.BUSY), 0)
        self.assertFalse(TableStateEvent.objects.exists())


class ServerTimezoneTest(TableStateTestMixin, TestCase):
    """Today's date is taken in the server's configured timezone"""

    def local_timestamp(self, day, hour, minute=0):
        return timezone.make_aware(datetime.combine(day, time(hour, minute)))

    @override_settings(TIME_ZONE='Pacific/Kiritimati')
    def test_early_morning_row_counts_by_local_date(self):
        """01:00 at UTC+14 falls on the previous UTC day but counts as today"""
        today = timezone.localdate()
        state = self.make_state('A1')
        state.timestamp = self.local_timestamp(today, 1)
        state.save(update_fields=['timestamp'])

        self.assertNotEqual(state.timestamp.astimezone(dt_timezone.utc).date(), today)
        self.assertEqual(TableStateService.count_by_status(TableState.Status.EMPTY), 1)
        self.assertEqual(
            self.table_names(TableStateService.list_by_status(TableState.Status.EMPTY)),
            {'A1'},
        )

    @override_settings(TIME_ZONE='Pacific/Pago_Pago')
    def test_late_evening_row_excluded_by_local_date(self):
        """23:30 yesterday at UTC-11 is already today in UTC but not counted"""
        yesterday = timezone.localdate() - timedelta(days=1)
        state = self.make_state('A1', status=TableState.Status.BUSY, guest_count=2)
        state.timestamp = self.local_timestamp(yesterday, 23, 30)
        state.save(update_fields=['timestamp'])

        self.assertEqual(
            state.timestamp.astimezone(dt_timezone.utc).date(), timezone.localdate()
        )
        self.assertEqual(TableStateService.count_by_status(TableState.Status.BUSY), 0)
        self.assertEqual(TableStateService.list_by_status(TableState.Status.BUSY), [])


class ReleaseTablesTest(TableStateTestMixin, TestCase):
    """Bulk release used by the admin action"""

    def setUp(self):
        self.make_state('A1', status=TableState.Status.BUSY, guest_count=2)
        self.make_state('A2', status=TableState.Status.BUSY, guest_count=4)
        self.make_state('B1', status=TableState.Status.BUSY, guest_count=6)

    def test_release_tables(self):
        updated = TableStateService.release_tables(['A1', 'A2', 'NOSUCHTABLE'])

        self.assertEqual(updated, 2)
        self.assertEqual(TableStateService.count_by_status(TableState.Status.EMPTY), 2)
        self.assertEqual(
            self.table_names(TableStateService.list_by_status(TableState.Status.BUSY)),
            {'B1'},
        )
        self.assertEqual(
            set(TableStateEvent.objects.values_list('table_name', 'status', 'guest_count')),
            {('A1', 'empty', 0), ('A2', 'empty', 0)},
        )

    def test_release_tables_rejects_blank_name(self):
        with self.assertRaises(ValidationError):
            TableStateService.release_tables(['A1', ''])

        self.assertEqual(TableStateService.count_by_status(TableState.Status.BUSY), 3)

    def test_admin_release_action(self):
        admin_user = User.objects.create_superuser(
            username='admin', email='admin@example.com', password='secret'
        )
        self.client.force_login(admin_user)
        selected = TableState.objects.filter(table_id__in=['A1', 'B1'])

        response = self.client.post(
            reverse('admin:occupancy_tablestate_changelist'),
            {
                'action': 'release_selected',
                '_selected_action': [str(pk) for pk in selected.values_list('pk', flat=True)],
            },
        )

        self.assertEqual(response.status_code, 302)
        self.assertEqual(
            self.table_names(TableStateService.list_by_status(TableState.Status.BUSY)),
            {'A2'},
        )
        self.assertEqual(TableStateEvent.objects.count(), 2)


class CatalogDeletionTest(TableStateTestMixin, TestCase):
    def test_catalog_table_with_states_cannot_be_deleted(self):
        self.make_state('A1')

        with self.assertRaises(ProtectedError):
            RestoTable.objects.get(table_name='A1').delete()

        self.assertTrue(TableState.objects.filter(table_id='A1').exists())


class OccupancySettingsTest(TestCase):
    def test_env_schema_types(self):
        """Flags come from the environ schema as booleans"""
        self.assertIs(settings.OCCUPANCY_MUTATIONS_REQUIRE_STAFF, False)
        self.assertIsInstance(settings.DEBUG, bool)
