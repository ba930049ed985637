from datetime import timedelta

from django.contrib.auth.models import User
from django.test import override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase, APIClient

from occupancy.models import TableState
from restaurant.models import RestoTable


class OccupancyAPITestCase(APITestCase):
    """Base class seeding today's state rows"""

    fixtures = ['resto_tables.json']

    def setUp(self):
        """Set up test client and data"""
        self.client = APIClient()
        for table_name in ('A1', 'A2'):
            TableState.objects.create(
                table=RestoTable.objects.get(table_name=table_name),
                status=TableState.Status.EMPTY,
            )
        TableState.objects.create(
            table=RestoTable.objects.get(table_name='B1'),
            status=TableState.Status.BUSY,
            guest_count=5,
        )
        # Stale row from yesterday
        TableState.objects.create(
            table=RestoTable.objects.get(table_name='B2'),
            status=TableState.Status.EMPTY,
            timestamp=timezone.now() - timedelta(days=1),
        )


class TableCountsAPITest(OccupancyAPITestCase):
    """API tests for the count endpoints"""

    def test_empty_tables_count(self):
        response = self.client.get(reverse('empty-tables-count'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'emptyTablesCount': 2})

    def test_busy_tables_count(self):
        response = self.client.get(reverse('busy-tables-count'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'busyTablesCount': 1})

    def test_all_table_counts(self):
        response = self.client.get(reverse('all-table-counts'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'emptyTablesCount': 2, 'busyTablesCount': 1})

    def test_counts_url_paths(self):
        """Endpoints are served under /api/ without a trailing slash"""
        self.assertEqual(reverse('all-table-counts'), '/api/all-table-counts')


class TableListingsAPITest(OccupancyAPITestCase):
    """API tests for the listing endpoints"""

    def test_empty_tables(self):
        response = self.client.get(reverse('empty-tables'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('emptyTables', response.data)
        self.assertCountEqual(
            response.data['emptyTables'],
            [
                {'table_name': 'A1', 'seat_capacity': 4},
                {'table_name': 'A2', 'seat_capacity': 2},
            ],
        )

    def test_busy_tables(self):
        response = self.client.get(reverse('busy-tables'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data['busyTables'],
            [{'table_name': 'B1', 'seat_capacity': 6, 'guest_count': 5}],
        )

    def test_overview(self):
        response = self.client.get(reverse('resto-tables'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['emptyTablesCount'], 2)
        self.assertEqual(response.data['busyTablesCount'], 1)
        self.assertEqual(len(response.data['emptyTables']), 2)


class AssignTableAPITest(OccupancyAPITestCase):
    """API tests for the assign endpoint"""

    def setUp(self):
        super().setUp()
        self.url = reverse('assign-table')

    def test_assign_table_success(self):
        response = self.client.post(
            self.url, {'tableName': 'A1', 'guestCount': 3}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Table assigned successfully')
        self.assertEqual(response.data['emptyTablesCount'], 1)
        self.assertEqual(response.data['busyTablesCount'], 2)
        self.assertIn(
            {'table_name': 'A1', 'seat_capacity': 4, 'guest_count': 3},
            response.data['busyTables'],
        )
        self.assertEqual(
            [row['table_name'] for row in response.data['emptyTables']], ['A2']
        )

    def test_assign_stale_table(self):
        """A table last touched yesterday reappears once assigned"""
        response = self.client.post(
            self.url, {'tableName': 'B2', 'guestCount': 6}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['busyTablesCount'], 2)

    def test_assign_unknown_table(self):
        response = self.client.post(
            self.url, {'tableName': 'NOSUCHTABLE', 'guestCount': 2}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['emptyTablesCount'], 2)
        self.assertEqual(response.data['busyTablesCount'], 1)

    def test_assign_long_unknown_table_name(self):
        """Long names are not rejected; like any unknown table they no-op"""
        response = self.client.post(
            self.url, {'tableName': 'X' * 51, 'guestCount': 2}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['emptyTablesCount'], 2)
        self.assertEqual(response.data['busyTablesCount'], 1)

    def test_assign_missing_table_name(self):
        response = self.client.post(self.url, {'guestCount': 2}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('tableName', response.data)

    def test_assign_blank_table_name(self):
        response = self.client.post(
            self.url, {'tableName': '', 'guestCount': 2}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('tableName', response.data)

    def test_assign_zero_guests(self):
        response = self.client.post(
            self.url, {'tableName': 'A1', 'guestCount': 0}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('guestCount', response.data)
        self.assertEqual(TableState.objects.get(table_id='A1').status, TableState.Status.EMPTY)

    def test_assign_non_integer_guests(self):
        response = self.client.post(
            self.url, {'tableName': 'A1', 'guestCount': 'many'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('guestCount', response.data)


class ReleaseTableAPITest(OccupancyAPITestCase):
    """API tests for the release endpoint"""

    def setUp(self):
        super().setUp()
        self.url = reverse('release-table')

    def test_release_table_success(self):
        response = self.client.post(self.url, {'tableName': 'B1'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Table released successfully')
        self.assertEqual(response.data['emptyTablesCount'], 3)
        self.assertEqual(response.data['busyTablesCount'], 0)
        self.assertEqual(response.data['busyTables'], [])

        state = TableState.objects.get(table_id='B1')
        self.assertEqual(state.guest_count, 0)

    def test_release_twice(self):
        first = self.client.post(self.url, {'tableName': 'B1'}, format='json')
        second = self.client.post(self.url, {'tableName': 'B1'}, format='json')

        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data['emptyTablesCount'], second.data['emptyTablesCount'])
        self.assertEqual(first.data['busyTablesCount'], second.data['busyTablesCount'])

    def test_release_long_unknown_table_name(self):
        response = self.client.post(self.url, {'tableName': 'Y' * 120}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['busyTablesCount'], 1)

    def test_release_missing_table_name(self):
        response = self.client.post(self.url, {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('tableName', response.data)


@override_settings(OCCUPANCY_MUTATIONS_REQUIRE_STAFF=True)
class RestrictedMutationsAPITest(OccupancyAPITestCase):
    """Assign/release when mutations are limited to staff"""

    def test_assign_anonymous_rejected(self):
        response = self.client.post(
            reverse('assign-table'), {'tableName': 'A1', 'guestCount': 2}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(TableState.objects.get(table_id='A1').status, TableState.Status.EMPTY)

    def test_assign_non_staff_rejected(self):
        user = User.objects.create_user(username='guest', password='secret')
        self.client.force_authenticate(user=user)

        response = self.client.post(
            reverse('release-table'), {'tableName': 'B1'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_assign_staff_allowed(self):
        user = User.objects.create_user(username='host', password='secret', is_staff=True)
        self.client.force_authenticate(user=user)

        response = self.client.post(
            reverse('assign-table'), {'tableName': 'A1', 'guestCount': 2}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_reads_stay_open(self):
        response = self.client.get(reverse('all-table-counts'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)


class SchemaAPITest(APITestCase):
    def test_schema_available(self):
        response = self.client.get(reverse('schema'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
