from django.db import IntegrityError, transaction
from django.urls import reverse
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase, APIClient

from restaurant.models import RestoTable


class RestoTableModelTest(TestCase):
    """Unit tests for the table catalog"""

    fixtures = ['resto_tables.json']

    def test_str(self):
        self.assertEqual(str(RestoTable.objects.get(pk='A1')), 'A1 (4 seats)')

    def test_seat_capacity_must_be_positive(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            RestoTable.objects.create(table_name='Z9', seat_capacity=0)


class RestoTableAPITest(APITestCase):
    """API tests for the read-only catalog endpoints"""

    fixtures = ['resto_tables.json']

    def setUp(self):
        self.client = APIClient()
        self.url = reverse('restotable-list')

    def test_list_tables(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [row['table_name'] for row in response.data], ['A1', 'A2', 'B1', 'B2']
        )

    def test_filter_by_seat_capacity(self):
        response = self.client.get(self.url, {'seat_capacity__gte': 6})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['table_name'] for row in response.data], ['B1', 'B2'])

    def test_retrieve_table(self):
        response = self.client.get(reverse('restotable-detail', kwargs={'pk': 'B1'}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'table_name': 'B1', 'seat_capacity': 6})

    def test_catalog_is_read_only(self):
        response = self.client.post(self.url, {'table_name': 'C1', 'seat_capacity': 2}, format='json')

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
