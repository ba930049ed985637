from django.core.management.base import BaseCommand

from occupancy.services.table_state import TableStateService


class Command(BaseCommand):
    help = 'Create an empty state row for every catalog table that has none'

    def handle(self, *args, **kwargs):
        created = TableStateService.seed_missing_states()
        self.stdout.write(self.style.SUCCESS(f'Seeded {created} table states'))
