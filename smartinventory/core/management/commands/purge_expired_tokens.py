from django.core.management.base import BaseCommand

from smartinventory.core import tokens


class Command(BaseCommand):
    help = 'Delete issued token records that have expired'

    def handle(self, *args, **options):
        deleted = tokens.purge_expired_tokens()
        self.stdout.write(self.style.SUCCESS(f'Purged {deleted} expired tokens'))
