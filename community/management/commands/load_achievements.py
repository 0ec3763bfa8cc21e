import logging

from django.core.management.base import BaseCommand
from django.db import transaction

from community.achievement_catalog import ACHIEVEMENTS
from community.models import Achievement

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Create or update the built-in achievement definitions (matched by code)."

    def handle(self, *args, **options):
        created_count = 0
        with transaction.atomic():
            for definition in ACHIEVEMENTS:
                values = {key: value for key, value in definition.items() if key != 'code'}
                _, created = Achievement.objects.update_or_create(code=definition['code'], defaults=values)
                created_count += created

        updated_count = len(ACHIEVEMENTS) - created_count
        logger.info("Achievement catalog loaded: %s created, %s updated", created_count, updated_count)
        self.stdout.write(self.style.SUCCESS(
            f"Loaded {len(ACHIEVEMENTS)} achievements ({created_count} created, {updated_count} updated)."
        ))
