from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.db.models import F

from ...models import ESGRecord
from ...services.scoring import aggregate_scores


class Command(BaseCommand):
    help = 'Recalculates the category and overall scores of stored ESG records'

    def add_arguments(self, parser):
        parser.add_argument('--record-id', type=int, help='Only recalculate this record')
        parser.add_argument('--dry-run', action='store_true', help='Report changes without saving them')

    def handle(self, *args, **options):
        records = ESGRecord.objects.order_by('pk')
        if options['record_id']:
            records = records.filter(pk=options['record_id'])
            if not records.exists():
                raise CommandError(f"ESG record {options['record_id']} does not exist")

        changed = 0
        conflicts = 0
        for record in records.iterator():
            scores = aggregate_scores(record.as_document())
            if scores == record.overall_score:
                continue
            self.stdout.write(f"Record {record.pk}: {record.overall_score} -> {scores}")
            if options['dry_run']:
                changed += 1
                continue
            with transaction.atomic():
                # Scores only; last_updated is left alone so dashboards keep the supplier's activity.
                updated = ESGRecord.objects.filter(pk=record.pk, version=record.version).update(
                    overall_score=scores,
                    version=F('version') + 1,
                )
            if not updated:
                conflicts += 1
                self.stdout.write(self.style.WARNING(
                    f"Record {record.pk} was modified while recalculating, skipped"
                ))
                continue
            changed += 1

        if options['dry_run']:
            self.stdout.write(self.style.WARNING(f"Dry run: {changed} record(s) would change"))
        else:
            self.stdout.write(self.style.SUCCESS(f"Recalculated scores of {changed} record(s)"))
            if conflicts:
                self.stdout.write(self.style.WARNING(
                    f"{conflicts} record(s) changed concurrently and already carry fresh scores"
                ))
