from django.core.management.base import BaseCommand

from habits.services import reconcile


class Command(BaseCommand):
    help = "Re-derive habit completion counters from the completion ledger."

    def add_arguments(self, parser):
        parser.add_argument("--owner", type=int, default=None, help="Only reconcile this user's habits.")
        parser.add_argument(
            "--purge-orphans",
            action="store_true",
            help="Also delete completions whose habit no longer exists.",
        )

    def handle(self, *args, **options):
        if options["purge_orphans"]:
            purged = reconcile.purge_orphan_completions()
            self.stdout.write(f"Purged {purged} orphaned completion(s)")

        fixed = reconcile.reconcile_counters(owner_id=options["owner"])
        self.stdout.write(self.style.SUCCESS(f"Reconciled {fixed} habit(s)"))
