from django.core.management.base import BaseCommand, CommandError

from django_salehooks.exceptions import PushTransportError, TenantResolutionError
from django_salehooks.services import NotificationDispatcher
from django_salehooks.tenants import get_tenant_resolver


class Command(BaseCommand):
    help = "Send a test push notification to every device of an organization"

    def add_arguments(self, parser):
        parser.add_argument("organization_id", help="Organization UUID")
        parser.add_argument(
            "--title",
            default="🔔 Notificação de teste",
            help="Notification title",
        )
        parser.add_argument(
            "--message",
            default="Se você recebeu esta mensagem, as notificações estão ativas.",
            help="Notification body",
        )

    def handle(self, *args, **options):
        try:
            tenant = get_tenant_resolver().require_id(options["organization_id"])
        except TenantResolutionError as e:
            raise CommandError(str(e)) from e

        try:
            outcome = NotificationDispatcher().push_to_tenant(
                tenant,
                options["title"],
                options["message"],
                data={"type": "test"},
            )
        except PushTransportError as e:
            raise CommandError(f"Failed: {e}") from e

        if not outcome.attempted:
            self.stdout.write(self.style.WARNING("No device tokens registered."))
            return

        self.stdout.write(f"Sent to {outcome.attempted} token(s)")
        self.stdout.write(f"Succeeded: {outcome.success_count}")
        self.stdout.write(f"Failed: {outcome.failure_count}")
        self.stdout.write(f"Pruned: {len(outcome.pruned_tokens)}")
        self.stdout.write(self.style.SUCCESS("Test push completed."))
