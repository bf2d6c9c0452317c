from django.core.management.base import BaseCommand, CommandError

from ledger.domain.exceptions import DomainError
from ledger.domain.services import ContractService


class Command(BaseCommand):
    help = "Create the ledger configuration with the given owner and send fee."

    def add_arguments(self, parser):
        parser.add_argument("--owner", required=True, help="Owner account address")
        parser.add_argument(
            "--send-fee",
            type=int,
            required=True,
            help="Fixed fee deducted from every transfer, in minor units",
        )

    def handle(self, *args, **options):
        try:
            result = ContractService.instantiate(
                sender=options["owner"],
                send_fee=options["send_fee"],
            )
        except DomainError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(
            self.style.SUCCESS(
                f"ledger instantiated: owner={result.attribute('owner')} "
                f"send_fee={result.attribute('send_fee')}"
            )
        )
