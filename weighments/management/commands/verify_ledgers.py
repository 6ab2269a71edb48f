import logging

from django.core.management.base import BaseCommand, CommandError

from weighments.models import Bill, BillStatus, Ticket

logger = logging.getLogger(__name__)


def find_inconsistencies():
    """Ticket/bill pairs that disagree, plus bills whose stored net weight is stale."""
    problems = []

    bills_by_ticket_no = {b.ticket_no: b for b in Bill.objects.filter(ticket_no__in=Ticket.objects.values('ticket_no'))}
    for ticket in Ticket.objects.all():
        bill = bills_by_ticket_no.get(ticket.ticket_no)
        if bill is None:
            problems.append(f"Ticket {ticket.ticket_no} has no bill")
        elif bill.status != BillStatus.OPEN:
            problems.append(f"Ticket {ticket.ticket_no} is open but bill {bill.bill_no} is {bill.status}")

    open_ticket_nos = set(Ticket.objects.values_list('ticket_no', flat=True))
    for bill in Bill.objects.filter(status=BillStatus.OPEN).exclude(ticket_no__in=open_ticket_nos):
        problems.append(f"Bill {bill.bill_no} is OPEN but has no open ticket")

    for bill in Bill.objects.exclude(status=BillStatus.OPEN):
        expected = Bill.compute_net(bill.gross_weight, bill.tare_weight)
        if expected is None:
            problems.append(f"Bill {bill.bill_no} is {bill.status} with unresolved weights")
        elif bill.net_weight != expected:
            problems.append(f"Bill {bill.bill_no} net {bill.net_weight} != {expected}")

    return problems


class Command(BaseCommand):
    help = 'Checks that open tickets and bills agree with each other'

    def handle(self, *args, **options):
        self.stdout.write("Checking tickets against bills...")
        problems = find_inconsistencies()

        for problem in problems:
            self.stdout.write(self.style.ERROR(problem))

        if problems:
            logger.critical(f"Ledger check found {len(problems)} inconsistencies")
            raise CommandError(f"{len(problems)} inconsistencies found")

        self.stdout.write(self.style.SUCCESS('Ledgers are consistent.'))
