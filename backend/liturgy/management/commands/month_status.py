from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from liturgy.domain.exceptions import LiturgyError
from liturgy.domain.repositories import PublicationRepository
from liturgy.services.calendar import effective_enabled_dates, sundays_in_month

class Command(BaseCommand):
    help = "Mostra ou altera o status de um mês (inscrições abertas/fechadas e datas habilitadas)."

    def add_arguments(self, parser):
        parser.add_argument("--year", type=int, help="Ano (default: atual).")
        parser.add_argument("--month", type=int, help="Mês [1..12] (default: atual).")

        state = parser.add_mutually_exclusive_group()
        state.add_argument("--open", action="store_true", help="Abre as inscrições do mês.")
        state.add_argument("--close", action="store_true", help="Fecha as inscrições do mês.")

        dates = parser.add_mutually_exclusive_group()
        dates.add_argument(
            "--dates",
            nargs="*",
            metavar="AAAA-MM-DD",
            help="Define as datas habilitadas (sem valores = nenhuma data).",
        )
        dates.add_argument("--sundays", action="store_true", help="Habilita todos os domingos do mês.")

    def handle(self, *args, **opts):
        today = timezone.localdate()
        year = opts["year"] or today.year
        month = opts["month"] or today.month
        if not (1 <= month <= 12):
            raise CommandError("--month deve estar entre 1 e 12.")

        try:
            if opts["open"] or opts["close"]:
                PublicationRepository.set_month_open(year, month, bool(opts["open"]))
            if opts["sundays"]:
                PublicationRepository.set_enabled_dates(
                    year, month, [d.date_string for d in sundays_in_month(year, month)]
                )
            elif opts["dates"] is not None:
                PublicationRepository.set_enabled_dates(year, month, opts["dates"])

            is_open = PublicationRepository.get_month_open(year, month)
            days = effective_enabled_dates(year, month)
        except (LiturgyError, ValueError) as exc:
            raise CommandError(str(exc)) from exc

        status = "abertas" if is_open else "fechadas"
        self.stdout.write(self.style.SUCCESS(f"{year}-{month:02d}: inscrições {status}."))
        if days:
            for d in days:
                self.stdout.write(f"  {d.date_string}  {d.display}")
        else:
            self.stdout.write(self.style.WARNING("  Nenhuma data habilitada."))
