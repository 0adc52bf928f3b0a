from __future__ import annotations

from django.core.management.base import BaseCommand
from django.utils import timezone

from liturgy.domain.models import Volunteer
from liturgy.domain.repositories import AvailabilityRepository, PublicationRepository, VolunteerRepository
from liturgy.services.calendar import sundays_in_month
from liturgy.utils import shift_month

DEFAULT_NAMES = [
    "Ana Paula", "Bruno", "Carla", "Daniel", "Eduarda",
    "Fernando", "Gabriela", "Heitor", "Isabela", "João",
]

class Command(BaseCommand):
    help = "Seed demo data (voluntários + mês aberto com inscrições nos domingos). Idempotente."

    def add_arguments(self, parser):
        parser.add_argument(
            "--names",
            type=str,
            help="Lista de nomes separada por vírgula. Ex.: 'Ana,Beto,Caio'. "
                 "Se omitido, usa uma lista padrão.",
        )
        parser.add_argument("--year", type=int, help="Ano do mês de demonstração (default: próximo mês).")
        parser.add_argument("--month", type=int, help="Mês de demonstração [1..12] (default: próximo mês).")

    def handle(self, *args, **opts):
        names_arg = opts.get("names")
        if names_arg:
            names = [n.strip() for n in names_arg.split(",") if n.strip()]
        else:
            names = DEFAULT_NAMES

        year, month = opts.get("year"), opts.get("month")
        if year is None or month is None:
            today = timezone.localdate()
            year, month = shift_month(today.year, today.month, 1)

        created_count = 0
        volunteers = []
        for n in names:
            existing = Volunteer.objects.filter(name=n).first()
            if existing is None:
                existing = VolunteerRepository.add(n)
                created_count += 1
            volunteers.append(existing)

        sundays = sundays_in_month(year, month)
        if PublicationRepository.get_enabled_dates(year, month) is None:
            PublicationRepository.set_enabled_dates(year, month, [d.date_string for d in sundays])
        PublicationRepository.set_month_open(year, month, True)

        # cada voluntário se inscreve em domingos alternados
        marked = 0
        for i, v in enumerate(volunteers):
            for j, day in enumerate(sundays):
                if (i + j) % 2 == 0:
                    AvailabilityRepository.set_availability(v.id, day.date_string, True)
                    marked += 1

        self.stdout.write(self.style.SUCCESS(
            f"Seed completed. volunteers: created={created_count}, total={Volunteer.objects.count()}; "
            f"{year}-{month:02d} aberto com {len(sundays)} domingo(s), {marked} inscrição(ões)."
        ))
