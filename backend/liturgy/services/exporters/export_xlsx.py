from __future__ import annotations

from io import BytesIO
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from liturgy.domain.repositories import VolunteerRepository
from liturgy.domain.roles import SLOTS
from liturgy.services.assignment import AssignmentService
from liturgy.services.calendar import MONTH_NAMES

# =========================
# Utilidades
# =========================

def _autosize_columns(ws, max_width: int = 60):
    """Ajusta a largura das colunas com base no conteúdo.

    Args:
        ws (_type_): A planilha do Excel.
        max_width (int, optional): A largura máxima da coluna. Defaults to 60.
    """
    for col_idx, column_cells in enumerate(ws.columns, start=1):
        length = 0
        for cell in column_cells:
            v = "" if cell.value is None else str(cell.value)
            length = max(length, len(v))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max(10, length + 2), max_width)

def _header(ws, labels: Iterable[str]):
    ws.append(list(labels))
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")
    ws.freeze_panes = "A2"

# =========================
# Export principal
# =========================

def export_schedule_xlsx(year: int, month: int) -> bytes:
    """Exporta a escala do mês para XLSX.

    A primeira aba tem uma linha por data habilitada (uma coluna por função);
    a segunda traz a contagem anual de cada voluntário.

    Args:
        year (int): O ano da escala.
        month (int): O mês da escala.

    Returns:
        bytes: O conteúdo do arquivo XLSX.
    """
    wb = Workbook()

    ws = wb.active
    ws.title = f"Escala {year}-{month:02d}"
    _header(ws, ["Data", *[slot.label for slot in SLOTS]])

    for row in AssignmentService.month_schedule(year, month):
        c_data = ws.cell(row=ws.max_row + 1, column=1, value=row.day.date)
        c_data.number_format = "DD/MM/YYYY"
        c_data.alignment = Alignment(horizontal="center")
        for col, slot in enumerate(SLOTS, start=2):
            names = ", ".join(v.name for v in row.by_slot.get(slot.value, []))
            ws.cell(row=ws.max_row, column=col, value=names)
    _autosize_columns(ws)

    ws2 = wb.create_sheet(title=f"Contagem {year}")
    _header(ws2, ["Voluntário", "Comentário", "Leitura", "Prece"])
    volunteers = list(VolunteerRepository.list_all())
    tallies = AssignmentService.tallies_for([v.id for v in volunteers], year)
    for v in volunteers:
        t = tallies[v.id]
        ws2.append([v.name, t.commentary, t.reading, t.prayer])
    ws2.cell(row=ws2.max_row + 2, column=1, value=f"Referência: {MONTH_NAMES[month]} de {year}")
    _autosize_columns(ws2)

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()
