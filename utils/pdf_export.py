# utils/pdf_export.py
from __future__ import annotations
from io import BytesIO
from typing import Any, List, Sequence
from xml.sax.saxutils import escape
import logging

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from hw_types.housewarming_types import AttendanceRecord, EventConfig
from services.attendance_service import summarize

logger = logging.getLogger(__name__)

_EMPTY_PDF = b"%PDF-1.4\n1 0 obj <<>> endobj\ntrailer <<>>\n%%EOF\n"


def _record_line(r: AttendanceRecord) -> str:
    who = f"<b>{escape(r.name)}</b> ({escape(r.contact)})"
    if not r.attending:
        return f"{who} · não vai"
    return f"{who} · {r.adults_count} adulto(s), {r.children_count} criança(s)"


def build_guest_list_pdf(
    title: str,
    config: EventConfig,
    records: Sequence[AttendanceRecord],
) -> bytes:
    """Attendance report for the hosts: event details, totals, then one line per RSVP."""
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36,
        title=title,
    )
    styles = getSampleStyleSheet()
    summary = summarize(list(records))

    story: List[Any] = []
    story.append(Paragraph(escape(title), styles["Heading1"]))
    story.append(Spacer(1, 8))

    meta_lines = [
        f"<b>Data:</b> {escape(config.event_date)} às {escape(config.event_time)}",
        f"<b>Local:</b> {escape(config.location)}",
        f"<b>Prazo de confirmação:</b> {escape(config.rsvp_deadline)}",
    ]
    story.append(Paragraph("<br/>".join(meta_lines), styles["Normal"]))
    story.append(Spacer(1, 12))

    story.append(Paragraph("Resumo", styles["Heading2"]))
    story.append(Spacer(1, 6))
    totals = [
        f"Convidados totais: {summary.total_attendees}",
        f"Adultos: {summary.total_adults}",
        f"Crianças: {summary.total_children}",
        f"Ausências: {summary.total_declines}",
        f"Respostas: {summary.total_responses}",
    ]
    story.append(Paragraph("<br/>".join(totals), styles["Normal"]))
    story.append(Spacer(1, 12))

    story.append(Paragraph("Lista de convidados", styles["Heading2"]))
    story.append(Spacer(1, 6))
    if records:
        for r in records:
            story.append(Paragraph(_record_line(r), styles["Normal"]))
    else:
        story.append(Paragraph("Nenhuma resposta até agora.", styles["Normal"]))

    try:
        doc.build(story)
        return buf.getvalue()
    except Exception:
        logger.exception("Guest list PDF build failed")
        return _EMPTY_PDF
