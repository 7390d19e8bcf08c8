"""Printable registration certificate (PDF) rendering."""

from __future__ import annotations

import io
import logging
import re
from datetime import date, datetime

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from rclookup._constants import DOCUMENT_PLACEHOLDER, MONTH_ABBREVIATIONS
from rclookup.identifier import VehicleIdentifier, canonicalize
from rclookup.models.record import RcRecord

_logger = logging.getLogger(__name__)

ISSUER = "GOVERNMENT OF TAMIL NADU"
TITLE = "REGISTRATION CERTIFICATE (RC)"
SUBTITLE = "Motor Vehicles Act, 1988"
SIGNATURE_LINE = "Signature of Registering Authority"
SIGNATURE_AUTHORITY = "(TAMIL NADU STATE TRANSPORT DEPARTMENT)"

# Label and record attribute of every printed field, in print order.
DOCUMENT_FIELDS: tuple[tuple[str, str], ...] = (
    ("Registration Number", "vehicle_number"),
    ("Owner Name", "owner_name"),
    ("Vehicle Class", "vehicle_class"),
    ("Fuel Type", "fuel_type"),
    ("Chassis Number", "chassis_number"),
    ("Engine Number", "engine_number"),
    ("Manufacturer", "manufacturer"),
    ("Model", "model"),
    ("Registration Date", "registration_date"),
    ("Insurance Valid Till", "insurance_valid_till"),
    ("RTO Office", "rto_office"),
    ("Address of Owner", "owner_address"),
)
_DATE_FIELDS = frozenset({"registration_date", "insurance_valid_till"})

_DAY_FIRST_RE = re.compile(r"^(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})$")
_DAY_MONTH_NAME_RE = re.compile(r"^(\d{1,2})[- ]([A-Za-z]{3})[A-Za-z]*[- ,]+(\d{4})$")


def _parse_date(value: str) -> date | None:
    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    match = _DAY_FIRST_RE.match(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None
    match = _DAY_MONTH_NAME_RE.match(text)
    if match:
        abbrev = match.group(2).title()
        if abbrev in MONTH_ABBREVIATIONS:
            try:
                return date(int(match.group(3)), MONTH_ABBREVIATIONS.index(abbrev) + 1, int(match.group(1)))
            except ValueError:
                return None
    return None


def format_date(value: str | None) -> str:
    """Format an RC date as ``05 Jan 2024``.

    Month names are fixed English abbreviations, independent of the process
    locale.  A value that cannot be parsed is printed as given.
    """
    if not value:
        return DOCUMENT_PLACEHOLDER
    parsed = _parse_date(value)
    if parsed is None:
        return value
    return f"{parsed.day:02d} {MONTH_ABBREVIATIONS[parsed.month - 1]} {parsed.year:04d}"


def document_fields(record: RcRecord, identifier: VehicleIdentifier | None = None) -> list[tuple[str, str]]:
    """Numbered labels and display values, in print order."""
    rows: list[tuple[str, str]] = []
    for index, (label, attr) in enumerate(DOCUMENT_FIELDS, start=1):
        value: str | None = getattr(record, attr)
        if attr == "vehicle_number" and value is None and identifier is not None:
            value = identifier.value
        if attr in _DATE_FIELDS:
            text = format_date(value)
        else:
            text = value or DOCUMENT_PLACEHOLDER
        rows.append((f"{index}. {label}:", text))
    return rows


def document_filename(record: RcRecord, identifier: VehicleIdentifier | None = None) -> str:
    """``{number}_RC.pdf`` with every separator removed from the number."""
    if identifier is not None:
        stem = identifier.value
    else:
        stem = canonicalize(record.vehicle_number or "") or "RC"
    return f"{stem}_RC.pdf"


def render_document(record: RcRecord, identifier: VehicleIdentifier | None = None) -> bytes:
    """Render *record* as a one-page A4 PDF.

    The canvas runs in reportlab's invariant mode, so the same record
    always yields the same bytes.
    """
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
    page_width, page_height = A4
    centre = page_width / 2

    def top(offset_mm: float) -> float:
        return page_height - offset_mm * mm

    pdf.setTitle(TITLE)

    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawCentredString(centre, top(20), ISSUER)
    pdf.setFont("Helvetica-Bold", 10)
    pdf.drawCentredString(centre, top(25), "_" * 50)
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawCentredString(centre, top(35), TITLE)
    pdf.setFont("Helvetica", 10)
    pdf.drawCentredString(centre, top(42), SUBTITLE)

    y_mm = 60.0
    line_height_mm = 8.0
    for label, value in document_fields(record, identifier):
        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(20 * mm, top(y_mm), label)
        pdf.setFont("Helvetica", 10)
        pdf.drawString(70 * mm, top(y_mm), value)
        y_mm += line_height_mm

    y_mm += 20
    pdf.drawCentredString(centre, top(y_mm), "_" * 60)
    y_mm += 10
    pdf.setFont("Helvetica-Oblique", 10)
    pdf.drawCentredString(centre, top(y_mm), SIGNATURE_LINE)
    y_mm += 6
    pdf.drawCentredString(centre, top(y_mm), SIGNATURE_AUTHORITY)

    pdf.showPage()
    pdf.save()
    data = buffer.getvalue()
    _logger.debug("Rendered RC document bytes=%d", len(data))
    return data
