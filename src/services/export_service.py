"""Onboarding report rendering (Markdown and PDF).

Both formats are rendered from the same list of sections, so they share
section order and skipping rules:

    contact, company, processes, goals, values, automations, roles,
    integrations, go-live plan, notes

A section without content is left out entirely. Enumerated values go
through fixed label maps; values missing from a map print unchanged.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from datetime import date
from typing import Literal
from urllib.parse import quote

import fitz

from src.schemas.snapshot import OnboardingSnapshot
from src.services.catalogs import PERMISSION_LABELS, PROJECT_TYPE_BY_ID, questions_for_project_type
from src.services.wizard_service import STEPS

logger = logging.getLogger(__name__)

PRIORITY_LABELS = {"low": "Niedrig", "medium": "Mittel", "high": "Hoch"}
GOAL_TYPE_LABELS = {"short_term": "Kurzfristig", "long_term": "Langfristig", "vision": "Vision"}
TIMELINE_LABELS = {
    "asap": "So schnell wie möglich",
    "1month": "Innerhalb 1 Monat",
    "3months": "Innerhalb 3 Monate",
    "flexible": "Flexibel",
}
DATA_IMPORT_LABELS = {"yes": "Ja", "no": "Nein", "partial": "Teilweise"}
TRAINING_NEEDS_LABELS = {"basic": "Grundlagen", "advanced": "Fortgeschritten", "extensive": "Umfassend"}
TRAINING_FORMAT_LABELS = {"onsite": "Vor Ort", "online": "Online", "hybrid": "Hybrid"}

STEP_TITLES = {str(step.number): step.title for step in STEPS}

BlockStyle = Literal["subheading", "field", "bullet", "text"]


def label(mapping: dict[str, str], value: str) -> str:
    """Display label for an enumerated value, or the value itself."""
    return mapping.get(value, value)


def format_date(day: date) -> str:
    return day.strftime("%d.%m.%Y")


def build_filename(company_name: str, day: date, extension: str) -> str:
    """Attachment file name, e.g. ``Onboarding_Acme_GmbH_2024-05-01.md``."""
    safe_name = re.sub(r"\s+", "_", company_name.strip()) or "Unbekannt"
    return f"Onboarding_{safe_name}_{day.isoformat()}.{extension}"


def content_disposition(filename: str) -> str:
    """``Content-Disposition`` value for a download.

    Header values must stay ASCII, so umlauts go into the RFC 5987
    ``filename*`` parameter and a transliterated ``filename`` is kept for
    older clients.
    """
    fallback = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    fallback = re.sub(r'["\\/]', "_", fallback)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@dataclass
class Block:
    style: BlockStyle
    text: str
    label: str | None = None


@dataclass
class Section:
    key: str
    title: str
    blocks: list[Block] = field(default_factory=list)

    def field(self, name: str, value: object) -> None:
        """Add a labelled value; empty values are skipped."""
        if value is None or value == "":
            return
        self.blocks.append(Block("field", str(value), label=name))

    def bullet(self, text: str) -> None:
        self.blocks.append(Block("bullet", text))

    def subheading(self, text: str) -> None:
        self.blocks.append(Block("subheading", text))

    def text(self, text: str) -> None:
        if text.strip():
            self.blocks.append(Block("text", text.strip()))


def _contact_section(snapshot: OnboardingSnapshot) -> Section:
    section = Section("contact", "Kontaktdaten")
    section.field("Name", snapshot.client_name.strip())
    section.field("E-Mail", snapshot.client_email.strip())
    section.field("Telefon", snapshot.client_phone.strip())
    return section


def _company_section(snapshot: OnboardingSnapshot) -> Section:
    section = Section("company", "Firmeninformationen")
    section.field("Firmenname", snapshot.company_name.strip())
    section.field("Branche", snapshot.industry.strip())
    section.field("Gründungsjahr", snapshot.founded_year.strip())
    section.field("Mitarbeiteranzahl", snapshot.number_of_employees.strip())
    section.field("Standort", snapshot.company_location.strip())
    section.field("Website", snapshot.website.strip())
    section.field("Beschreibung", snapshot.description.strip())
    return section


def _process_section(snapshot: OnboardingSnapshot) -> Section:
    section = Section("processes", "CRM-Phasen & Projekttypen")
    analyses = {analysis.process_id: analysis for analysis in snapshot.process_analyses}

    if snapshot.selected_processes:
        section.subheading("Ausgewählte CRM-Phasen")
        for phase in snapshot.selected_processes:
            section.bullet(phase.name or phase.id)

    for phase in snapshot.selected_processes:
        analysis = analyses.get(phase.id)
        if analysis is None:
            continue
        section.subheading(f"Prozessanalyse: {phase.name or phase.id}")
        section.field("Aktueller Zustand", analysis.current_state.strip())
        section.field("Probleme", analysis.pain_points.strip())
        section.field("Gewünschter Zustand", analysis.desired_state.strip())
        section.field("Priorität", label(PRIORITY_LABELS, analysis.priority))

    if snapshot.selected_project_types:
        custom_names = {project.id: project.name for project in snapshot.custom_project_types}
        details = {detail.type_id: detail for detail in snapshot.project_type_data}
        section.subheading("Ausgewählte Projekttypen")
        for type_id in snapshot.selected_project_types:
            name = custom_names.get(type_id) or PROJECT_TYPE_BY_ID.get(type_id, {}).get("name", type_id)
            section.bullet(name)
            detail = details.get(type_id)
            if detail is None:
                continue
            question_labels = {q["id"]: q["label"] for q in questions_for_project_type(type_id)}
            for question_id, answer in detail.data.items():
                section.field(f"{name} - {question_labels.get(question_id, question_id)}", answer.strip())
    return section


def _goals_section(snapshot: OnboardingSnapshot) -> Section:
    section = Section("goals", "Ziele & Wünsche")
    for index, goal in enumerate(snapshot.goals, start=1):
        section.subheading(f"Ziel {index}: {goal.title.strip() or 'Ohne Titel'}")
        section.field("Typ", label(GOAL_TYPE_LABELS, goal.goal_type))
        section.field("Priorität", label(PRIORITY_LABELS, goal.priority))
        section.field("Beschreibung", goal.description.strip())
        section.field("Zieldatum", goal.target_date)
    return section


def _values_section(snapshot: OnboardingSnapshot) -> Section:
    section = Section("values", "Unternehmenswerte")
    for index, value in enumerate(snapshot.values, start=1):
        section.subheading(f"Wert {index}: {value.value_name.strip() or 'Ohne Namen'}")
        section.field("Beschreibung", value.description.strip())
        section.field("Beispiele", value.examples.strip())
        section.field("Wichtigkeit", f"{value.importance}/10")
    return section


def _automations_section(snapshot: OnboardingSnapshot) -> Section:
    section = Section("automations", "Workflow-Automatisierungen")
    for automation in (a for a in snapshot.automations if a.enabled):
        heading = automation.name or automation.id
        if automation.category:
            heading = f"{heading} ({automation.category})"
        section.subheading(heading)
        section.text(automation.description)
        section.field("Auslöser", automation.trigger)
        section.field("Aktion", automation.action)
        if automation.config:
            section.field("Einstellungen", ", ".join(f"{k}: {v}" for k, v in automation.config.items()))
    return section


def _roles_section(snapshot: OnboardingSnapshot) -> Section:
    section = Section("roles", "Rollen & Berechtigungen")
    for role in snapshot.roles:
        section.subheading(f"{role.name or role.id} ({role.count} Personen)")
        granted = [label(PERMISSION_LABELS, key) for key, allowed in role.permissions.items() if allowed]
        section.field("Berechtigungen", ", ".join(granted))
    return section


def _integrations_section(snapshot: OnboardingSnapshot) -> Section:
    section = Section("integrations", "Integrationen")
    for integration in (i for i in snapshot.integrations if i.enabled):
        text = integration.name or integration.id
        if integration.category:
            text = f"{text} ({integration.category})"
        # API keys stay out of the report
        extras = [f"{k}: {v}" for k, v in integration.config.items() if v and k != "apiKey"]
        if extras:
            text = f"{text} - {', '.join(extras)}"
        section.bullet(text)
    return section


def _go_live_section(snapshot: OnboardingSnapshot) -> Section:
    section = Section("go_live", "Go-Live Planung")
    plan = snapshot.go_live_plan
    if plan is None:
        return section
    section.field("Zeitplan", label(TIMELINE_LABELS, plan.timeline))
    section.field("Datenimport", label(DATA_IMPORT_LABELS, plan.data_import))
    section.field("Datenquelle", plan.data_source.strip())
    section.field("Schulungsbedarf", label(TRAINING_NEEDS_LABELS, plan.training_needs))
    section.field("Schulungsformat", label(TRAINING_FORMAT_LABELS, plan.training_format))
    if plan.pilot_users:
        section.field("Pilot-Nutzer", plan.pilot_users)
    if plan.pilot_duration:
        section.field("Pilot-Dauer", f"{plan.pilot_duration} Wochen")
    section.field("Go-Live Datum", plan.go_live_date.strip())
    section.field("Bedenken & Herausforderungen", plan.concerns.strip())
    return section


def _notes_section(snapshot: OnboardingSnapshot) -> Section:
    section = Section("notes", "Zusätzliche Anmerkungen")
    section.text(snapshot.additional_notes)
    comments = sorted(
        ((step, text.strip()) for step, text in snapshot.step_comments.items() if text.strip()),
        key=lambda item: int(item[0]) if item[0].isdigit() else 99,
    )
    if comments:
        section.subheading("Kommentare zu den Schritten")
        for step, text in comments:
            title = STEP_TITLES.get(step)
            section.field(f"Schritt {step} ({title})" if title else f"Schritt {step}", text)
    return section


SECTION_BUILDERS = (
    _contact_section,
    _company_section,
    _process_section,
    _goals_section,
    _values_section,
    _automations_section,
    _roles_section,
    _integrations_section,
    _go_live_section,
    _notes_section,
)


def build_sections(snapshot: OnboardingSnapshot) -> list[Section]:
    """Non-empty report sections in their fixed order."""
    sections = (builder(snapshot) for builder in SECTION_BUILDERS)
    return [section for section in sections if section.blocks]


# Markdown


def render_markdown(snapshot: OnboardingSnapshot, generated_on: date) -> str:
    """Render the report as Markdown.

    Args:
        snapshot: Captured wizard state.
        generated_on: Date printed under the title.

    Returns:
        str: The Markdown document, ending with a newline.
    """
    company = snapshot.company_name.strip() or "Unbekannt"
    lines = [
        f"# Onboarding Report: {company}",
        "",
        f"**Erstellt am:** {format_date(generated_on)}",
        "",
        "---",
    ]

    for section in build_sections(snapshot):
        lines.extend(["", f"## {section.title}", ""])
        previous: BlockStyle | None = None
        for block in section.blocks:
            if block.style == "subheading":
                if previous is not None:
                    lines.append("")
                lines.extend([f"### {block.text}", ""])
            elif block.style == "field":
                lines.append(f"- **{block.label}:** {block.text}")
            elif block.style == "bullet":
                lines.append(f"- {block.text}")
            else:
                if previous not in (None, "subheading"):
                    lines.append("")
                lines.extend([block.text, ""])
            previous = block.style

    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines) + "\n"


# PDF

MM = 72 / 25.4
MARGIN = 20 * MM
TITLE_BAND_HEIGHT = 40 * MM
SECTION_BAR_HEIGHT = 10 * MM
FOOTER_OFFSET = 10 * MM

TITLE_COLOR = (52 / 255, 73 / 255, 94 / 255)
SECTION_COLOR = (41 / 255, 128 / 255, 185 / 255)
WHITE = (1, 1, 1)
BLACK = (0, 0, 0)
GRAY = (0.5, 0.5, 0.5)

REGULAR_FONT = "helv"
BOLD_FONT = "hebo"


def wrap_text(text: str, width: float, fontsize: float, fontname: str = REGULAR_FONT) -> list[str]:
    """Greedy word wrap by measured text width.

    Words longer than a full line are split by characters.
    """
    lines: list[str] = []
    for paragraph in text.splitlines() or [""]:
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if fitz.get_text_length(candidate, fontname=fontname, fontsize=fontsize) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = ""
            while fitz.get_text_length(word, fontname=fontname, fontsize=fontsize) > width:
                cut = len(word)
                while cut > 1 and fitz.get_text_length(word[:cut], fontname=fontname, fontsize=fontsize) > width:
                    cut -= 1
                lines.append(word[:cut])
                word = word[cut:]
            current = word
        lines.append(current)
    return lines


class PdfWriter:
    """Sequential top-to-bottom writer with a fixed page-break rule.

    Before writing a block of height ``h`` the writer checks whether
    ``y + h`` would cross the bottom margin; if so it starts a new page.
    """

    def __init__(self) -> None:
        self.doc = fitz.open()
        width, height = fitz.paper_size("a4")
        self.page_width = width
        self.page_height = height
        self.content_width = width - 2 * MARGIN
        self.page = self.doc.new_page(width=width, height=height)
        self.y = MARGIN

    def ensure_space(self, required: float) -> None:
        if self.y + required > self.page_height - MARGIN:
            self.page = self.doc.new_page(width=self.page_width, height=self.page_height)
            self.y = MARGIN

    def centered(self, text: str, baseline: float, fontsize: float, fontname: str, color: tuple) -> None:
        length = fitz.get_text_length(text, fontname=fontname, fontsize=fontsize)
        x = (self.page_width - length) / 2
        self.page.insert_text((x, baseline), text, fontsize=fontsize, fontname=fontname, color=color)

    def title_band(self, title: str, subtitle: str) -> None:
        band = fitz.Rect(0, 0, self.page_width, TITLE_BAND_HEIGHT)
        self.page.draw_rect(band, color=None, fill=TITLE_COLOR)
        self.centered(title, 20 * MM, 24, BOLD_FONT, WHITE)
        self.centered(subtitle, 30 * MM, 12, BOLD_FONT, WHITE)
        self.y = TITLE_BAND_HEIGHT + 10 * MM

    def section_header(self, title: str) -> None:
        self.ensure_space(SECTION_BAR_HEIGHT + 5 * MM + 20)
        self.y += 5 * MM
        bar = fitz.Rect(MARGIN, self.y - 5 * MM, MARGIN + self.content_width, self.y + 5 * MM)
        self.page.draw_rect(bar, color=None, fill=SECTION_COLOR)
        self.page.insert_text((MARGIN + 3 * MM, self.y + 2 * MM), title, fontsize=14, fontname=BOLD_FONT, color=WHITE)
        self.y += 12 * MM

    def paragraph(self, text: str, fontsize: float = 10, bold: bool = False, indent: float = 0) -> None:
        fontname = BOLD_FONT if bold else REGULAR_FONT
        line_height = fontsize * 1.4
        for line in wrap_text(text, self.content_width - indent, fontsize, fontname):
            self.ensure_space(line_height)
            self.y += fontsize
            self.page.insert_text((MARGIN + indent, self.y), line, fontsize=fontsize, fontname=fontname, color=BLACK)
            self.y += line_height - fontsize
        self.y += 3

    def footers(self, generated_on: date) -> None:
        total = self.doc.page_count
        for number, page in enumerate(self.doc, start=1):
            self.page = page
            self.centered(
                f"Seite {number} von {total} | Erstellt am {format_date(generated_on)}",
                self.page_height - FOOTER_OFFSET,
                8,
                REGULAR_FONT,
                GRAY,
            )

    def to_bytes(self) -> bytes:
        try:
            return self.doc.tobytes(garbage=3, deflate=True)
        finally:
            self.doc.close()


def _pdf_safe(text: str) -> str:
    """Drop characters the built-in Helvetica cannot show (icons, emoji)."""
    return "".join(ch for ch in text if ord(ch) < 0x2000 or ch in "€•–").strip()


def render_pdf(snapshot: OnboardingSnapshot, generated_on: date) -> bytes:
    """Render the report as an A4 PDF.

    Args:
        snapshot: Captured wizard state.
        generated_on: Date printed in every footer.

    Returns:
        bytes: The PDF file content.
    """
    writer = PdfWriter()
    writer.title_band("Onboarding-Fragebogen", _pdf_safe(snapshot.company_name) or "Unbekannt")

    for number, section in enumerate(build_sections(snapshot), start=1):
        writer.section_header(f"{number}. {section.title}")
        for block in section.blocks:
            if block.style == "subheading":
                writer.paragraph(_pdf_safe(block.text), fontsize=11, bold=True)
            elif block.style == "field":
                writer.paragraph(f"{_pdf_safe(block.label or '')}: {_pdf_safe(block.text)}")
            elif block.style == "bullet":
                writer.paragraph(f"• {_pdf_safe(block.text)}", indent=3 * MM)
            else:
                writer.paragraph(_pdf_safe(block.text))
        writer.y += 5

    writer.footers(generated_on)
    content = writer.to_bytes()
    logger.debug("Rendered PDF report (%d bytes)", len(content))
    return content
