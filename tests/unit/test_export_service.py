"""Unit tests for report rendering."""

from datetime import date

import fitz
import pytest

from src.schemas.snapshot import (
    Automation,
    CompanyValue,
    Goal,
    GoLivePlan,
    Integration,
    OnboardingSnapshot,
    ProcessAnalysis,
    ProcessPhase,
    ProjectTypeDetail,
    Role,
)
from src.services.export_service import (
    build_filename,
    build_sections,
    content_disposition,
    label,
    render_markdown,
    render_pdf,
    wrap_text,
)

DAY = date(2024, 5, 1)


@pytest.fixture
def minimal_snapshot() -> OnboardingSnapshot:
    """Contact, company and one analyzed phase; everything else empty."""
    return OnboardingSnapshot(
        client_name="Max Mustermann",
        client_email="max@example.com",
        company_name="Acme GmbH",
        selected_processes=[ProcessPhase(id="lead", name="Lead-Erfassung")],
        process_analyses=[ProcessAnalysis(process_id="lead", current_state="manual")],
    )


@pytest.fixture
def full_snapshot(minimal_snapshot: OnboardingSnapshot) -> OnboardingSnapshot:
    snapshot = minimal_snapshot.model_copy(deep=True)
    snapshot.selected_project_types = ["sanitaer"]
    snapshot.project_type_data = [ProjectTypeDetail(type_id="sanitaer", data={"typical_duration": "3 Wochen"})]
    snapshot.goals = [
        Goal(goal_type="vision", title="Papierloses Büro", priority="high", target_date="2025-01-01"),
        Goal(title="Schneller anbieten", priority="urgent"),
    ]
    snapshot.values = [CompanyValue(value_name="Qualität", importance=9)]
    snapshot.automations = [
        Automation(id="lead_assignment", name="Lead-Zuweisung", enabled=True),
        Automation(id="quote_email", name="Angebots-Mail", enabled=False),
    ]
    snapshot.roles = [Role(id="admin", name="Administrator", count=1, permissions={"crm": True, "sales": False})]
    snapshot.integrations = [
        Integration(id="email", name="E-Mail", enabled=True, config={"apiKey": "secret", "server": "mail.acme.de"}),
        Integration(id="website", name="Website", enabled=False),
    ]
    snapshot.go_live_plan = GoLivePlan(timeline="asap", training_format="weekend")
    snapshot.additional_notes = "Bitte vor 10 Uhr anrufen."
    snapshot.step_comments = {"10": "Später klären", "4": "Wichtig"}
    return snapshot


class TestHelpers:
    def test_label_falls_back_to_raw_value(self) -> None:
        assert label({"high": "Hoch"}, "high") == "Hoch"
        assert label({"high": "Hoch"}, "urgent") == "urgent"

    def test_build_filename_replaces_whitespace(self) -> None:
        assert build_filename("Acme  GmbH & Co", DAY, "md") == "Onboarding_Acme_GmbH_&_Co_2024-05-01.md"

    def test_build_filename_without_company(self) -> None:
        assert build_filename("  ", DAY, "pdf") == "Onboarding_Unbekannt_2024-05-01.pdf"

    def test_content_disposition_keeps_header_ascii(self) -> None:
        value = content_disposition(build_filename("Waldhauser Sanitär & Heizung", DAY, "md"))

        assert value.isascii()
        assert 'filename="Onboarding_Waldhauser_Sanitar_&_Heizung_2024-05-01.md"' in value
        assert value.endswith("filename*=UTF-8''Onboarding_Waldhauser_Sanit%C3%A4r_%26_Heizung_2024-05-01.md")

    def test_content_disposition_escapes_quotes_and_slashes(self) -> None:
        value = content_disposition('Onboarding_A/B_"X".md')

        assert 'filename="Onboarding_A_B__X_.md"' in value
        assert "filename*=UTF-8''Onboarding_A%2FB_%22X%22.md" in value

    def test_wrap_text_respects_width(self) -> None:
        lines = wrap_text("word " * 60, 100, 10)

        assert len(lines) > 1
        assert all(fitz.get_text_length(line, fontsize=10) <= 100 for line in lines)

    def test_wrap_text_splits_long_words(self) -> None:
        lines = wrap_text("x" * 200, 50, 10)

        assert "".join(lines) == "x" * 200
        assert len(lines) > 1


class TestSections:
    """Tests for section selection and order."""

    def test_empty_sections_are_skipped(self, minimal_snapshot: OnboardingSnapshot) -> None:
        sections = build_sections(minimal_snapshot)

        assert [s.key for s in sections] == ["contact", "company", "processes"]

    def test_full_report_keeps_fixed_order(self, full_snapshot: OnboardingSnapshot) -> None:
        sections = build_sections(full_snapshot)

        assert [s.key for s in sections] == [
            "contact",
            "company",
            "processes",
            "goals",
            "values",
            "automations",
            "roles",
            "integrations",
            "go_live",
            "notes",
        ]

    def test_empty_fields_are_left_out(self, minimal_snapshot: OnboardingSnapshot) -> None:
        contact = build_sections(minimal_snapshot)[0]

        assert [block.label for block in contact.blocks] == ["Name", "E-Mail"]


class TestRenderMarkdown:
    """Tests for the Markdown report."""

    def test_minimal_report(self, minimal_snapshot: OnboardingSnapshot) -> None:
        markdown = render_markdown(minimal_snapshot, DAY)

        assert markdown.startswith("# Onboarding Report: Acme GmbH\n\n**Erstellt am:** 01.05.2024\n\n---\n")
        assert "## Kontaktdaten" in markdown
        assert "- **Name:** Max Mustermann" in markdown
        assert "## Firmeninformationen" in markdown
        assert "## CRM-Phasen & Projekttypen" in markdown
        assert "### Prozessanalyse: Lead-Erfassung" in markdown
        assert "- **Aktueller Zustand:** manual" in markdown
        assert "- **Priorität:** Mittel" in markdown
        assert "## Ziele & Wünsche" not in markdown
        assert "## Unternehmenswerte" not in markdown
        assert markdown.endswith("\n")
        assert not markdown.endswith("\n\n")

    def test_goal_labels(self, full_snapshot: OnboardingSnapshot) -> None:
        markdown = render_markdown(full_snapshot, DAY)

        assert "### Ziel 1: Papierloses Büro" in markdown
        assert "- **Typ:** Vision" in markdown
        assert "- **Priorität:** Hoch" in markdown
        assert "- **Zieldatum:** 2025-01-01" in markdown
        # unknown priority prints unchanged
        assert "- **Priorität:** urgent" in markdown

    def test_only_enabled_automations_and_integrations(self, full_snapshot: OnboardingSnapshot) -> None:
        markdown = render_markdown(full_snapshot, DAY)

        assert "### Lead-Zuweisung" in markdown
        assert "Angebots-Mail" not in markdown
        assert "- E-Mail - server: mail.acme.de" in markdown
        assert "Website" not in markdown.split("## Integrationen")[1]

    def test_api_keys_are_not_exported(self, full_snapshot: OnboardingSnapshot) -> None:
        assert "secret" not in render_markdown(full_snapshot, DAY)

    def test_roles_list_granted_permissions(self, full_snapshot: OnboardingSnapshot) -> None:
        markdown = render_markdown(full_snapshot, DAY)

        assert "### Administrator (1 Personen)" in markdown
        roles = markdown.split("## Rollen & Berechtigungen")[1].split("\n## ")[0]
        assert "- **Berechtigungen:** CRM (Leads, Kunden)\n" in roles

    def test_go_live_labels(self, full_snapshot: OnboardingSnapshot) -> None:
        markdown = render_markdown(full_snapshot, DAY)

        assert "- **Zeitplan:** So schnell wie möglich" in markdown
        assert "- **Schulungsformat:** weekend" in markdown
        assert "- **Pilot-Dauer:** 2 Wochen" in markdown

    def test_project_type_answers(self, full_snapshot: OnboardingSnapshot) -> None:
        markdown = render_markdown(full_snapshot, DAY)

        assert "### Ausgewählte Projekttypen" in markdown
        assert "- **Sanitär-Projekte - Typische Projektdauer:** 3 Wochen" in markdown

    def test_step_comments_sorted_numerically(self, full_snapshot: OnboardingSnapshot) -> None:
        markdown = render_markdown(full_snapshot, DAY)

        notes = markdown.split("## Zusätzliche Anmerkungen")[1]
        assert "Bitte vor 10 Uhr anrufen." in notes
        assert notes.index("Schritt 4") < notes.index("Schritt 10")

    def test_missing_company_name(self) -> None:
        markdown = render_markdown(OnboardingSnapshot(company_name=""), DAY)

        assert markdown.startswith("# Onboarding Report: Unbekannt")


class TestRenderPdf:
    """Tests for the PDF report."""

    def test_pdf_is_valid(self, minimal_snapshot: OnboardingSnapshot) -> None:
        content = render_pdf(minimal_snapshot, DAY)

        assert content.startswith(b"%PDF")
        with fitz.open(stream=content, filetype="pdf") as doc:
            text = doc[0].get_text()
        assert "Onboarding-Fragebogen" in text
        assert "1. Kontaktdaten" in text
        assert "Seite 1 von 1 | Erstellt am 01.05.2024" in text

    def test_long_report_breaks_pages(self, full_snapshot: OnboardingSnapshot) -> None:
        full_snapshot.goals = [
            Goal(title=f"Ziel {i}", description="Beschreibung " * 40) for i in range(30)
        ]

        content = render_pdf(full_snapshot, DAY)

        with fitz.open(stream=content, filetype="pdf") as doc:
            page_count = doc.page_count
            last_page = doc[page_count - 1].get_text()
        assert page_count > 1
        assert f"Seite {page_count} von {page_count}" in last_page
