"""Static catalogs used as lookup data by the wizard and the exporter.

These mirror the option lists the browser client renders. They are code,
not configuration: changing them changes recommendation output and
export labels.
"""

from typing import Literal

ModulePriority = Literal["essential", "recommended", "optional"]

# Sales pipeline phases offered in the process capture step
CRM_PHASES = [
    {
        "id": "lead",
        "name": "Lead / Anfrage",
        "description": "Erste Kontaktaufnahme durch potenzielle Kunden",
        "benefit": "Automatische Lead-Erfassung aus Website, Telefon, E-Mail",
        "icon": "📞",
    },
    {
        "id": "qualification",
        "name": "Qualifizierung",
        "description": "Bewertung der Anfrage und Kundenbedürfnisse",
        "benefit": "Scoring-System zur Priorisierung vielversprechender Leads",
        "icon": "🎯",
    },
    {
        "id": "quote",
        "name": "Angebotserstellung",
        "description": "Erstellung und Versand von Angeboten",
        "benefit": "Vorlagen für schnelle, professionelle Angebote",
        "icon": "📄",
    },
    {
        "id": "negotiation",
        "name": "Verhandlung",
        "description": "Abstimmung von Details und Konditionen",
        "benefit": "Nachverfolgung aller Kommunikation an einem Ort",
        "icon": "🤝",
    },
    {
        "id": "won",
        "name": "Auftrag gewonnen",
        "description": "Kunde hat zugesagt, Projekt startet",
        "benefit": "Automatische Projekterstellung aus gewonnenem Deal",
        "icon": "✅",
    },
    {
        "id": "aftercare",
        "name": "Nachbetreuung",
        "description": "Follow-up, Kundenzufriedenheit, Wartungsverträge",
        "benefit": "Erinnerungen für Wartungen und Cross-Selling",
        "icon": "🔄",
    },
]

PROJECT_TYPES = [
    {
        "id": "sanitaer",
        "name": "Sanitär-Projekte",
        "icon": "🚿",
        "description": "Badumbau, Reparaturen, Installationen",
        "stages": [
            {"name": "Bestandsaufnahme", "description": "Vor-Ort-Termin, Maße nehmen"},
            {"name": "Planung", "description": "Materialauswahl, Zeitplanung"},
            {"name": "Material bestellen", "description": "Lieferantenbestellung"},
            {"name": "Ausführung", "description": "Montage, Installation"},
            {"name": "Abnahme", "description": "Kunde prüft Ergebnis"},
            {"name": "Abrechnung", "description": "Rechnung erstellen"},
        ],
    },
    {
        "id": "heizung",
        "name": "Heizungs-Projekte",
        "icon": "🔥",
        "description": "Heizungstausch, Wartung, Modernisierung",
        "stages": [
            {"name": "Beratung", "description": "Heizlastberechnung, System-Empfehlung"},
            {"name": "Angebot", "description": "Detailliertes Angebot mit Förderung"},
            {"name": "Genehmigung", "description": "Förderantrag, Bauamt"},
            {"name": "Beschaffung", "description": "Heizung bestellen"},
            {"name": "Installation", "description": "Alte Heizung raus, neue rein"},
            {"name": "Inbetriebnahme", "description": "System einstellen, Einweisung"},
            {"name": "Dokumentation", "description": "Übergabe Unterlagen, Rechnung"},
        ],
    },
]

# Stages given to every custom project type
CUSTOM_PROJECT_STAGES = [
    {"name": "Planung", "description": "Projektplanung"},
    {"name": "Durchführung", "description": "Umsetzung"},
    {"name": "Abschluss", "description": "Projektabschluss"},
]

CUSTOM_PHASE_ICON = "⭐"

# Detail questions per project type; custom types use the generic set
PROJECT_TYPE_QUESTIONS = {
    "sanitaer": [
        {"id": "typical_duration", "label": "Typische Projektdauer"},
        {"id": "team_size", "label": "Anzahl Mitarbeiter pro Projekt"},
        {"id": "materials", "label": "Hauptmaterialien"},
        {"id": "challenges", "label": "Häufige Herausforderungen"},
    ],
    "heizung": [
        {"id": "typical_duration", "label": "Typische Projektdauer"},
        {"id": "team_size", "label": "Anzahl Mitarbeiter pro Projekt"},
        {"id": "systems", "label": "Heizungssysteme"},
        {"id": "challenges", "label": "Häufige Herausforderungen"},
    ],
}

GENERIC_PROJECT_QUESTIONS = [
    {"id": "typical_duration", "label": "Typische Projektdauer"},
    {"id": "team_size", "label": "Anzahl Mitarbeiter pro Projekt"},
    {"id": "challenges", "label": "Häufige Herausforderungen"},
]

# ERP modules; declaration order breaks ties within a priority tier
MODULE_CATALOG = [
    {
        "id": "crm",
        "name": "CRM",
        "description": "Kundenbeziehungsmanagement - Leads, Opportunities, Pipeline",
        "benefits": [
            "Zentrale Lead-Verwaltung",
            "Automatische Lead-Zuweisung",
            "Pipeline-Visualisierung",
            "E-Mail-Integration",
        ],
        "required_for": ["lead", "qualification", "quote", "negotiation"],
        "recommended": True,
        "priority": "essential",
    },
    {
        "id": "sales",
        "name": "Verkauf",
        "description": "Angebote, Aufträge, Kundenverträge",
        "benefits": [
            "Professionelle Angebote in Sekunden",
            "Vorlagen für wiederkehrende Angebote",
            "Automatische Auftragsbestätigung",
            "Upselling-Vorschläge",
        ],
        "required_for": ["quote", "won"],
        "recommended": True,
        "priority": "essential",
    },
    {
        "id": "project",
        "name": "Projekt",
        "description": "Projektmanagement mit Tasks, Stages, Gantt-Charts",
        "benefits": [
            "Projekt-Templates für Sanitär/Heizung",
            "Aufgabenverwaltung",
            "Fortschrittsverfolgung",
            "Ressourcenplanung",
        ],
        "required_for": ["sanitaer", "heizung"],
        "recommended": True,
        "priority": "essential",
    },
    {
        "id": "timesheet",
        "name": "Zeiterfassung",
        "description": "Arbeitszeiterfassung pro Projekt und Aufgabe",
        "benefits": [
            "Mobile Zeiterfassung für Monteure",
            "Automatische Abrechnung",
            "Überstunden-Tracking",
            "Projekt-Rentabilität",
        ],
        "required_for": ["sanitaer", "heizung"],
        "recommended": True,
        "priority": "essential",
    },
    {
        "id": "documents",
        "name": "Dokumente",
        "description": "Zentrale Dokumentenverwaltung mit Workflows",
        "benefits": [
            "Alle Dokumente an einem Ort",
            "Automatische Zuordnung zu Projekten",
            "Versionierung",
            "Digitale Unterschriften",
        ],
        "required_for": [],
        "recommended": True,
        "priority": "recommended",
    },
    {
        "id": "inventory",
        "name": "Lager",
        "description": "Lagerverwaltung, Materialverbrauch, Bestellungen",
        "benefits": [
            "Echtzeit-Lagerbestand",
            "Automatische Nachbestellung",
            "Materialverbrauch pro Projekt",
            "Lieferanten-Integration",
        ],
        "required_for": [],
        "recommended": False,
        "priority": "optional",
    },
    {
        "id": "accounting",
        "name": "Buchhaltung",
        "description": "Rechnungsstellung, Zahlungen, Finanzberichte",
        "benefits": [
            "Automatische Rechnungserstellung",
            "DATEV-Export",
            "Zahlungserinnerungen",
            "Finanz-Dashboards",
        ],
        "required_for": [],
        "recommended": True,
        "priority": "recommended",
    },
    {
        "id": "helpdesk",
        "name": "Helpdesk / Wartung",
        "description": "Ticket-System für Wartungsanfragen und Support",
        "benefits": [
            "Kunden-Portal für Anfragen",
            "Wartungsverträge verwalten",
            "SLA-Tracking",
            "Automatische Erinnerungen",
        ],
        "required_for": ["aftercare"],
        "recommended": False,
        "priority": "optional",
    },
    {
        "id": "email_marketing",
        "name": "E-Mail Marketing",
        "description": "Newsletter, Kampagnen, Automatisierung",
        "benefits": [
            "Wartungserinnerungen automatisch",
            "Saisonale Kampagnen (Heizungs-Check)",
            "Kundensegmentierung",
            "A/B-Testing",
        ],
        "required_for": ["aftercare"],
        "recommended": False,
        "priority": "optional",
    },
]

PRIORITY_ORDER: dict[ModulePriority, int] = {"essential": 0, "recommended": 1, "optional": 2}

AUTOMATION_TEMPLATES = [
    {
        "id": "lead_assignment",
        "category": "CRM",
        "name": "Automatische Lead-Zuweisung",
        "description": "Neue Leads werden automatisch dem zuständigen Mitarbeiter zugewiesen",
        "trigger": "Neuer Lead erstellt",
        "action": "Zuweisung basierend auf Region/Produkttyp",
        "config": {"assignmentRule": "round_robin"},
    },
    {
        "id": "quote_email",
        "category": "Verkauf",
        "name": "Angebot per E-Mail versenden",
        "description": "Nach Angebotserstellung automatisch E-Mail an Kunde",
        "trigger": "Angebot erstellt",
        "action": "E-Mail mit PDF-Anhang senden",
        "config": {"emailTemplate": "standard"},
    },
    {
        "id": "quote_followup",
        "category": "Verkauf",
        "name": "Angebots-Nachfassung",
        "description": "Erinnerung wenn Angebot nach X Tagen nicht beantwortet",
        "trigger": "Angebot älter als X Tage",
        "action": "E-Mail-Erinnerung + Aufgabe für Vertrieb",
        "config": {"days": 7},
    },
    {
        "id": "project_creation",
        "category": "Projekt",
        "name": "Automatische Projekterstellung",
        "description": "Bei gewonnenem Auftrag wird automatisch Projekt angelegt",
        "trigger": "Opportunity gewonnen",
        "action": "Projekt mit Template erstellen",
        "config": {"template": "sanitaer"},
    },
    {
        "id": "project_notification",
        "category": "Projekt",
        "name": "Team-Benachrichtigung",
        "description": "Monteure werden über neue Projekte informiert",
        "trigger": "Projekt gestartet",
        "action": "E-Mail/Push an zugewiesene Mitarbeiter",
        "config": {},
    },
    {
        "id": "timesheet_reminder",
        "category": "Zeiterfassung",
        "name": "Zeiterfassungs-Erinnerung",
        "description": "Tägliche Erinnerung fehlende Zeiten einzutragen",
        "trigger": "Täglich 17:00 Uhr",
        "action": "Benachrichtigung an Mitarbeiter",
        "config": {"time": "17:00"},
    },
    {
        "id": "invoice_auto",
        "category": "Buchhaltung",
        "name": "Automatische Rechnungserstellung",
        "description": "Rechnung wird automatisch erstellt bei Projektabschluss",
        "trigger": "Projekt auf 'Abgeschlossen' gesetzt",
        "action": "Rechnung generieren und versenden",
        "config": {},
    },
    {
        "id": "payment_reminder",
        "category": "Buchhaltung",
        "name": "Zahlungserinnerung",
        "description": "Automatische Mahnung bei überfälliger Rechnung",
        "trigger": "Rechnung X Tage überfällig",
        "action": "Erinnerungs-E-Mail senden",
        "config": {"days": 14},
    },
    {
        "id": "maintenance_reminder",
        "category": "Nachbetreuung",
        "name": "Wartungserinnerung",
        "description": "Jährliche Erinnerung für Heizungswartung",
        "trigger": "12 Monate nach Installation",
        "action": "E-Mail an Kunde + Lead erstellen",
        "config": {"interval": 12},
    },
    {
        "id": "customer_satisfaction",
        "category": "Nachbetreuung",
        "name": "Kundenzufriedenheits-Umfrage",
        "description": "Umfrage nach Projektabschluss",
        "trigger": "7 Tage nach Projektabschluss",
        "action": "Umfrage-Link per E-Mail",
        "config": {"days": 7},
    },
]

INTEGRATIONS = [
    {
        "id": "email",
        "name": "E-Mail Integration",
        "category": "Kommunikation",
        "description": "Gmail, Outlook, IMAP - E-Mails direkt in Odoo",
    },
    {
        "id": "website",
        "name": "Website / Kontaktformular",
        "category": "Kommunikation",
        "description": "Leads aus Website-Formularen automatisch erfassen",
    },
    {
        "id": "datev",
        "name": "DATEV",
        "category": "Buchhaltung",
        "description": "Export für Steuerberater (DATEV-Format)",
    },
    {
        "id": "lexoffice",
        "name": "Lexoffice / sevDesk",
        "category": "Buchhaltung",
        "description": "Synchronisation mit Cloud-Buchhaltung",
    },
    {
        "id": "payment",
        "name": "Zahlungsanbieter",
        "category": "Finanzen",
        "description": "PayPal, Stripe, SEPA-Lastschrift",
    },
    {
        "id": "supplier_portal",
        "name": "Lieferanten-Portale",
        "category": "Einkauf",
        "description": "Direktbestellung bei Großhändlern (z.B. SHK-Portale)",
    },
    {
        "id": "google_calendar",
        "name": "Google Calendar / Outlook",
        "category": "Produktivität",
        "description": "Termine synchronisieren",
    },
]

DEFAULT_ROLES = [
    {
        "id": "admin",
        "name": "Geschäftsführung",
        "count": 1,
        "permissions": {
            "crm": True,
            "sales": True,
            "project": True,
            "timesheet": True,
            "documents": True,
            "inventory": True,
            "accounting": True,
            "admin": True,
        },
    },
    {
        "id": "office",
        "name": "Büro / Verwaltung",
        "count": 2,
        "permissions": {
            "crm": True,
            "sales": True,
            "project": True,
            "timesheet": False,
            "documents": True,
            "inventory": True,
            "accounting": False,
            "admin": False,
        },
    },
    {
        "id": "technician",
        "name": "Monteure / Techniker",
        "count": 5,
        "permissions": {
            "crm": False,
            "sales": False,
            "project": True,
            "timesheet": True,
            "documents": True,
            "inventory": True,
            "accounting": False,
            "admin": False,
        },
    },
]

PERMISSION_LABELS = {
    "crm": "CRM (Leads, Kunden)",
    "sales": "Verkauf (Angebote, Aufträge)",
    "project": "Projekte verwalten",
    "timesheet": "Zeiterfassung",
    "documents": "Dokumente",
    "inventory": "Lager / Material",
    "accounting": "Buchhaltung / Finanzen",
    "admin": "Administrator-Rechte",
}

DOCUMENT_TYPES = {
    "logo": "Firmenlogo",
    "letterhead": "Briefkopf",
    "invoice_template": "Rechnungsvorlage",
    "quote_template": "Angebotsvorlage",
    "price_list": "Preisliste",
    "product_catalog": "Produktkatalog",
    "process_document": "Prozessdokumentation",
    "other": "Sonstiges",
}

# Lookups by id
PHASE_BY_ID: dict[str, dict] = {phase["id"]: phase for phase in CRM_PHASES}
PROJECT_TYPE_BY_ID: dict[str, dict] = {project["id"]: project for project in PROJECT_TYPES}


def questions_for_project_type(type_id: str) -> list[dict]:
    """Detail questions shown for a project type."""
    return PROJECT_TYPE_QUESTIONS.get(type_id, GENERIC_PROJECT_QUESTIONS)


def catalogs_payload() -> dict:
    """All catalogs in one document for the client."""
    return {
        "phases": CRM_PHASES,
        "project_types": PROJECT_TYPES,
        "project_type_questions": PROJECT_TYPE_QUESTIONS,
        "modules": MODULE_CATALOG,
        "automations": AUTOMATION_TEMPLATES,
        "integrations": INTEGRATIONS,
        "roles": DEFAULT_ROLES,
        "permission_labels": PERMISSION_LABELS,
        "document_types": DOCUMENT_TYPES,
    }
