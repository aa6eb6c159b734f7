"""
Internationalization (i18n) for user-facing calculation messages.

Warnings, requirement labels and status names are available in English (en)
and German (de).
"""

from typing import Optional


SUPPORTED_LANGUAGES = frozenset({"en", "de"})
DEFAULT_LANGUAGE = "en"


# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Goal status
    "status.eligible": {
        "en": "Eligible",
        "de": "Berechtigt",
    },
    "status.in_progress": {
        "en": "In progress",
        "de": "In Bearbeitung",
    },
    "status.at_risk": {
        "en": "At risk",
        "de": "Gefährdet",
    },
    "status.limit_exceeded": {
        "en": "Limit exceeded",
        "de": "Grenze überschritten",
    },
    "status.unavailable": {
        "en": "Unavailable",
        "de": "Nicht verfügbar",
    },

    # Warnings
    "warning.limit_exceeded.title": {
        "en": "Absence Limit Exceeded",
        "de": "Abwesenheitsgrenze überschritten",
    },
    "warning.limit_exceeded.message": {
        "en": "You have exceeded the maximum of {limit} days absence in a 12-month period.",
        "de": "Sie haben die maximale Abwesenheit von {limit} Tagen in 12 Monaten überschritten.",
    },
    "warning.low_allowance.title": {
        "en": "Low Remaining Allowance",
        "de": "Geringes Restkontingent",
    },
    "warning.low_allowance.message": {
        "en": "You only have {days} days left in your current 12-month window.",
        "de": "Sie haben im aktuellen 12-Monats-Zeitraum nur noch {days} Tage übrig.",
    },
    "warning.incomplete_trips.title": {
        "en": "Incomplete Trips",
        "de": "Unvollständige Reisen",
    },
    "warning.incomplete_trips.message": {
        "en": "{count} trip(s) are missing a valid departure or return date and were not counted.",
        "de": "{count} Reise(n) ohne gültiges Abreise- oder Rückkehrdatum wurden nicht gezählt.",
    },
    "warning.overlapping_trips.title": {
        "en": "Overlapping Trips",
        "de": "Überlappende Reisen",
    },
    "warning.overlapping_trips.message": {
        "en": "Some trips overlap; absence days may be counted twice.",
        "de": "Einige Reisen überschneiden sich; Abwesenheitstage werden ggf. doppelt gezählt.",
    },
    "warning.reversed_trip.title": {
        "en": "Return Before Departure",
        "de": "Rückkehr vor Abreise",
    },
    "warning.reversed_trip.message": {
        "en": "{count} trip(s) return before they depart; please check the dates.",
        "de": "{count} Reise(n) enden vor der Abreise; bitte die Daten prüfen.",
    },
    "warning.invalid_pre_entry.title": {
        "en": "Invalid Entry Date",
        "de": "Ungültiges Einreisedatum",
    },
    "warning.invalid_pre_entry.message": {
        "en": "The entry date is before the visa start date; please correct it.",
        "de": "Das Einreisedatum liegt vor dem Visumsbeginn; bitte korrigieren.",
    },
    "warning.pre_entry_not_counted.title": {
        "en": "Pre-Entry Period Not Counted",
        "de": "Zeit vor Einreise nicht angerechnet",
    },
    "warning.pre_entry_not_counted.message": {
        "en": "You entered {delay} days after your visa started, so the qualifying period starts on entry.",
        "de": "Sie sind {delay} Tage nach Visumsbeginn eingereist; der Qualifikationszeitraum beginnt mit der Einreise.",
    },
    "warning.no_assessment_date.title": {
        "en": "No Eligible Assessment Date",
        "de": "Kein gültiges Prüfdatum",
    },
    "warning.no_assessment_date.message": {
        "en": "No assessment date near {date} covers a full qualifying period.",
        "de": "Kein Prüfdatum um den {date} deckt einen vollständigen Qualifikationszeitraum ab.",
    },
    "warning.missing_configuration.title": {
        "en": "Missing Visa Details",
        "de": "Fehlende Visumsangaben",
    },
    "warning.missing_configuration.message": {
        "en": "Add your visa start date and settlement track to see eligibility.",
        "de": "Geben Sie Visumsbeginn und Aufenthaltsweg an, um die Berechtigung zu sehen.",
    },

    # Requirements
    "requirement.qualifying_period.label": {
        "en": "Complete qualifying period",
        "de": "Qualifikationszeitraum abschließen",
    },
    "requirement.qualifying_period.met": {
        "en": "Eligible from {date}",
        "de": "Berechtigt ab {date}",
    },
    "requirement.qualifying_period.pending": {
        "en": "In progress",
        "de": "Läuft",
    },
    "requirement.absence_limit.label": {
        "en": "Stay within absence limits",
        "de": "Abwesenheitsgrenzen einhalten",
    },
    "requirement.absence_limit.met": {
        "en": "Within limits",
        "de": "Innerhalb der Grenzen",
    },
    "requirement.absence_limit.not_met": {
        "en": "Exceeded {limit}-day limit",
        "de": "{limit}-Tage-Grenze überschritten",
    },
    "requirement.absence_limit.pending": {
        "en": "Not yet assessed",
        "de": "Noch nicht geprüft",
    },

    # Chart labels
    "chart.unknown_location": {
        "en": "Unknown",
        "de": "Unbekannt",
    },
}


def get_message(
    key: str,
    language: Optional[str] = None,
    **kwargs,
) -> str:
    """
    Get a translated message by key.

    Args:
        key: The message key (e.g., 'warning.limit_exceeded.title')
        language: Language code ('en' or 'de'). Defaults to DEFAULT_LANGUAGE.
        **kwargs: Format arguments for the message template

    Returns:
        The translated and formatted message string. Unknown keys are
        returned unchanged; unknown languages fall back to DEFAULT_LANGUAGE.

    Examples:
        >>> get_message('status.eligible', 'de')
        'Berechtigt'
        >>> get_message('requirement.absence_limit.not_met', 'en', limit=180)
        'Exceeded 180-day limit'
    """
    if language is None or language not in SUPPORTED_LANGUAGES:
        language = DEFAULT_LANGUAGE

    translations = TRANSLATIONS.get(key)
    if translations is None:
        return key

    message = translations.get(language)
    if message is None:
        message = translations.get(DEFAULT_LANGUAGE)
    if message is None:
        return key

    if kwargs:
        try:
            message = message.format(**kwargs)
        except KeyError:
            pass

    return message


def get_all_message_keys() -> set[str]:
    return set(TRANSLATIONS.keys())


def has_translation(key: str, language: str) -> bool:
    translations = TRANSLATIONS.get(key)
    if translations is None:
        return False
    return language in translations


def get_missing_translations(language: str) -> set[str]:
    """Get all message keys that have no translation for ``language``."""
    return {
        key for key, translations in TRANSLATIONS.items()
        if language not in translations
    }


def validate_translations() -> dict[str, set[str]]:
    """
    Check every supported language for missing keys.

    Returns:
        Mapping of language code to missing keys; empty sets mean complete.
    """
    return {
        language: get_missing_translations(language)
        for language in SUPPORTED_LANGUAGES
    }
