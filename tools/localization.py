# -*- coding: utf-8 -*-
"""
Handles internationalization (i18n) of the status messages the core reports.
Loads language strings from a JSON file and provides the translation function.
"""

import json
import os
import sys
from typing import Dict
from config.settings import DEFAULT_LANGUAGE, KNOWN_LANGUAGES

# ==============================================================================
# Default translation dictionaries
# ==============================================================================

# --- Default English translations ---
DEFAULT_ENGLISH_TRANSLATIONS: Dict[str, str] = {
    # Status messages
    "initializing": "Initializing...",
    "daemon_running": "accd is running",
    "daemon_not_running": "accd is not running",
    "config_applied": "Configuration applied.",
    "invalid_capacity": "Invalid capacity: shutdown <= resume < pause is required.",
    "config_apply_failed": "Some settings could not be applied: {groups}",
    "wrong_volt_file": "The voltage control file is not supported on this device.",
    "profile_applied": "Profile '{name}' applied.",
    "profile_not_found": "Profile '{name}' not found.",
    "daemon_action_failed": "accd {action} failed.",
    "acc_not_installed": "acc is not installed.",
    "acc_reboot_required": "acc was installed, reboot to finish the installation.",

    # Command line
    "no_profiles": "No profiles.",
    "no_schedules": "No scheduled jobs.",
    "schedule_once": "once",
    "schedule_daily": "daily",
    "profile_selected_marker": "(selected)",

    # Language display names
    "lang_display_name_en": "English",
    "lang_display_name_it": "Italiano",
}

# --- Default Italian translations ---
DEFAULT_ITALIAN_TRANSLATIONS: Dict[str, str] = {
    "initializing": "Inizializzazione...",
    "daemon_running": "accd è in esecuzione",
    "daemon_not_running": "accd non è in esecuzione",
    "config_applied": "Configurazione applicata.",
    "invalid_capacity": "Capacità non valida: serve spegnimento <= ripresa < pausa.",
    "config_apply_failed": "Alcune impostazioni non sono state applicate: {groups}",
    "wrong_volt_file": "Il file di controllo del voltaggio non è supportato da questo dispositivo.",
    "profile_applied": "Profilo '{name}' applicato.",
    "profile_not_found": "Profilo '{name}' non trovato.",
    "daemon_action_failed": "accd {action} non riuscito.",
    "acc_not_installed": "acc non è installato.",
    "acc_reboot_required": "acc è stato installato, riavvia per completare l'installazione.",
    "no_profiles": "Nessun profilo.",
    "no_schedules": "Nessuna operazione pianificata.",
    "schedule_once": "una volta",
    "schedule_daily": "giornaliero",
    "profile_selected_marker": "(selezionato)",
    "lang_display_name_en": "English",
    "lang_display_name_it": "Italiano",
}

# ==============================================================================
# Core translation logic
# ==============================================================================

_translations: Dict[str, Dict[str, str]] = {
    "en": DEFAULT_ENGLISH_TRANSLATIONS.copy(),
    "it": DEFAULT_ITALIAN_TRANSLATIONS.copy(),
}
_current_language: str = DEFAULT_LANGUAGE

def load_translations(file_path: str):
    """Merges user translations from `file_path` over the built-in ones."""
    global _translations

    default_data = {
        "en": DEFAULT_ENGLISH_TRANSLATIONS.copy(),
        "it": DEFAULT_ITALIAN_TRANSLATIONS.copy()
    }
    loaded_data = {}

    try:
        if os.path.exists(file_path) and os.path.getsize(file_path) > 0:
            with open(file_path, 'r', encoding='utf-8') as f:
                loaded_data = json.load(f)
            if not isinstance(loaded_data, dict):
                raise json.JSONDecodeError("Invalid format", "", 0)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read language file '{file_path}': {e}", file=sys.stderr)
        loaded_data = {}

    # Start from the built-in defaults so a partial file never loses keys
    final_translations = default_data.copy()
    for lang, trans in loaded_data.items():
        if isinstance(trans, dict):
            merged = default_data.get(lang, DEFAULT_ENGLISH_TRANSLATIONS).copy()
            merged.update(trans)
            final_translations[lang] = merged

    _translations = final_translations

def set_language(lang_code: str):
    global _current_language
    if lang_code in _translations:
        _current_language = lang_code
    else:
        _current_language = DEFAULT_LANGUAGE

def tr(key: str, **kwargs) -> str:
    lang_dict = _translations.get(_current_language, {})
    translation = lang_dict.get(key)

    # Fall back to the hard-coded English text, then to the key itself
    if translation is None:
        translation = DEFAULT_ENGLISH_TRANSLATIONS.get(key, key)

    try:
        return translation.format(**kwargs)
    except (KeyError, ValueError):
        return translation

def get_available_languages() -> Dict[str, str]:
    available = {}
    for code in sorted(_translations.keys()):
        display_name_key = f"lang_display_name_{code}"
        display_name = _translations[code].get(display_name_key, KNOWN_LANGUAGES.get(code, code.upper()))
        available[code] = display_name
    return available

def get_current_language() -> str:
    return _current_language
