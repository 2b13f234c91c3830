# config_manager.py
import json
import logging
from pathlib import Path

from . import error as E

logger = logging.getLogger(__name__)

config_json = Path(__file__).resolve().parent / "config.json"
ui_strings = Path(__file__).resolve().parent / "ui_strings.json"


DEFAULT_SETTINGS = {
    "darkmode": False,
    "angle_mode": "deg",
    "fractions": True,
    "shift_to_copy": True,
    "undo_limit": 50,
    "history_limit": 100,
    "debug": False,
    "request_timeout": 10,
    "currency_api_url": "https://api.frankfurter.app/latest?from=USD",
    "ai_model": "gemini-2.5-flash",
    "ai_api_key_env": "GEMINI_API_KEY",
}


def _read_json(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("%s%s (%s)", E.ERROR_MESSAGES["5001"], path, e)
        return {}


def load_setting_value(key_value):
    """Return one setting, or all of them for key_value == "all". Missing keys fall back to the defaults."""
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(_read_json(config_json))

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value):
    settings_dict = _read_json(ui_strings)

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, "")


def save_setting(settings_dict):
    try:
        with open(config_json, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except (OSError, TypeError) as e:
        logger.error("%s%s (%s)", E.ERROR_MESSAGES["5002"], config_json, e)
        return {}
