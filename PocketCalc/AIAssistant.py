# AIAssistant.py
"""""
Builds a question about the current calculator state and sends it to the Gemini REST API.
"""""
import logging
import os

import requests

from . import CurrencyEngine
from . import config_manager as config_manager
from . import error as E

logger = logging.getLogger(__name__)

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

ERROR_STATE_TEXT = "I cannot analyze an error state. Please enter a valid expression."
NO_ANSWER_TEXT = "No explanation could be generated."
APOLOGY_TEXT = "Sorry, I couldn't connect to the AI service. Please check your internet connection or API key configuration."


def build_prompt(session, rates=None):
    """Question for the current state, or None when the display shows an error."""
    display_value = session.display_value

    if session.mode == "currency":
        rate = CurrencyEngine.get_exchange_rate(session.currency_from, session.currency_to, rates)
        currency_name = CurrencyEngine.CURRENCY_NAMES.get(session.currency_to, session.currency_to)
        return (f"I am converting {display_value} {session.currency_from} to {session.currency_to}. "
                f"The exchange rate I'm using is roughly {rate:.4f}. "
                f"Can you confirm if this is accurate for today, and tell me a little bit about the history of the {currency_name}?")

    if session.is_error:
        return None

    if session.expression and display_value:
        return (f"I am currently calculating the following expression: \"{session.expression}{display_value}\". "
                "Please verify this calculation, explain the steps to solve it, and provide the final result.")

    if session.history and (display_value == "0" or session.overwrite):
        return (f"I just calculated: \"{session.history[0]}\". "
                "Please check if this result is correct and explain the mathematical steps taken to get there in a simple, clear way.")

    return (f"I have the number \"{display_value}\" on my calculator display. "
            "Please tell me an interesting mathematical fact or property about this number.")


def explain(prompt, model=None, api_key=None, timeout=None):
    """Send the prompt and return the answer text. Never raises; failures become APOLOGY_TEXT."""
    if prompt is None:
        return ERROR_STATE_TEXT

    settings = config_manager.load_setting_value("all")
    if model is None:
        model = settings["ai_model"]
    if api_key is None:
        api_key = os.environ.get(settings["ai_api_key_env"], "")
    if timeout is None:
        timeout = settings["request_timeout"]

    payload = {"contents": [{"parts": [{"text": prompt}]}]}

    try:
        response = requests.post(
            API_URL.format(model=model),
            headers={"x-goog-api-key": api_key},
            json=payload,
            timeout=timeout,
        )
        response.raise_for_status()
        data = response.json()
        parts = data["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts)

    except (requests.RequestException, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
        # Only the exception type: requests messages can carry the request URL
        logger.error("%s%s", E.ERROR_MESSAGES["6002"], type(e).__name__)
        return APOLOGY_TEXT

    logger.debug("AI answer received (%d characters)", len(text))
    return text or NO_ANSWER_TEXT
