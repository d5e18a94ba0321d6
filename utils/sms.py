from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

import requests
from flask import current_app

from utils.notify import normalize_phone

PROVIDER_LABELS = {
    "msg91": "MSG91",
    "fast2sms": "Fast2SMS",
    "textlocal": "TextLocal",
    "twilio": "Twilio",
    "console": "Console (Simulation)",
}


def _digits_only(number: str) -> str:
    return "".join(ch for ch in str(number) if ch.isdigit())


def _post(url: str, **kwargs: Any) -> Tuple[bool, str | None]:
    timeout = current_app.config.get("SMS_TIMEOUT_SECONDS", 20)
    try:
        r = requests.post(url, timeout=timeout, **kwargs)
    except requests.RequestException as e:
        return False, str(e)
    if 200 <= r.status_code < 300:
        return True, None
    return False, f"HTTP {r.status_code}: {r.text}"


def _send_msg91(to: str, body: str) -> Tuple[bool, str | None]:
    cfg = current_app.config
    if not cfg.get("MSG91_API_KEY") or not cfg.get("MSG91_SENDER_ID"):
        return False, "MSG91 credentials not configured"
    return _post(
        "https://api.msg91.com/api/v5/flow/",
        headers={"authkey": cfg["MSG91_API_KEY"], "Content-Type": "application/json"},
        json={"sender": cfg["MSG91_SENDER_ID"], "short_url": "0", "mobiles": _digits_only(to), "message": body},
    )


def _send_fast2sms(to: str, body: str) -> Tuple[bool, str | None]:
    cfg = current_app.config
    if not cfg.get("FAST2SMS_API_KEY"):
        return False, "Fast2SMS credentials not configured"
    return _post(
        "https://www.fast2sms.com/dev/bulkV2",
        headers={"authorization": cfg["FAST2SMS_API_KEY"], "Content-Type": "application/json"},
        json={"route": "q", "message": body, "language": "english", "flash": 0, "numbers": _digits_only(to)},
    )


def _send_textlocal(to: str, body: str) -> Tuple[bool, str | None]:
    cfg = current_app.config
    if not cfg.get("TEXTLOCAL_API_KEY") or not cfg.get("TEXTLOCAL_SENDER"):
        return False, "TextLocal credentials not configured"
    return _post(
        "https://api.textlocal.in/send/",
        data={
            "apikey": cfg["TEXTLOCAL_API_KEY"],
            "numbers": _digits_only(to),
            "message": body,
            "sender": cfg["TEXTLOCAL_SENDER"],
        },
    )


def _send_twilio(to: str, body: str) -> Tuple[bool, str | None]:
    cfg = current_app.config
    sid = cfg.get("TWILIO_ACCOUNT_SID")
    token = cfg.get("TWILIO_AUTH_TOKEN")
    sender = cfg.get("TWILIO_PHONE_NUMBER")
    if not sid or not token or not sender:
        return False, "Twilio credentials not configured"
    return _post(
        f"https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json",
        auth=(sid, token),
        data={"From": sender, "To": normalize_phone(to), "Body": body},
    )


def _send_console(to: str, body: str) -> Tuple[bool, str | None]:
    current_app.logger.info("SMS to %s: %s", to, body)
    return True, None


SENDERS: Dict[str, Callable[[str, str], Tuple[bool, str | None]]] = {
    "msg91": _send_msg91,
    "fast2sms": _send_fast2sms,
    "textlocal": _send_textlocal,
    "twilio": _send_twilio,
    "console": _send_console,
}


def send_sms(to: str, body: str) -> Dict[str, Any]:
    """Send ``body`` through the configured provider. Never raises."""
    provider = (current_app.config.get("SMS_PROVIDER") or "console").lower()
    sender = SENDERS.get(provider)
    if sender is None:
        current_app.logger.warning("Unknown SMS_PROVIDER %r, logging message instead", provider)
        provider, sender = "console", _send_console
    ok, reason = sender(to, body)
    if not ok:
        current_app.logger.warning("SMS via %s to %s failed: %s", provider, to, reason)
    return {"success": ok, "provider": PROVIDER_LABELS[provider], "error": reason}
