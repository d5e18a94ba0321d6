from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from flask import current_app

from extensions import db
from models import Setting


def get_setting(key: str, default: Optional[str] = None) -> Optional[str]:
    row = Setting.query.filter_by(key=key).first()
    if row is None or row.value is None:
        return default
    return str(row.value)


def get_setting_row(key: str) -> Optional[Setting]:
    return Setting.query.filter_by(key=key).first()


def set_setting(key: str, value: str, description: Optional[str] = None) -> Setting:
    """Insert or update ``key``; an existing description is kept unless a new one is given."""
    row = Setting.query.filter_by(key=key).first()
    if row is None:
        row = Setting(key=key, value=value, description=description)
        db.session.add(row)
    else:
        row.value = value
        row.updated_at = datetime.utcnow()
        if description:
            row.description = description
    db.session.commit()
    return row


def all_settings() -> List[Setting]:
    return Setting.query.order_by(Setting.key).all()


def institute_name() -> str:
    """Name printed on reports and reminders; the ``institute_name`` setting overrides config."""
    return get_setting("institute_name") or current_app.config.get("INSTITUTE_NAME", "")
