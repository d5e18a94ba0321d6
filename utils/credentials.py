from __future__ import annotations

from typing import Optional, Tuple

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db
from models import User

# gate scope -> users.username
ACCOUNTS = {"site": "website", "admin": "admin"}
HASH_PREFIXES = ("pbkdf2:", "scrypt:")


def hash_password(plain: str) -> str:
    return generate_password_hash((plain or "").strip(), method="pbkdf2:sha256", salt_length=16)


def is_hashed(value: Optional[str]) -> bool:
    return bool(value) and str(value).startswith(HASH_PREFIXES)


def verify_password(stored_value: str, candidate: str) -> bool:
    """Accepts werkzeug hashes and, for accounts imported as plain text, a direct match."""
    candidate = (candidate or "").strip()
    if is_hashed(stored_value):
        return check_password_hash(stored_value, candidate)
    return bool(stored_value) and stored_value == candidate


def ensure_default_users() -> None:
    """Seed the site and admin accounts from config when missing."""
    seeds = {
        "website": current_app.config.get("SITE_PASSWORD"),
        "admin": current_app.config.get("ADMIN_PASSWORD"),
    }
    created = []
    for username, password in seeds.items():
        if User.query.filter_by(username=username).first() is None and password:
            db.session.add(User(username=username, password=hash_password(password)))
            created.append(username)
    if created:
        db.session.commit()
        current_app.logger.info("Seeded default accounts: %s", ", ".join(created))


def _account(scope: str) -> User | None:
    return User.query.filter_by(username=ACCOUNTS[scope]).first()


def check_password(scope: str, candidate: str) -> bool:
    account = _account(scope)
    if account is None:
        current_app.logger.error("No '%s' account configured", ACCOUNTS[scope])
        return False
    if not verify_password(account.password, candidate):
        return False
    if not is_hashed(account.password):
        account.password = hash_password(candidate)
        db.session.commit()
        current_app.logger.info("Upgraded plain-text password for '%s' to a hash", account.username)
    return True


def change_password(scope: str, current: str, new: str) -> Tuple[bool, int, str]:
    """Returns (ok, http_status, message)."""
    if not current or not new:
        return False, 400, "Current password and new password are required"
    account = _account(scope)
    if account is None:
        return False, 500, "System configuration error"
    if not verify_password(account.password, current):
        return False, 401, "Current password is incorrect"
    min_len = int(current_app.config.get("MIN_PASSWORD_LENGTH", 6))
    if len(new.strip()) < min_len:
        return False, 400, f"New password must be at least {min_len} characters long"
    account.password = hash_password(new)
    db.session.commit()
    label = "Website" if scope == "site" else "Admin"
    current_app.logger.info("%s password changed", label)
    return True, 200, f"{label} password updated successfully"
