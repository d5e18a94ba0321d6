from extensions import db
from models import User
from utils.credentials import check_password, hash_password, is_hashed, verify_password


def test_default_accounts_are_seeded_hashed(app):
    with app.app_context():
        users = {u.username: u for u in User.query.all()}
        assert set(users) == {"website", "admin"}
        assert all(is_hashed(u.password) for u in users.values())
        assert check_password("site", "site-pass")
        assert check_password("admin", "admin-pass")
        assert not check_password("admin", "site-pass")


def test_verify_password_trims_and_handles_empty():
    stored = hash_password("secret1")
    assert verify_password(stored, " secret1 ")
    assert not verify_password(stored, "")
    assert not verify_password("", "")


def test_plain_text_row_is_upgraded_on_login(app):
    with app.app_context():
        account = User.query.filter_by(username="website").first()
        account.password = "legacy-pass"
        db.session.commit()

        assert not check_password("site", "wrong")
        assert account.password == "legacy-pass"

        assert check_password("site", "legacy-pass")
        assert is_hashed(User.query.filter_by(username="website").first().password)
        assert check_password("site", "legacy-pass")
