def test_health_is_public(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_api_requires_site_login(client):
    resp = client.get("/api/inquiries")
    assert resp.status_code == 401
    body = resp.get_json()
    assert body["message"] == "Authentication required"
    assert body["login"] == "/api/auth/login"


def test_status_reflects_both_gates(client):
    assert client.get("/api/auth/status").get_json() == {"isAuthenticated": False, "isAdmin": False}
    client.post("/api/auth/login", json={"password": "site-pass"})
    assert client.get("/api/auth/status").get_json() == {"isAuthenticated": True, "isAdmin": False}
    client.post("/api/admin/login", json={"password": "admin-pass"})
    assert client.get("/api/auth/status").get_json() == {"isAuthenticated": True, "isAdmin": True}


def test_login_failures(client):
    resp = client.post("/api/auth/login", json={})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Password is required"

    resp = client.post("/api/auth/login", json={"password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Invalid password"}
    assert client.get("/api/inquiries").status_code == 401


def test_login_accepts_form_post(client):
    resp = client.post("/api/auth/login", data={"password": "site-pass"})
    assert resp.status_code == 200
    assert client.get("/api/inquiries").status_code == 200


def test_site_password_does_not_open_admin(auth_client):
    resp = auth_client.post("/api/admin/login", json={"password": "site-pass"})
    assert resp.status_code == 401
    resp = auth_client.delete("/api/inquiries/some-id")
    assert resp.status_code == 401
    assert resp.get_json()["login"] == "/api/admin/login"


def test_logout_closes_both_gates(admin_client):
    admin_client.post("/api/auth/logout")
    assert admin_client.get("/api/auth/status").get_json() == {"isAuthenticated": False, "isAdmin": False}


def test_admin_logout_keeps_site_session(admin_client):
    admin_client.post("/api/admin/logout")
    assert admin_client.get("/api/auth/status").get_json() == {"isAuthenticated": True, "isAdmin": False}


def test_change_site_password(auth_client):
    resp = auth_client.post(
        "/api/auth/change-password", json={"currentPassword": "wrong", "newPassword": "brand-new"}
    )
    assert resp.status_code == 401

    resp = auth_client.post(
        "/api/auth/change-password", json={"currentPassword": "site-pass", "newPassword": "abc"}
    )
    assert resp.status_code == 400

    resp = auth_client.post(
        "/api/auth/change-password", json={"currentPassword": "site-pass", "newPassword": "brand-new"}
    )
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True

    auth_client.post("/api/auth/logout")
    assert auth_client.post("/api/auth/login", json={"password": "site-pass"}).status_code == 401
    assert auth_client.post("/api/auth/login", json={"password": "brand-new"}).status_code == 200


def test_change_admin_password_requires_admin(auth_client):
    resp = auth_client.post(
        "/api/admin/change-password", json={"currentPassword": "admin-pass", "newPassword": "newadmin"}
    )
    assert resp.status_code == 401


def test_html_caller_gets_login_prompt(app):
    from utils import site_required

    @app.route("/dashboard")
    @site_required
    def dashboard():
        return "dashboard"

    client = app.test_client()
    resp = client.get("/dashboard", headers={"Accept": "text/html"})
    assert resp.status_code == 401
    assert b'type="password"' in resp.data
    assert b"/api/auth/login" in resp.data

    client.post("/api/auth/login", json={"password": "site-pass"})
    resp = client.get("/dashboard", headers={"Accept": "text/html"})
    assert resp.status_code == 200
    assert resp.data == b"dashboard"
