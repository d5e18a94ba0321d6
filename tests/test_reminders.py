from unittest.mock import MagicMock, patch

import requests

from utils.notify import normalize_phone
from utils.sms import send_sms


def _enrollment(client, course_id, name="Asha Rao", contact="9876543210"):
    inquiry = client.post(
        "/api/inquiries",
        json={
            "studentName": name,
            "courseId": course_id,
            "contactNo": contact,
            "address": "12 Main Road",
            "fatherContactNo": "9876500000",
            "batchId": "batch1",
        },
    ).get_json()
    return client.post(
        "/api/enrollments",
        json={
            "inquiryId": inquiry["id"],
            "fatherName": "Suresh",
            "studentEducation": "HSC",
            "studentEmail": "student@example.com",
            "startDate": "2025-06-01",
            "feePlan": "full",
        },
    ).get_json()


def test_normalize_phone(app):
    with app.app_context():
        assert normalize_phone("9876543210") == "+919876543210"
        assert normalize_phone("09876543210") == "+919876543210"
        assert normalize_phone("+447700900123") == "+447700900123"
        assert normalize_phone("") is None


def test_console_provider_logs_only(app):
    with app.app_context(), patch("utils.sms.requests.post") as mock_post:
        result = send_sms("9876543210", "hello")
    assert result == {"success": True, "provider": "Console (Simulation)", "error": None}
    mock_post.assert_not_called()


def test_unknown_provider_falls_back_to_console(app):
    app.config["SMS_PROVIDER"] = "pigeon"
    with app.app_context():
        result = send_sms("9876543210", "hello")
    assert result["success"] is True
    assert result["provider"] == "Console (Simulation)"


def test_twilio_provider_posts_to_api(app):
    app.config.update(
        SMS_PROVIDER="twilio",
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="secret",
        TWILIO_PHONE_NUMBER="+15005550006",
    )
    with app.app_context(), patch("utils.sms.requests.post") as mock_post:
        mock_post.return_value = MagicMock(status_code=201, text="{}")
        result = send_sms("9876543210", "hello")
    assert result == {"success": True, "provider": "Twilio", "error": None}
    args, kwargs = mock_post.call_args
    assert args[0] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
    assert kwargs["auth"] == ("AC123", "secret")
    assert kwargs["data"]["To"] == "+919876543210"


def test_provider_without_credentials_fails_softly(app):
    app.config.update(SMS_PROVIDER="fast2sms", FAST2SMS_API_KEY="")
    with app.app_context(), patch("utils.sms.requests.post") as mock_post:
        result = send_sms("9876543210", "hello")
    assert result["success"] is False
    assert "not configured" in result["error"]
    mock_post.assert_not_called()


def test_network_error_is_reported(app):
    app.config.update(SMS_PROVIDER="fast2sms", FAST2SMS_API_KEY="k")
    with app.app_context(), patch(
        "utils.sms.requests.post", side_effect=requests.ConnectionError("no route")
    ):
        result = send_sms("9876543210", "hello")
    assert result["success"] is False
    assert "no route" in result["error"]


def test_send_reminder_endpoint(auth_client, course):
    enrollment = _enrollment(auth_client, course["id"])
    with patch("routes.reminder_routes.send_sms") as mock_send:
        mock_send.return_value = {"success": True, "provider": "Console (Simulation)", "error": None}
        resp = auth_client.post("/api/send-reminder", json={"enrollmentId": enrollment["id"]})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["sentTo"] == "9876543210"
    assert body["studentName"] == "Asha Rao"
    to, message = mock_send.call_args[0]
    assert to == "9876543210"
    assert "Python Programming" in message
    assert "₹50,000" in message


def test_send_reminder_validation(auth_client):
    assert auth_client.post("/api/send-reminder", json={}).status_code == 400
    assert auth_client.post("/api/send-reminder", json={"enrollmentId": "nope"}).status_code == 404


def test_bulk_reminders_skip_settled_enrollments(auth_client, course):
    paid = _enrollment(auth_client, course["id"], name="Paid Up")
    _enrollment(auth_client, course["id"], name="Owes Money", contact="9123456789")
    auth_client.post(
        "/api/payments",
        json={"enrollmentId": paid["id"], "amount": 50000, "paymentDate": "2025-06-02", "paymentMode": "cash"},
    )

    resp = auth_client.post("/api/send-bulk-reminders", json={"courseId": "all"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["sentCount"] == 1
    assert body["successCount"] == 1
    assert body["results"][0]["studentName"] == "Owes Money"
    assert body["results"][0]["pendingAmount"] == "50000.00"
