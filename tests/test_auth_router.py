from fastapi.testclient import TestClient

from phone_auth.application.errors import (
    InvalidInputError,
    RateLimitedError,
    UnauthorizedError,
    UpstreamError,
)
from phone_auth.core.config import Settings
from phone_auth.main import create_app

from fakes import FakeIdentity, FakeOTP, GOOD_CODE, PHONE, RecordingAudit, SESSION_ID


def make_client(otp=None, identity=None):
    app = create_app(
        settings=Settings(_env_file=None),
        otp_provider=otp or FakeOTP(),
        identity_provider=identity or FakeIdentity(),
        audit_logger=RecordingAudit(),
    )
    return TestClient(app)


def verify_body(code=GOOD_CODE, session_id=SESSION_ID):
    return {"phone_number": PHONE, "code": code, "authentication_uuid": session_id}


def test_send_code_returns_session_id():
    client = make_client()
    resp = client.post("/send_code", json={"phone_number": PHONE})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": {"authentication_uuid": SESSION_ID}, "error": None}


def test_send_code_missing_phone_is_400_without_remote_call():
    otp = FakeOTP()
    client = make_client(otp=otp)
    resp = client.post("/send_code", json={})
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_request"
    assert otp.sent == []


def test_send_code_unparseable_body_is_400():
    otp = FakeOTP()
    client = make_client(otp=otp)
    resp = client.post("/send_code", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert otp.sent == []


def test_send_code_rate_limited_is_429():
    client = make_client(otp=FakeOTP(error=RateLimitedError()))
    resp = client.post("/send_code", json={"phone_number": PHONE})
    assert resp.status_code == 429
    assert resp.json()["code"] == "rate_limited"


def test_send_code_provider_invalid_input_is_400():
    client = make_client(otp=FakeOTP(error=InvalidInputError()))
    resp = client.post("/send_code", json={"phone_number": "12"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_input"


def test_send_code_upstream_failure_is_500():
    client = make_client(otp=FakeOTP(error=UpstreamError("unexpected status code: 502", status_code=502)))
    resp = client.post("/send_code", json={"phone_number": PHONE})
    assert resp.status_code == 500
    assert resp.json()["code"] == "upstream_failure"


def test_upstream_unauthorized_on_both_operations():
    client = make_client(otp=FakeOTP(error=UnauthorizedError()))
    send = client.post("/send_code", json={"phone_number": PHONE})
    verify = client.post("/verify", json=verify_body())
    assert send.status_code == 401
    assert verify.status_code == 401
    assert send.json()["code"] == "upstream_unauthorized"
    assert verify.json()["code"] == "upstream_unauthorized"


def test_verify_returns_token_for_new_user():
    identity = FakeIdentity()
    client = make_client(identity=identity)
    resp = client.post("/verify", json=verify_body())
    assert resp.status_code == 200
    assert resp.json()["data"] == {"token": "token-for-uid-1"}
    assert ("create", PHONE) in identity.calls


def test_verify_wrong_code_is_401_code_rejected():
    identity = FakeIdentity()
    client = make_client(identity=identity)
    resp = client.post("/verify", json=verify_body(code="000000"))
    assert resp.status_code == 401
    assert resp.json()["code"] == "code_rejected"
    assert identity.calls == []


def test_verify_malformed_session_id_rejected_locally():
    otp = FakeOTP()
    client = make_client(otp=otp)
    resp = client.post("/verify", json=verify_body(session_id="abc-123"))
    assert resp.status_code == 400
    assert otp.checked == []


def test_verify_missing_phone_is_400():
    otp = FakeOTP()
    client = make_client(otp=otp)
    resp = client.post("/verify", json={"code": GOOD_CODE, "authentication_uuid": SESSION_ID})
    assert resp.status_code == 400
    assert otp.checked == []


def test_verify_create_user_failure_is_500():
    client = make_client(identity=FakeIdentity(create_error=True))
    resp = client.post("/verify", json=verify_body())
    assert resp.status_code == 500
    assert resp.json()["code"] == "identity_provider_failure"


def test_health():
    client = make_client()
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_unexpected_error_is_500_internal_error():
    client = make_client(otp=FakeOTP(error=RuntimeError("boom")))
    resp = client.post("/send_code", json={"phone_number": PHONE})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "data": None, "error": "Internal server error", "code": "internal_error"}


def test_unknown_route_uses_error_envelope():
    client = make_client()
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["success"] is False
    assert resp.json()["code"] == "http_error"


def test_wrong_method_uses_error_envelope():
    client = make_client()
    resp = client.get("/send_code")
    assert resp.status_code == 405
    assert resp.json()["code"] == "http_error"
