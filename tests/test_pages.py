import html

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.errors import BAD_REQUEST_MESSAGE, FORBIDDEN_MESSAGE, LOGIN_REQUIRED_MESSAGE, SERVER_ERROR_MESSAGE
from storefront.main import app
from storefront.pages import get_http_client

ADDRESS = {
    "street": "123 Main Street",
    "city": "New York",
    "state": "NY",
    "zipCode": "10001",
    "country": "USA",
    "phoneNumber": "5551234567",
}
SUCCESS = {"orderId": 15, "paypalOrderId": "PP-15", "approvalUrl": "https://www.sandbox.paypal.com/checkoutnow?token=PP-15"}


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def use_backend(server):
    async def override():
        async with server.async_client() as c:
            yield c
    app.dependency_overrides[get_http_client] = override


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_checkout_page_renders_form(client):
    r = client.get("/checkout")
    assert r.status_code == 200
    assert 'name="street"' in r.text
    assert 'name="zipCode"' in r.text
    assert 'value="USA"' in r.text


def test_submit_without_token_shows_login_message(client, backend):
    server = backend(200, SUCCESS)
    use_backend(server)

    r = client.post("/checkout", data=ADDRESS, follow_redirects=False)

    assert r.status_code == 200
    assert html.escape(LOGIN_REQUIRED_MESSAGE) in r.text
    assert server.requests == []
    # entered values survive the failed submit
    assert 'value="123 Main Street"' in r.text


def test_submit_success_redirects_and_stores_ids(client, backend):
    server = backend(200, SUCCESS)
    use_backend(server)
    client.cookies.set("token", "tok-abc")

    r = client.post("/checkout", data=ADDRESS, follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"] == SUCCESS["approvalUrl"]
    assert r.cookies.get("orderId") == "15"
    assert r.cookies.get("paypalOrderId") == "PP-15"

    sent = server.requests[0]
    assert sent.headers["Authorization"] == "Bearer tok-abc"
    body = server.last_json
    assert body["shippingAddress"] == ADDRESS
    assert body["returnUrl"] == "http://testserver/payment/success"
    assert body["cancelUrl"] == "http://testserver/payment/cancel"


def test_authorization_header_is_accepted(client, backend):
    server = backend(200, SUCCESS)
    use_backend(server)

    r = client.post("/checkout", data=ADDRESS, headers={"Authorization": "Bearer hdr-tok"}, follow_redirects=False)

    assert r.status_code == 303
    assert server.requests[0].headers["Authorization"] == "Bearer hdr-tok"


@pytest.mark.parametrize("status, body, expected", [
    (403, {"error": "Access Denied"}, FORBIDDEN_MESSAGE),
    (400, {}, BAD_REQUEST_MESSAGE),
    (400, {"error": "Cart is empty"}, "Cart is empty"),
])
def test_submit_error_is_rendered(client, backend, status, body, expected):
    use_backend(backend(status, body))
    client.cookies.set("token", "tok")

    r = client.post("/checkout", data=ADDRESS, follow_redirects=False)

    assert r.status_code == 200
    assert html.escape(expected) in r.text
    assert "orderId" not in r.cookies


def test_success_page_captures_payment(client, backend):
    server = backend(200, {"success": True, "message": "Payment captured successfully"})
    use_backend(server)
    client.cookies.set("token", "tok")
    client.cookies.set("orderId", "15")
    client.cookies.set("paypalOrderId", "PP-15")

    r = client.get("/payment/success")

    assert r.status_code == 200
    assert "Payment successful" in r.text
    assert "Payment captured successfully" in r.text
    assert server.last_json == {"orderId": 15, "paypalOrderId": "PP-15"}


def test_success_page_without_pending_payment(client, backend):
    server = backend(200, {})
    use_backend(server)

    r = client.get("/payment/success")

    assert "No pending payment found" in r.text
    assert server.requests == []


def test_cancel_page_clears_identifiers(client):
    client.cookies.set("orderId", "15")
    client.cookies.set("paypalOrderId", "PP-15")

    r = client.get("/payment/cancel")

    assert r.status_code == 200
    assert "Payment cancelled" in r.text
    assert "Order #15" in r.text
    set_cookie = r.headers.get_list("set-cookie")
    assert any(h.startswith("orderId=") for h in set_cookie)
    assert any(h.startswith("paypalOrderId=") for h in set_cookie)


def test_success_page_without_token_shows_login_message(client, backend):
    server = backend(200, {"success": True})
    use_backend(server)
    client.cookies.set("orderId", "15")
    client.cookies.set("paypalOrderId", "PP-15")

    r = client.get("/payment/success")

    assert r.status_code == 200
    assert "Payment not completed" in r.text
    assert html.escape(LOGIN_REQUIRED_MESSAGE) in r.text
    assert server.requests == []


@pytest.mark.parametrize("server_args, expected", [
    ({"status_code": 500, "body": {"error": "PayPal capture failed"}}, SERVER_ERROR_MESSAGE),
    ({"status_code": 422, "body": {"error": "ORDER_NOT_APPROVED"}}, "ORDER_NOT_APPROVED"),
    ({"exc": httpx.ConnectError("connection refused")}, "Cannot connect to backend server."),
])
def test_success_page_capture_failure_keeps_identifiers(client, backend, server_args, expected):
    server = backend(**server_args)
    use_backend(server)
    client.cookies.set("token", "tok")
    client.cookies.set("orderId", "15")
    client.cookies.set("paypalOrderId", "PP-15")

    r = client.get("/payment/success")

    assert r.status_code == 200
    assert "Payment not completed" in r.text
    assert expected in r.text
    assert len(server.requests) == 1
    # nothing is cleared, the buyer can retry the capture
    assert not any(
        h.startswith(("orderId=", "paypalOrderId=")) for h in r.headers.get_list("set-cookie")
    )


def test_submit_with_non_json_body_shows_parse_error(client, backend):
    use_backend(backend(502, text="<html>Bad Gateway</html>"))
    client.cookies.set("token", "tok")

    r = client.post("/checkout", data=ADDRESS, follow_redirects=False)

    assert r.status_code == 200
    assert "Server returned invalid JSON. Status: 502." in r.text
    assert "orderId" not in r.cookies
