import pytest

from homeservices.db.models import Booking, BookingStatus, Role


@pytest.fixture
def partner(make_user):
    return make_user(role=Role.PARTNER, email="partner@example.com")


@pytest.fixture
def customer(make_user):
    return make_user(email="customer@example.com")


def book(client, headers, service_id, price=500):
    return client.post(
        "/api/bookings",
        json={"serviceId": service_id, "date": "2025-02-01", "time": "09:30", "address": "1 Main St", "price": price},
        headers=headers,
    )


def test_customer_books_and_lists(client, partner, customer, make_service, auth_headers):
    service = make_service(partner)
    response = book(client, auth_headers(customer), service.id)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "upcoming"
    assert data["serviceId"] == service.id
    assert data["specialInstructions"] is None

    mine = client.get("/api/bookings/me", headers=auth_headers(customer)).json()["data"]
    assert [b["id"] for b in mine] == [data["id"]]


def test_booking_requires_auth(client, partner, make_service):
    response = client.post("/api/bookings", json={"serviceId": make_service(partner).id})
    assert response.status_code == 401


def test_booking_validation(client, customer, auth_headers):
    response = client.post(
        "/api/bookings", json={"serviceId": 1, "price": "a lot"}, headers=auth_headers(customer)
    )
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert {"date", "time", "address", "price"} <= fields


def test_booking_unknown_service(client, customer, auth_headers):
    response = book(client, auth_headers(customer), 999)
    assert response.status_code == 404
    assert response.json()["error"] == "Service not found"


def test_partner_sees_bookings_for_own_services(
    client, partner, customer, make_user, make_service, make_booking, auth_headers
):
    mine = make_booking(customer, make_service(partner))
    make_booking(customer, make_service(make_user(role=Role.PARTNER)))

    response = client.get("/api/partner/bookings", headers=auth_headers(partner))
    assert [b["id"] for b in response.json()["data"]] == [mine.id]


def test_user_role_cannot_update_status_regardless_of_payload(
    client, partner, customer, make_service, make_booking, auth_headers
):
    booking = make_booking(customer, make_service(partner))
    for payload in ({"status": "completed"}, {"status": "bogus"}, {}):
        response = client.put(
            f"/api/partner/bookings/{booking.id}/status", json=payload, headers=auth_headers(customer)
        )
        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Partner privileges required"}


def test_partner_updates_status(client, partner, customer, make_service, make_booking, auth_headers):
    booking = make_booking(customer, make_service(partner))
    response = client.put(
        f"/api/partner/bookings/{booking.id}/status", json={"status": "cancelled"}, headers=auth_headers(partner)
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "cancelled"


def test_status_must_be_known(client, partner, customer, make_service, make_booking, auth_headers):
    booking = make_booking(customer, make_service(partner))
    response = client.put(
        f"/api/partner/bookings/{booking.id}/status", json={"status": "paused"}, headers=auth_headers(partner)
    )
    assert response.status_code == 400
    assert "Invalid status" in response.json()["error"]


def test_other_partner_gets_403(client, partner, customer, make_user, make_service, make_booking, auth_headers):
    booking = make_booking(customer, make_service(partner))
    intruder = make_user(role=Role.PARTNER)
    response = client.put(
        f"/api/partner/bookings/{booking.id}/status", json={"status": "completed"}, headers=auth_headers(intruder)
    )
    assert response.status_code == 403


def test_missing_booking_is_404(client, partner, auth_headers):
    response = client.put("/api/partner/bookings/999/status", json={"status": "completed"}, headers=auth_headers(partner))
    assert response.status_code == 404


def test_completion_handshake_over_http(
    client, partner, customer, make_service, make_booking, auth_headers, sender, db
):
    booking = make_booking(customer, make_service(partner))
    headers = auth_headers(partner)

    sent = client.post(f"/api/partner/bookings/{booking.id}/complete-otp", headers=headers)
    assert sent.status_code == 200
    code = sender.last_code_for("customer@example.com")

    bad = client.post(f"/api/partner/bookings/{booking.id}/complete-verify", json={"otp": "not-it"}, headers=headers)
    assert bad.status_code == 400

    done = client.post(f"/api/partner/bookings/{booking.id}/complete-verify", json={"otp": code}, headers=headers)
    assert done.status_code == 200
    assert done.json()["data"]["status"] == "completed"

    db.expire_all()
    assert db.get(Booking, booking.id).status is BookingStatus.COMPLETED


def test_complete_verify_requires_otp(client, partner, customer, make_service, make_booking, auth_headers):
    booking = make_booking(customer, make_service(partner))
    response = client.post(
        f"/api/partner/bookings/{booking.id}/complete-verify", json={}, headers=auth_headers(partner)
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "otp"


def test_provider_booking_routes_mirror_partner_routes(
    client, partner, customer, make_service, make_booking, auth_headers
):
    booking = make_booking(customer, make_service(partner))
    headers = auth_headers(partner)

    listed = client.get("/api/provider/bookings", headers=headers).json()["data"]
    assert [b["id"] for b in listed] == [booking.id]

    response = client.put(f"/api/provider/bookings/{booking.id}/status", json={"status": "cancelled"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "cancelled"

    assert client.get("/api/provider/bookings", headers=auth_headers(customer)).status_code == 403
