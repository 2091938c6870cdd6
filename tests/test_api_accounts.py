import pytest

from homeservices.db.models import BookingStatus, Role, User


@pytest.fixture
def admin(make_user):
    return make_user(role=Role.ADMIN)


ADDRESS = {"street": "12 Baker Street", "city": "London", "state": "LDN", "pinCode": "NW1", "country": "UK"}


def test_address_book(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)

    first = client.post("/api/addresses", json={**ADDRESS, "isDefault": True}, headers=headers)
    assert first.status_code == 201
    second = client.post("/api/addresses", json={**ADDRESS, "street": "1 Main St", "isDefault": True}, headers=headers)
    second_id = second.json()["data"]["id"]

    listed = client.get("/api/addresses/me", headers=headers).json()["data"]
    defaults = [a["id"] for a in listed if a["isDefault"]]
    assert defaults == [second_id]

    updated = client.put(f"/api/addresses/{second_id}", json={"landmark": "Near the park"}, headers=headers)
    assert updated.json()["data"]["landmark"] == "Near the park"

    assert client.delete(f"/api/addresses/{second_id}", headers=headers).status_code == 200
    assert len(client.get("/api/addresses/me", headers=headers).json()["data"]) == 1


def test_addresses_of_others_are_hidden(client, make_user, auth_headers):
    owner = auth_headers(make_user())
    address_id = client.post("/api/addresses", json=ADDRESS, headers=owner).json()["data"]["id"]

    stranger = auth_headers(make_user())
    assert client.put(f"/api/addresses/{address_id}", json={"city": "Paris"}, headers=stranger).status_code == 404
    assert client.delete(f"/api/addresses/{address_id}", headers=stranger).status_code == 404


def test_address_requires_fields(client, make_user, auth_headers):
    response = client.post("/api/addresses", json={"street": "x"}, headers=auth_headers(make_user()))
    assert response.status_code == 400
    assert "pinCode" in {e["field"] for e in response.json()["errors"]}


def test_occupation_crud_and_public_listing(client, admin, make_user, auth_headers):
    headers = auth_headers(admin)
    plumber = client.post("/api/occupations", json={"name": "Plumber"}, headers=headers).json()["data"]
    client.post("/api/occupations", json={"name": "Retired", "isActive": False}, headers=headers)

    public = client.get("/api/public/occupations").json()["data"]
    assert [o["name"] for o in public] == ["Plumber"]

    renamed = client.put(f"/api/occupations/{plumber['id']}", json={"name": "Plumbing"}, headers=headers)
    assert renamed.json()["data"]["name"] == "Plumbing"
    assert len(client.get("/api/occupations", headers=headers).json()["data"]) == 2

    assert client.get("/api/occupations", headers=auth_headers(make_user())).status_code == 403
    assert client.delete(f"/api/occupations/{plumber['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/occupations/{plumber['id']}", headers=headers).status_code == 404


def test_onboarding_promotes_user_to_partner(client, admin, make_user, auth_headers, db):
    headers = auth_headers(admin)
    occupation_id = client.post("/api/occupations", json={"name": "Electrician"}, headers=headers).json()["data"]["id"]

    applicant = make_user()
    applicant_headers = auth_headers(applicant)
    created = client.post(
        "/api/provider/profile",
        json={"occupationId": occupation_id, "businessName": "Sparks", "skills": ["wiring"]},
        headers=applicant_headers,
    )
    assert created.status_code == 201
    profile = created.json()["data"]
    assert profile["isVerified"] is False
    assert profile["occupation"]["name"] == "Electrician"

    duplicate = client.post("/api/provider/profile", json={}, headers=applicant_headers)
    assert duplicate.status_code == 409

    updated = client.put("/api/provider/profile", json={"bio": "20 years"}, headers=applicant_headers)
    assert updated.json()["data"]["bio"] == "20 years"
    assert updated.json()["data"]["businessName"] == "Sparks"

    pending = client.get("/api/admin/provider-profiles", headers=headers).json()["data"]
    assert [p["id"] for p in pending] == [profile["id"]]

    verified = client.patch(f"/api/admin/provider-profiles/{profile['id']}/verify", headers=headers)
    assert verified.status_code == 200
    assert verified.json()["data"]["isVerified"] is True

    db.expire_all()
    assert db.get(User, applicant.id).role is Role.PARTNER


def test_my_profile_missing(client, make_user, auth_headers):
    assert client.get("/api/provider/profile", headers=auth_headers(make_user())).status_code == 404


def test_admin_stats(client, admin, make_user, make_service, make_booking, auth_headers):
    partner = make_user(role=Role.PARTNER)
    service = make_service(partner)
    make_booking(make_user(), service, status=BookingStatus.COMPLETED)

    response = client.get("/api/admin/stats", headers=auth_headers(admin))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["counts"] == {"users": 3, "services": 1, "bookings": 1}
    assert data["recent"]["services"][0]["id"] == service.id
    assert "createdAt" in data["recent"]["bookings"][0]


def test_admin_routes_reject_partners(client, make_user, auth_headers):
    response = client.get("/api/admin/stats", headers=auth_headers(make_user(role=Role.PARTNER)))
    assert response.status_code == 403
