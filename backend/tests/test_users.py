from conftest import fetch_all

from policyportal.core.errors import IdentityProviderError
from policyportal.db.models import Profile

NEW_USER = {
    "email": "new.user@example.com",
    "password": "correct horse",
    "firstName": "New",
    "lastName": "User",
}


def test_create_user_creates_account_and_profile(client, db, admin, identity_provider):
    response = client.post("/functions/create-user", json=NEW_USER, headers=admin.headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["profileSynced"] is True
    assert body["user"]["email"] == "new.user@example.com"
    assert body["user"]["firstName"] == "New"

    (account,) = identity_provider.created
    assert account.user_metadata == {"first_name": "New", "last_name": "User"}

    (profile,) = fetch_all(db, Profile, Profile.email == "new.user@example.com")
    assert str(profile.id) == body["user"]["id"]
    assert (profile.first_name, profile.last_name) == ("New", "User")


def test_create_user_overwrites_existing_profile(client, db, seed, admin, identity_provider):
    existing = seed.user("old@example.com", "Old", "Name")
    identity_provider.next_account_id = str(existing.id)

    response = client.post("/functions/create-user", json=NEW_USER, headers=admin.headers)

    assert response.status_code == 200
    (profile,) = fetch_all(db, Profile, Profile.id == existing.id)
    assert profile.email == "new.user@example.com"
    assert profile.first_name == "New"


def test_create_user_provider_rejection(client, db, admin, identity_provider):
    identity_provider.create_error = IdentityProviderError(
        "Identity provider rejected account creation",
        status_code=422,
        details="A user with this email address has already been registered",
    )

    response = client.post("/functions/create-user", json=NEW_USER, headers=admin.headers)

    assert response.status_code == 400
    assert response.json() == {
        "error": "Failed to create user account",
        "details": "A user with this email address has already been registered",
    }
    assert fetch_all(db, Profile, Profile.email == "new.user@example.com") == []


def test_create_user_provider_outage(client, admin, identity_provider):
    identity_provider.create_error = IdentityProviderError(
        "Identity provider error", status_code=503, details="down"
    )

    response = client.post("/functions/create-user", json=NEW_USER, headers=admin.headers)

    assert response.status_code == 500


def test_create_user_profile_failure_is_reported_not_raised(client, db, admin, identity_provider):
    identity_provider.next_account_id = "not-a-uuid"

    response = client.post("/functions/create-user", json=NEW_USER, headers=admin.headers)

    assert response.status_code == 200
    body = response.json()
    assert body["profileSynced"] is False
    assert body["user"]["id"] == "not-a-uuid"
    assert fetch_all(db, Profile, Profile.email == "new.user@example.com") == []


def test_create_user_requires_all_fields(client, admin, identity_provider):
    response = client.post(
        "/functions/create-user",
        json={"email": "x@example.com", "password": "pw", "firstName": "X"},
        headers=admin.headers,
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "lastName"
    assert identity_provider.created == []


def test_create_user_requires_admin(client, seed, identity_provider):
    user = seed.user("client@example.com", "Cli", "Ent")

    response = client.post("/functions/create-user", json=NEW_USER, headers=user.headers)

    assert response.status_code == 403
    assert identity_provider.created == []
