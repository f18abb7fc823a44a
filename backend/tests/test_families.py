import uuid
from decimal import Decimal

from conftest import at, fetch_all

from policyportal.db.models import Family, FamilyMember


# ─── create-family ────────────────────────────────────────


def test_create_family_reports_added_and_skipped(client, db, seed, admin):
    spouse = seed.user("ann.smith@example.com", "Ann", "Smith")

    response = client.post(
        "/functions/create-family",
        json={
            "familyName": "Smith Family",
            "primaryEmail": "ANN.SMITH@example.com",
            "members": [
                {"name": "Ann Smith", "email": "ann.smith@example.com", "relationship": "Self"},
                {"name": "Ghost", "email": "ghost@example.com", "relationship": "Child"},
                {"name": "No Email", "email": "", "relationship": "Child"},
                {"name": "", "email": ""},
                {"name": "Ann Again", "email": "Ann.Smith@example.com", "relationship": "Spouse"},
            ],
        },
        headers=admin.headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["family"]["name"] == "Smith Family"
    assert body["family"]["primaryEmail"] == "ANN.SMITH@example.com"
    assert [m["email"] for m in body["addedMembers"]] == ["ann.smith@example.com"]
    assert [m["reason"] for m in body["skippedMembers"]] == [
        "User account not found",
        "No email provided - cannot link to user account",
        "User is already a member of this family",
    ]

    family_id = uuid.UUID(body["family"]["id"])
    members = fetch_all(db, FamilyMember, FamilyMember.family_id == family_id)
    assert len(members) == 1
    assert members[0].user_id == spouse.id
    assert members[0].is_primary is True
    assert members[0].relationship_ == "Self"
    assert fetch_all(db, Family)[0].created_by == admin.id


def test_create_family_without_members(client, db, admin):
    response = client.post(
        "/functions/create-family",
        json={"familyName": "Solo", "primaryEmail": "solo@example.com", "members": []},
        headers=admin.headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["addedMembers"] == []
    assert body["skippedMembers"] == []
    assert len(fetch_all(db, Family)) == 1
    assert fetch_all(db, FamilyMember) == []


def test_create_family_requires_name_and_email(client, db, admin):
    response = client.post(
        "/functions/create-family",
        json={"familyName": "   ", "members": []},
        headers=admin.headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Missing required fields"
    assert {d["field"] for d in body["details"]} == {"familyName", "primaryEmail"}
    assert fetch_all(db, Family) == []


# ─── Assembly ─────────────────────────────────────────────


def test_client_family_data_assembles_aggregate(client, seed):
    parent = seed.user("pat@example.com", "Pat", "Lee")
    kid = seed.user("kim@example.com", "Kim", "Lee")
    family = seed.family("Lee Family", "pat@example.com")
    seed.member(family, kid.id, relationship="Child", joined_at=at(1))
    seed.member(family, parent.id, relationship="Self", is_primary=True, joined_at=at(2))
    seed.policy(family, kid.id, "Dental", created_at=at(3))
    seed.policy(family, parent.id, "Health", created_at=at(5), premium_amount=Decimal("99.50"))

    response = client.post(
        "/functions/get-client-family-data",
        json={"userId": str(kid.id)},
        headers=kid.headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["family"]["family_name"] == "Lee Family"
    members = body["family"]["family_members"]
    assert [m["profile"]["first_name"] for m in members] == ["Pat", "Kim"]
    assert members[0]["is_primary"] is True
    assert [p["policy_type"] for p in body["policies"]] == ["Health", "Dental"]
    assert body["policies"][0]["premium_amount"] == 99.5
    assert body["policies"][0]["holder"]["email"] == "pat@example.com"


def test_client_family_data_for_user_without_family(client, seed):
    loner = seed.user("loner@example.com", "Lo", "Ner")

    response = client.post(
        "/functions/get-client-family-data",
        json={"userId": str(loner.id)},
        headers=loner.headers,
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "family": None, "policies": []}


def test_client_family_data_rejects_other_users(client, seed):
    caller = seed.user("a@example.com", "A", "A")
    other = seed.user("b@example.com", "B", "B")

    response = client.post(
        "/functions/get-client-family-data",
        json={"userId": str(other.id)},
        headers=caller.headers,
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Unauthorized access to user data"}


def test_dangling_profiles_become_unknown_user(client, seed, admin):
    family = seed.family("Orphans")
    missing_id = uuid.uuid4()
    seed.member(family, missing_id, relationship="Child")
    seed.policy(family, missing_id, "Life")

    response = client.post(
        "/functions/get-family-details",
        json={"familyId": str(family.id)},
        headers=admin.headers,
    )

    assert response.status_code == 200
    body = response.json()
    unknown = {"id": str(missing_id), "first_name": "Unknown", "last_name": "User", "email": ""}
    assert body["family"]["family_members"][0]["profile"] == unknown
    assert body["policies"][0]["holder"] == unknown


def test_family_details_not_found(client, admin):
    response = client.post(
        "/functions/get-family-details",
        json={"familyId": str(uuid.uuid4())},
        headers=admin.headers,
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Family not found"}


# ─── Search ───────────────────────────────────────────────


def test_search_unions_family_and_member_matches(client, seed, admin):
    member_smith = seed.user("j.smith@example.com", "John", "Smith")
    other = seed.user("zed@example.com", "Zed", "Zulu")

    by_name = seed.family("Smith Family", "contact@one.test", created_at=at(1))
    by_member = seed.family("Jones Family", "contact@two.test", created_at=at(2))
    seed.member(by_member, member_smith.id)
    both = seed.family("Smithson", "contact@three.test", created_at=at(3))
    seed.member(both, member_smith.id)
    unrelated = seed.family("Brown Family", "contact@four.test", created_at=at(4))
    seed.member(unrelated, other.id)

    response = client.post(
        "/functions/search-families", json={"searchTerm": "SMITH"}, headers=admin.headers
    )

    assert response.status_code == 200
    families = response.json()["families"]
    assert [f["family_name"] for f in families] == ["Smithson", "Jones Family", "Smith Family"]
    jones = families[1]
    assert [m["profile"]["last_name"] for m in jones["family_members"]] == ["Smith"]


def test_search_matches_primary_email_and_escapes_wildcards(client, seed, admin):
    seed.family("Percent", "100%@example.com")
    seed.family("Plain", "plain@example.com")

    response = client.post(
        "/functions/search-families", json={"searchTerm": "100%"}, headers=admin.headers
    )
    assert [f["family_name"] for f in response.json()["families"]] == ["Percent"]

    response = client.post(
        "/functions/search-families", json={"searchTerm": "%"}, headers=admin.headers
    )
    assert [f["family_name"] for f in response.json()["families"]] == ["Percent"]


def test_search_rejects_blank_term(client, admin):
    response = client.post(
        "/functions/search-families", json={"searchTerm": "  "}, headers=admin.headers
    )
    assert response.status_code == 400


# ─── Members ──────────────────────────────────────────────


def test_add_and_remove_member(client, db, seed, admin):
    user = seed.user("new@example.com", "New", "Member")
    family = seed.family("Target")

    response = client.post(
        "/functions/add-family-member",
        json={"familyId": str(family.id), "userId": str(user.id), "relationship": "Spouse"},
        headers=admin.headers,
    )
    assert response.status_code == 200
    member = response.json()["member"]
    assert member["relationship"] == "Spouse"
    assert member["is_primary"] is False
    assert member["profile"]["email"] == "new@example.com"

    duplicate = client.post(
        "/functions/add-family-member",
        json={"familyId": str(family.id), "userId": str(user.id)},
        headers=admin.headers,
    )
    assert duplicate.status_code == 409

    response = client.post(
        "/functions/remove-family-member",
        json={"familyId": str(family.id), "memberId": member["id"]},
        headers=admin.headers,
    )
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert fetch_all(db, FamilyMember) == []

    again = client.post(
        "/functions/remove-family-member",
        json={"familyId": str(family.id), "memberId": member["id"]},
        headers=admin.headers,
    )
    assert again.status_code == 404


def test_add_member_unknown_profile(client, seed, admin):
    family = seed.family("Target")

    response = client.post(
        "/functions/add-family-member",
        json={"familyId": str(family.id), "userId": str(uuid.uuid4())},
        headers=admin.headers,
    )

    assert response.status_code == 404
    assert response.json() == {"error": "User profile not found"}


def test_search_profiles_excludes_current_members(client, seed, admin):
    inside = seed.user("alex.inside@example.com", "Alex", "Inside")
    seed.user("alex.outside@example.com", "Alex", "Outside")
    family = seed.family("Target")
    seed.member(family, inside.id)

    response = client.post(
        "/functions/search-profiles",
        json={"searchTerm": "alex", "familyId": str(family.id)},
        headers=admin.headers,
    )

    assert response.status_code == 200
    assert [p["email"] for p in response.json()["profiles"]] == ["alex.outside@example.com"]
