import uuid
from datetime import timedelta

from sqlalchemy import func, select

from app.models import Like, Match
from app.models.match import ordered_pair
from app.security import create_access_token


async def count_rows(db, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


# --- Auth boundary ---

async def test_actions_require_a_token(client):
    assert (await client.get("/api/v1/matches/potential")).status_code == 401
    assert (await client.get("/api/v1/matches/")).status_code == 401
    response = await client.post("/api/v1/matches/like", json={"to_user_id": str(uuid.uuid4())})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_invalid_and_expired_tokens_are_rejected(client, make_user):
    user = await make_user()
    bad = {"Authorization": "Bearer not-a-jwt"}
    assert (await client.get("/api/v1/matches/potential", headers=bad)).status_code == 401

    expired = create_access_token(user.id, expires_delta=timedelta(minutes=-5))
    response = await client.get("/api/v1/matches/", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


async def test_token_for_unknown_user_is_rejected(client):
    headers = {"Authorization": f"Bearer {create_access_token(uuid.uuid4())}"}
    assert (await client.get("/api/v1/matches/potential", headers=headers)).status_code == 401


async def test_unauthenticated_like_writes_nothing(client, db, make_user):
    target = await make_user(gender="female")
    response = await client.post("/api/v1/matches/like", json={"to_user_id": str(target.id)})
    assert response.status_code == 401
    assert await count_rows(db, Like) == 0
    assert await count_rows(db, Match) == 0


# --- Potential matches ---

async def test_potential_matches_exclude_self_and_blank_email(client, make_user, auth_headers):
    me = await make_user(gender="male")
    other = await make_user(gender="female", email="hidden@example.com")

    response = await client.get("/api/v1/matches/potential", headers=auth_headers(me))
    assert response.status_code == 200
    body = response.json()
    assert [p["id"] for p in body] == [str(other.id)]

    profile = body[0]
    assert profile["email"] == ""
    assert profile["location_lat"] is None
    assert profile["location_lng"] is None
    assert profile["is_verified"] is True
    assert profile["is_online"] is False
    assert profile["username"] == other.username


async def test_potential_matches_follow_gender_preference(client, make_user, auth_headers):
    me = await make_user(gender="male", preferences={"gender_preference": ["female", "non-binary"]})
    woman = await make_user(gender="female")
    enby = await make_user(gender="non-binary")
    await make_user(gender="male")
    await make_user(gender=None)

    response = await client.get("/api/v1/matches/potential", headers=auth_headers(me))
    assert response.status_code == 200
    assert {p["id"] for p in response.json()} == {str(woman.id), str(enby.id)}


async def test_empty_or_missing_preference_returns_every_gender(client, make_user, auth_headers):
    open_minded = await make_user(gender="female", preferences={"gender_preference": []})
    no_prefs = await make_user(gender="male", preferences=None)
    third = await make_user(gender="non-binary", preferences={"looking_for": "friends"})

    response = await client.get("/api/v1/matches/potential", headers=auth_headers(open_minded))
    assert {p["id"] for p in response.json()} == {str(no_prefs.id), str(third.id)}

    response = await client.get("/api/v1/matches/potential", headers=auth_headers(no_prefs))
    assert {p["id"] for p in response.json()} == {str(open_minded.id), str(third.id)}


# --- Likes ---

async def test_like_without_reciprocal_is_not_a_match(client, db, make_user, auth_headers):
    me = await make_user(gender="male")
    her = await make_user(gender="female")

    response = await client.post(
        "/api/v1/matches/like", json={"to_user_id": str(her.id)}, headers=auth_headers(me)
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["isMatch"] is False
    assert body["matchedUser"] is None
    assert await count_rows(db, Like) == 1


async def test_liking_twice_is_idempotent(client, db, make_user, auth_headers):
    me = await make_user()
    her = await make_user()
    for _ in range(2):
        response = await client.post(
            "/api/v1/matches/like", json={"to_user_id": str(her.id)}, headers=auth_headers(me)
        )
        assert response.status_code == 200
        assert response.json()["isMatch"] is False
    assert await count_rows(db, Like) == 1


async def test_liking_yourself_is_rejected(client, db, make_user, auth_headers):
    me = await make_user()
    response = await client.post(
        "/api/v1/matches/like", json={"to_user_id": str(me.id)}, headers=auth_headers(me)
    )
    assert response.status_code == 400
    assert await count_rows(db, Like) == 0


async def test_mutual_like_creates_one_match(client, db, make_user, auth_headers, sio_emit):
    a = await make_user(gender="male")
    b = await make_user(gender="female", email="b@example.com")

    await client.post("/api/v1/matches/like", json={"to_user_id": str(b.id)}, headers=auth_headers(a))
    response = await client.post(
        "/api/v1/matches/like", json={"to_user_id": str(a.id)}, headers=auth_headers(b)
    )
    body = response.json()
    assert body["isMatch"] is True
    assert body["warnings"] == []
    assert body["matchedUser"]["id"] == str(a.id)
    # The matched profile keeps the email
    assert body["matchedUser"]["email"] == a.email

    matches = (await db.execute(select(Match))).scalars().all()
    assert len(matches) == 1
    assert (matches[0].user1_id, matches[0].user2_id) == ordered_pair(a.id, b.id)
    assert matches[0].is_active is True

    sio_emit.assert_awaited_once()
    event, = sio_emit.await_args.args
    assert event == "new_match"
    assert sio_emit.await_args.kwargs["room"] == str(a.id)
    assert sio_emit.await_args.kwargs["data"]["id"] == str(b.id)


# --- Listing ---

async def test_matches_listing_returns_counterparts(client, db, make_user, auth_headers):
    a = await make_user(email="a@example.com")
    b = await make_user(email="b@example.com")
    c = await make_user(email="c@example.com")

    for liker, target in [(a, b), (b, a), (c, a), (a, c)]:
        response = await client.post(
            "/api/v1/matches/like", json={"to_user_id": str(target.id)}, headers=auth_headers(liker)
        )
        assert response.status_code == 200

    response = await client.get("/api/v1/matches/", headers=auth_headers(a))
    assert response.status_code == 200
    body = response.json()
    assert {p["id"] for p in body} == {str(b.id), str(c.id)}
    assert {p["email"] for p in body} == {"b@example.com", "c@example.com"}
    # Match time is reported in UTC like every other timestamp
    assert all(p["created_at"].endswith("Z") for p in body)

    response = await client.get("/api/v1/matches/", headers=auth_headers(b))
    assert [p["id"] for p in response.json()] == [str(a.id)]


async def test_inactive_matches_are_not_listed(client, db, make_user, auth_headers):
    a = await make_user()
    b = await make_user()
    low, high = ordered_pair(a.id, b.id)
    db.add(Match(user1_id=low, user2_id=high, is_active=False))
    await db.commit()

    response = await client.get("/api/v1/matches/", headers=auth_headers(a))
    assert response.json() == []


async def test_end_to_end_scenario(client, db, make_user, auth_headers):
    a = await make_user(gender="male", preferences={"gender_preference": ["female"]})
    b = await make_user(gender="female")
    c = await make_user(gender="male")

    response = await client.get("/api/v1/matches/potential", headers=auth_headers(a))
    ids = [p["id"] for p in response.json()]
    assert str(b.id) in ids
    assert str(c.id) not in ids

    response = await client.post("/api/v1/matches/like", json={"to_user_id": str(b.id)}, headers=auth_headers(a))
    assert response.json()["isMatch"] is False

    response = await client.post("/api/v1/matches/like", json={"to_user_id": str(a.id)}, headers=auth_headers(b))
    body = response.json()
    assert body["isMatch"] is True
    assert body["matchedUser"]["id"] == str(a.id)

    low, high = ordered_pair(a.id, b.id)
    result = await db.execute(select(Match).filter(Match.user1_id == low, Match.user2_id == high))
    assert result.scalars().one().is_active is True
