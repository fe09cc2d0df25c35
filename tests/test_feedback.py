import pytest

FEEDBACK_URL = "/api/v1/feedback"


def _post(**overrides):
    payload = {
        "country": "India → US",
        "milestone": "Interview Scheduled",
        "date_of_event": "2024-05-01",
        "note": "Slot opened on a Tuesday",
    }
    payload.update(overrides)
    return payload


async def _create(client, token, **overrides):
    response = await client.post(FEEDBACK_URL, json=_post(**overrides), headers={"X-Session-Token": token})
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.asyncio
async def test_post_feedback(client, make_account):
    _, token = await make_account("u1", paid=True)

    response = await client.post(FEEDBACK_URL, json=_post(note="  "), headers={"X-Session-Token": token})

    assert response.status_code == 201
    body = response.json()
    assert body["account_id"] == "u1"
    assert body["country"] == "India → US"
    assert body["date_of_event"] == "2024-05-01"
    assert body["note"] is None
    assert body["reactions"] == {"likes": 0, "dislikes": 0, "user_reaction": None}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"country": "India"},
        {"milestone": "Case Closed"},
        {"date_of_event": "soon"},
    ],
)
async def test_post_feedback_validation(client, make_account, overrides):
    _, token = await make_account("u1", paid=True)

    response = await client.post(FEEDBACK_URL, json=_post(**overrides), headers={"X-Session-Token": token})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_reaction_adds_switches_and_removes(client, make_account):
    _, author = await make_account("u1", paid=True)
    _, reader = await make_account("u2", paid=True)
    post_id = await _create(client, author)
    url = f"{FEEDBACK_URL}/{post_id}/reactions"
    headers = {"X-Session-Token": reader}

    liked = await client.post(url, json={"reaction": "like"}, headers=headers)
    assert liked.status_code == 200
    assert liked.json() == {"post_id": post_id, "user_reaction": "like", "likes": 1, "dislikes": 0}

    switched = await client.post(url, json={"reaction": "dislike"}, headers=headers)
    assert switched.json() == {"post_id": post_id, "user_reaction": "dislike", "likes": 0, "dislikes": 1}

    removed = await client.post(url, json={"reaction": "dislike"}, headers=headers)
    assert removed.json() == {"post_id": post_id, "user_reaction": None, "likes": 0, "dislikes": 0}


@pytest.mark.asyncio
async def test_board_shows_counts_and_own_reaction(client, make_account):
    _, author = await make_account("u1", paid=True)
    _, reader = await make_account("u2", paid=True)
    post_id = await _create(client, author)
    url = f"{FEEDBACK_URL}/{post_id}/reactions"

    await client.post(url, json={"reaction": "like"}, headers={"X-Session-Token": author})
    await client.post(url, json={"reaction": "dislike"}, headers={"X-Session-Token": reader})

    board = await client.get(FEEDBACK_URL, headers={"X-Session-Token": reader})
    assert board.json()[0]["reactions"] == {"likes": 1, "dislikes": 1, "user_reaction": "dislike"}

    board = await client.get(FEEDBACK_URL, headers={"X-Session-Token": author})
    assert board.json()[0]["reactions"]["user_reaction"] == "like"


@pytest.mark.asyncio
async def test_board_is_ranked_by_net_score(client, make_account):
    _, a = await make_account("u1", paid=True)
    _, b = await make_account("u2", paid=True)

    disliked = await _create(client, a, milestone="Rejected")
    neutral = await _create(client, a, milestone="Applied")
    liked = await _create(client, a, milestone="Approved")

    for token in (a, b):
        await client.post(f"{FEEDBACK_URL}/{disliked}/reactions", json={"reaction": "dislike"}, headers={"X-Session-Token": token})
    await client.post(f"{FEEDBACK_URL}/{liked}/reactions", json={"reaction": "like"}, headers={"X-Session-Token": b})

    board = await client.get(FEEDBACK_URL, headers={"X-Session-Token": a})

    assert [p["id"] for p in board.json()] == [liked, neutral, disliked]


@pytest.mark.asyncio
async def test_reaction_errors(client, make_account):
    _, token = await make_account("u1", paid=True)
    post_id = await _create(client, token)
    headers = {"X-Session-Token": token}

    missing = await client.post(f"{FEEDBACK_URL}/nope/reactions", json={"reaction": "like"}, headers=headers)
    unknown = await client.post(f"{FEEDBACK_URL}/{post_id}/reactions", json={"reaction": "love"}, headers=headers)

    assert missing.status_code == 404
    assert unknown.status_code == 422


@pytest.mark.asyncio
async def test_feedback_is_paid_only(client, make_account):
    _, token = await make_account("u1")

    response = await client.get(FEEDBACK_URL, headers={"X-Session-Token": token})

    assert response.status_code == 303
    assert response.headers["location"] == "/checkout"
