import pytest


# ---------------- Create ----------------

def test_create_requires_session(client):
    resp = client.post("/api/events", data={"title": "t", "description": "d", "amountToRaise": "10"})

    assert resp.status_code == 401


def test_create_rejects_invalid_token(client):
    resp = client.post(
        "/api/events",
        data={"title": "t", "description": "d", "amountToRaise": "10"},
        headers={"Cookie": "token=garbage"},
    )

    assert resp.status_code == 403


def test_create_event(owner_client, create_event):
    event = create_event()

    assert event["title"] == "Clean water for Sundarpur"
    assert event["amountToRaise"] == 1000
    assert event["tags"] == ["water", "village"]
    assert event["currentAmount"] == 0
    assert event["isActive"] is True
    assert event["uploadedImage"] is None
    assert event["createdBy"]["id"] == owner_client.user["id"]
    assert event["createdBy"]["email"] == owner_client.user["email"]
    assert "password" not in event["createdBy"]
    assert event["createdAt"] is not None


def test_create_ignores_client_supplied_owner(owner_client, other_client, create_event):
    event = create_event(createdBy=other_client.user["id"], currentAmount=500)

    assert event["createdBy"]["id"] == owner_client.user["id"]
    assert event["currentAmount"] == 0


def test_create_trims_and_dedupes_tags(create_event):
    event = create_event(tags='[" health ", "health", "", "kids"]')

    assert event["tags"] == ["health", "kids"]


@pytest.mark.parametrize("goal", ["0", "-50"])
def test_create_rejects_non_positive_goal(owner_client, goal):
    resp = owner_client.post("/api/events", data={"title": "t", "description": "d", "amountToRaise": goal})

    assert resp.status_code == 422
    assert "amountToRaise" in resp.json()["error"]


@pytest.mark.parametrize("missing", ["title", "description", "amountToRaise"])
def test_create_rejects_missing_field(owner_client, missing):
    form = {"title": "t", "description": "d", "amountToRaise": "10"}
    del form[missing]

    resp = owner_client.post("/api/events", data=form)

    assert resp.status_code == 422
    assert missing in resp.json()["error"]


@pytest.mark.parametrize("tags", ["not json", '{"a": 1}', "[1, 2]"])
def test_create_rejects_malformed_tags(owner_client, tags):
    resp = owner_client.post(
        "/api/events",
        data={"title": "t", "description": "d", "amountToRaise": "10", "tags": tags},
    )

    assert resp.status_code == 422
    assert resp.json() == {"error": "Invalid format for tags."}


def test_create_with_uploaded_image(owner_client, client, settings):
    resp = owner_client.post(
        "/api/events",
        data={"title": "Library", "description": "Books", "amountToRaise": "500"},
        files={"uploadedImage": ("cover.png", b"fake-png-bytes", "image/png")},
    )

    assert resp.status_code == 201
    path = resp.json()["uploadedImage"]
    assert path.startswith("uploads/")
    assert path.endswith(".png")

    served = client.get(f"/{path}")
    assert served.status_code == 200
    assert served.content == b"fake-png-bytes"


def test_create_with_external_image_url(create_event):
    event = create_event(imageUrl="https://images.fundraise.org/well.jpg")

    assert event["imageUrl"] == "https://images.fundraise.org/well.jpg"


@pytest.mark.parametrize("goal", ["nan", "inf", "-Infinity"])
def test_create_rejects_non_finite_goal(owner_client, goal):
    resp = owner_client.post("/api/events", data={"title": "t", "description": "d", "amountToRaise": goal})

    assert resp.status_code == 422
    assert "amountToRaise" in resp.json()["error"]


def test_update_rejects_non_finite_goal(owner_client, create_event):
    event = create_event()

    resp = owner_client.put(f"/api/events/{event['id']}", json={"amountToRaise": "Infinity"})

    assert resp.status_code == 422
    assert owner_client.get(f"/api/events/{event['id']}").json()["amountToRaise"] == 1000


def test_list_accepts_large_limit(client, create_event):
    create_event()

    resp = client.get("/api/events", params={"limit": 500})

    assert resp.status_code == 200
    assert resp.json()["totalPages"] == 1


# ---------------- Read ----------------

def test_get_event_by_id(client, create_event):
    event = create_event()

    resp = client.get(f"/api/events/{event['id']}")

    assert resp.status_code == 200
    assert resp.json()["title"] == event["title"]


def test_get_missing_event_is_404(client):
    resp = client.get("/api/events/9999")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Event not found"}


def test_list_is_public_and_newest_first(client, create_event):
    first = create_event(title="First")
    second = create_event(title="Second")

    resp = client.get("/api/events")

    assert resp.status_code == 200
    body = resp.json()
    assert [e["id"] for e in body["events"]] == [second["id"], first["id"]]
    assert body["total"] == 2
    assert body["totalPages"] == 1
    assert body["currentPage"] == 1


def test_list_paginates(client, create_event):
    created = [create_event(title=f"Event {i}") for i in range(5)]

    resp = client.get("/api/events", params={"page": 2, "limit": 2})

    body = resp.json()
    assert body["total"] == 5
    assert body["totalPages"] == 3
    assert body["currentPage"] == 2
    assert [e["id"] for e in body["events"]] == [created[2]["id"], created[1]["id"]]


@pytest.mark.parametrize("page", [0, -3])
def test_list_clamps_page_to_one(client, create_event, page):
    create_event()

    body = client.get("/api/events", params={"page": page}).json()

    assert body["currentPage"] == 1
    assert len(body["events"]) == 1


def test_list_rejects_zero_limit(client):
    resp = client.get("/api/events", params={"limit": 0})

    assert resp.status_code == 422
    assert "error" in resp.json()


def test_list_filters_by_any_tag(client, create_event):
    water = create_event(title="Water", tags='["water"]')
    school = create_event(title="School", tags='["education", "kids"]')
    create_event(title="Clinic", tags='["health"]')

    body = client.get("/api/events", params={"tags": "water,kids"}).json()

    assert {e["id"] for e in body["events"]} == {water["id"], school["id"]}
    assert body["total"] == 2
    for event in body["events"]:
        assert set(event["tags"]) & {"water", "kids"}


def test_list_active_flag(client, owner_client, create_event):
    active = create_event(title="Active")
    inactive = create_event(title="Closed")
    owner_client.put(f"/api/events/{inactive['id']}", json={"isActive": False})

    default = client.get("/api/events").json()
    only_inactive = client.get("/api/events", params={"isActive": "false"}).json()

    assert [e["id"] for e in default["events"]] == [active["id"]]
    assert [e["id"] for e in only_inactive["events"]] == [inactive["id"]]
    assert all(e["isActive"] is False for e in only_inactive["events"])


def test_my_events_requires_session(client):
    assert client.get("/api/my-events").status_code == 401


def test_my_events_lists_only_own_events(owner_client, other_client, create_event):
    mine_old = create_event(title="Mine old")
    create_event(other_client, title="Theirs")
    mine_new = create_event(title="Mine new")

    resp = owner_client.get("/api/my-events")

    assert resp.status_code == 200
    assert [e["id"] for e in resp.json()] == [mine_new["id"], mine_old["id"]]


# ---------------- Update ----------------

def test_owner_can_update(owner_client, create_event):
    event = create_event()

    resp = owner_client.put(
        f"/api/events/{event['id']}",
        json={"title": "Clean water, phase two", "amountToRaise": 2500, "tags": ["water", "phase-2"]},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Clean water, phase two"
    assert body["amountToRaise"] == 2500
    assert body["tags"] == ["water", "phase-2"]
    assert body["description"] == event["description"]
    assert body["updatedAt"] is not None


def test_update_cannot_change_owner_or_total(owner_client, other_client, create_event):
    event = create_event()

    resp = owner_client.put(
        f"/api/events/{event['id']}",
        json={"createdBy": other_client.user["id"], "currentAmount": 99999, "title": "Renamed"},
    )

    assert resp.status_code == 200
    assert resp.json()["createdBy"]["id"] == owner_client.user["id"]
    assert resp.json()["currentAmount"] == 0
    assert resp.json()["title"] == "Renamed"


def test_non_owner_update_is_403(other_client, create_event):
    event = create_event()

    resp = other_client.put(f"/api/events/{event['id']}", json={"title": "Hijacked"})

    assert resp.status_code == 403
    assert resp.json() == {"error": "Not authorized to update this event"}


def test_unauthenticated_update_is_401(client, create_event):
    event = create_event()

    assert client.put(f"/api/events/{event['id']}", json={"title": "x"}).status_code == 401


def test_update_missing_event_is_404(owner_client):
    assert owner_client.put("/api/events/4242", json={"title": "x"}).status_code == 404


@pytest.mark.parametrize("body", [{"amountToRaise": 0}, {"title": ""}, {"title": None}, {"isActive": None}])
def test_update_rejects_invalid_fields(owner_client, create_event, body):
    event = create_event()

    assert owner_client.put(f"/api/events/{event['id']}", json=body).status_code == 422


def test_reactivate_event(owner_client, create_event):
    event = create_event()
    owner_client.put(f"/api/events/{event['id']}", json={"isActive": False})

    resp = owner_client.put(f"/api/events/{event['id']}", json={"isActive": True})

    assert resp.json()["isActive"] is True


# ---------------- Delete ----------------

def test_owner_can_delete(owner_client, client, create_event):
    event = create_event()

    resp = owner_client.delete(f"/api/events/{event['id']}")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Event deleted successfully"}
    assert client.get(f"/api/events/{event['id']}").status_code == 404


def test_non_owner_delete_is_403(other_client, client, create_event):
    event = create_event()

    resp = other_client.delete(f"/api/events/{event['id']}")

    assert resp.status_code == 403
    assert client.get(f"/api/events/{event['id']}").status_code == 200


def test_unauthenticated_delete_is_401(client, create_event):
    event = create_event()

    assert client.delete(f"/api/events/{event['id']}").status_code == 401


def test_delete_missing_event_is_404(owner_client):
    assert owner_client.delete("/api/events/4242").status_code == 404


# ---------------- Contribute ----------------

@pytest.mark.parametrize("amount", [0, -10])
def test_contribute_non_positive_amount_is_400(client, create_event, amount):
    event = create_event()

    for event_id in (event["id"], 9999):
        resp = client.patch(f"/api/events/{event_id}/contribute", json={"amount": amount})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid contribution amount"}


def test_contribute_without_amount_is_400(client, create_event):
    event = create_event()

    assert client.patch(f"/api/events/{event['id']}/contribute", json={}).status_code == 400
    assert client.patch(f"/api/events/{event['id']}/contribute").status_code == 400


def test_contribute_to_missing_event_is_404(client):
    assert client.patch("/api/events/9999/contribute", json={"amount": 10}).status_code == 404


def test_contribute_is_open_to_anonymous_callers(client, create_event):
    event = create_event()

    resp = client.patch(f"/api/events/{event['id']}/contribute", json={"amount": 250})

    assert resp.status_code == 200
    assert resp.json() == {
        "message": "Donation recorded successfully",
        "currentAmount": 250,
        "progress": 25,
    }


def test_contributions_accumulate_and_may_exceed_goal(client, create_event):
    event = create_event(amountToRaise=1000)

    client.patch(f"/api/events/{event['id']}/contribute", json={"amount": 900})
    resp = client.patch(f"/api/events/{event['id']}/contribute", json={"amount": 300})

    assert resp.json()["currentAmount"] == 1200
    assert resp.json()["progress"] == pytest.approx(120)
    stored = client.get(f"/api/events/{event['id']}").json()
    assert stored["currentAmount"] == 1200
    assert stored["isActive"] is True


@pytest.mark.parametrize("raw", ['{"amount": NaN}', '{"amount": Infinity}', '{"amount": "Infinity"}', '{"amount": "nan"}'])
def test_contribute_non_finite_amount_is_400(client, create_event, raw):
    event = create_event()

    resp = client.patch(
        f"/api/events/{event['id']}/contribute",
        content=raw,
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid contribution amount"}
    assert client.get(f"/api/events/{event['id']}").json()["currentAmount"] == 0
