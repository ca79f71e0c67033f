"""Integration tests for API endpoints."""

from uuid import uuid4

import pytest

from factories import auth_headers, make_token


@pytest.mark.asyncio
async def test_create_package_endpoint(test_client, agency, sample_package_data):
    """Test the package creation endpoint."""
    response = await test_client.post(
        "/api/v1/packages",
        json=sample_package_data,
        headers=auth_headers(agency.ref)
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == 201
    assert data["message"] == "Package created successfully."
    assert data["data"]["title"] == sample_package_data["title"]
    assert data["data"]["agency_id"] == str(agency.id)
    assert data["data"]["available_slots"] == sample_package_data["max_slots"]


@pytest.mark.asyncio
async def test_create_package_missing_auth(test_client, sample_package_data):
    """Test package creation without authentication."""
    response = await test_client.post("/api/v1/packages", json=sample_package_data)

    assert response.status_code == 401
    data = response.json()
    assert data["status"] == 401
    assert data["code"] == "UNAUTHORIZED"
    assert "data" not in data


@pytest.mark.asyncio
async def test_create_package_rejects_expired_token(test_client, agency, sample_package_data):
    token = make_token(agency.ref, exp=0)

    response = await test_client.post(
        "/api/v1/packages",
        json=sample_package_data,
        headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_package_by_traveler_forbidden(test_client, traveler, sample_package_data):
    response = await test_client.post(
        "/api/v1/packages",
        json=sample_package_data,
        headers=auth_headers(traveler.ref)
    )

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_create_package_invalid_data(test_client, agency, sample_package_data):
    """Test package creation with invalid data."""
    invalid_data = {**sample_package_data, "title": "", "max_slots": 0}

    response = await test_client.post(
        "/api/v1/packages",
        json=invalid_data,
        headers=auth_headers(agency.ref)
    )

    assert response.status_code == 400
    data = response.json()
    assert data["status"] == 400
    assert data["code"] == "VALIDATION_ERROR"
    paths = {error["path"] for error in data["errors"]}
    assert "body.title" in paths
    assert "body.max_slots" in paths


@pytest.mark.asyncio
async def test_get_package_bad_and_unknown_ids(test_client, traveler):
    headers = auth_headers(traveler.ref)

    bad = await test_client.get("/api/v1/packages/not-a-uuid", headers=headers)
    assert bad.status_code == 400
    assert bad.json()["errors"] == [{"path": "package_id", "message": "Must be a valid UUID"}]

    missing = await test_client.get(f"/api/v1/packages/{uuid4()}", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_booking_workflow_endpoints(test_client, traveler, agency, package):
    """Test request, accept, and delete through the HTTP surface."""
    created = await test_client.post(
        "/api/v1/bookings",
        json={"package_id": str(package.id), "slots_booked": 2},
        headers=auth_headers(traveler.ref)
    )
    assert created.status_code == 201
    booking = created.json()["data"]
    assert booking["status"] == "Pending"
    assert booking["traveler_id"] == str(traveler.id)

    accepted = await test_client.patch(
        f"/api/v1/bookings/{booking['id']}/action",
        json={"action": "accept"},
        headers=auth_headers(agency.ref)
    )
    assert accepted.status_code == 200
    assert accepted.json()["data"]["status"] == "Confirmed"
    assert accepted.json()["message"] == "Booking accepted successfully."

    package_view = await test_client.get(
        f"/api/v1/packages/{package.id}", headers=auth_headers(traveler.ref)
    )
    assert package_view.json()["data"]["available_slots"] == 3

    detail = await test_client.get(
        f"/api/v1/bookings/{booking['id']}", headers=auth_headers(agency.ref)
    )
    assert detail.status_code == 200
    assert detail.json()["data"]["traveler"]["user_name"] == "alice"
    assert detail.json()["data"]["package"]["id"] == str(package.id)

    deleted = await test_client.delete(
        f"/api/v1/bookings/{booking['id']}", headers=auth_headers(agency.ref)
    )
    assert deleted.status_code == 200

    package_view = await test_client.get(
        f"/api/v1/packages/{package.id}", headers=auth_headers(traveler.ref)
    )
    assert package_view.json()["data"]["available_slots"] == 5


@pytest.mark.asyncio
async def test_booking_zero_slots_is_validation_error(test_client, traveler, package):
    response = await test_client.post(
        "/api/v1/bookings",
        json={"package_id": str(package.id), "slots_booked": 0},
        headers=auth_headers(traveler.ref)
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_booking_action_errors(test_client, traveler, agency, other_agency, package):
    created = await test_client.post(
        "/api/v1/bookings",
        json={"package_id": str(package.id), "slots_booked": 1},
        headers=auth_headers(traveler.ref)
    )
    booking_id = created.json()["data"]["id"]

    invalid = await test_client.patch(
        f"/api/v1/bookings/{booking_id}/action",
        json={"action": "approve"},
        headers=auth_headers(agency.ref)
    )
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Invalid action. Use 'accept' or 'reject'."

    foreign = await test_client.patch(
        f"/api/v1/bookings/{booking_id}/action",
        json={"action": "accept"},
        headers=auth_headers(other_agency.ref)
    )
    assert foreign.status_code == 403

    by_traveler = await test_client.patch(
        f"/api/v1/bookings/{booking_id}/action",
        json={"action": "accept"},
        headers=auth_headers(traveler.ref)
    )
    assert by_traveler.status_code == 403


@pytest.mark.asyncio
async def test_list_bookings_endpoints(test_client, traveler, agency, package):
    for slots in (1, 2):
        await test_client.post(
            "/api/v1/bookings",
            json={"package_id": str(package.id), "slots_booked": slots},
            headers=auth_headers(traveler.ref)
        )

    mine = await test_client.get("/api/v1/bookings", headers=auth_headers(traveler.ref))
    assert mine.status_code == 200
    assert len(mine.json()["data"]) == 2

    for_package = await test_client.get(
        f"/api/v1/packages/{package.id}/bookings", headers=auth_headers(agency.ref)
    )
    assert for_package.status_code == 200
    assert len(for_package.json()["data"]) == 2


@pytest.mark.asyncio
async def test_notification_endpoints(test_client, traveler, agency, package):
    await test_client.post(
        "/api/v1/bookings",
        json={"package_id": str(package.id), "slots_booked": 1},
        headers=auth_headers(traveler.ref)
    )
    headers = auth_headers(agency.ref)

    listed = await test_client.get("/api/v1/notifications", headers=headers)
    assert listed.status_code == 200
    notifications = listed.json()["data"]
    assert len(notifications) == 1
    assert notifications[0]["type"] == "BOOKING_REQUEST"
    assert notifications[0]["is_read"] is False

    count = await test_client.get("/api/v1/notifications/unread-count", headers=headers)
    assert count.json()["data"] == {"unread": 1}

    notification_id = notifications[0]["id"]
    foreign = await test_client.patch(
        f"/api/v1/notifications/{notification_id}", headers=auth_headers(traveler.ref)
    )
    assert foreign.status_code == 404
    assert foreign.json()["message"] == "Notification not found or unauthorized."

    marked = await test_client.patch(f"/api/v1/notifications/{notification_id}", headers=headers)
    assert marked.status_code == 200
    assert marked.json()["data"]["is_read"] is True

    unread = await test_client.get("/api/v1/notifications?is_read=false", headers=headers)
    assert unread.json()["data"] == []

    read_all = await test_client.patch("/api/v1/notifications/read-all", headers=headers)
    assert read_all.json()["data"] == {"updated": 0}

    deleted = await test_client.delete(f"/api/v1/notifications/{notification_id}", headers=headers)
    assert deleted.status_code == 200

    listed = await test_client.get("/api/v1/notifications", headers=headers)
    assert listed.json()["data"] == []


@pytest.mark.asyncio
async def test_follow_endpoints(test_client, traveler, agency):
    followed = await test_client.post(
        "/api/v1/follow/NorthernTrails", headers=auth_headers(traveler.ref)
    )
    assert followed.status_code == 200
    assert followed.json()["data"]["state"] == "added"

    followers = await test_client.get(
        "/api/v1/follow/northerntrails/followers", headers=auth_headers(agency.ref)
    )
    assert [f["user_name"] for f in followers.json()["data"]] == ["alice"]

    following = await test_client.get(
        "/api/v1/follow/alice/following", headers=auth_headers(agency.ref)
    )
    assert [f["user_name"] for f in following.json()["data"]] == ["northerntrails"]

    self_follow = await test_client.post("/api/v1/follow/alice", headers=auth_headers(traveler.ref))
    assert self_follow.status_code == 400
    assert self_follow.json()["message"] == "You cannot follow yourself."

    unknown = await test_client.post("/api/v1/follow/ghost", headers=auth_headers(traveler.ref))
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_like_toggle_endpoint_status_codes(test_client, post, other_traveler):
    headers = auth_headers(other_traveler.ref)

    added = await test_client.post(f"/api/v1/posts/{post.id}/like", headers=headers)
    assert added.status_code == 201
    assert added.json()["data"]["like_count"] == 1

    removed = await test_client.post(f"/api/v1/post/{post.id}/like", headers=headers)
    assert removed.status_code == 200
    assert removed.json()["data"]["state"] == "removed"
    assert removed.json()["data"]["like_count"] == 0

    bad_kind = await test_client.post(f"/api/v1/videos/{post.id}/like", headers=headers)
    assert bad_kind.status_code == 400


@pytest.mark.asyncio
async def test_liked_items_endpoint(test_client, package, traveler):
    headers = auth_headers(traveler.ref)
    await test_client.post(f"/api/v1/packages/{package.id}/like", headers=headers)

    liked = await test_client.get("/api/v1/likes/packages", headers=headers)

    assert liked.status_code == 200
    assert [item["target_id"] for item in liked.json()["data"]] == [str(package.id)]


@pytest.mark.asyncio
async def test_comment_endpoint(test_client, post, other_traveler):
    response = await test_client.post(
        f"/api/v1/posts/{post.id}/comments",
        json={"content": "Great shot!"},
        headers=auth_headers(other_traveler.ref)
    )

    assert response.status_code == 201
    assert response.json()["data"]["post_id"] == str(post.id)

    empty = await test_client.post(
        f"/api/v1/posts/{post.id}/comments",
        json={"content": ""},
        headers=auth_headers(other_traveler.ref)
    )
    assert empty.status_code == 400


@pytest.mark.asyncio
async def test_metrics_endpoint(test_client):
    """Test the Prometheus metrics endpoint."""
    response = await test_client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]
