# =============================================================================
# tests/test_api.py - HTTP Endpoint Tests
# =============================================================================
# End-to-end checks through the FastAPI app with auth dependencies
# overridden and the Supabase client faked.
# =============================================================================

from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from app.exceptions import ContributorsUnavailableError
from app.main import app
from core.services.marketplace_service import CACHE_KEY, ITEMS_TABLE, VIEWS_TABLE, marketplace_cache
from core.services.progress_service import PROGRESS_TABLE

from tests.conftest import CATEGORY_ID, ITEM_ID, OTHER_USER_ID, USER_ID

API = "/api/v1"


# =============================================================================
# Middleware Tests
# =============================================================================

class TestSecurityHeaders:
    """Test headers added to every response."""

    def test_headers_present(self):
        response = TestClient(app).get(f"{API}/health/live")

        assert response.status_code == 200
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["Referrer-Policy"] == "origin-when-cross-origin"
        assert "X-Robots-Tag" not in response.headers

    def test_protected_page_without_token_not_indexed(self):
        response = TestClient(app).get(f"{API}/marketplace/items")

        assert response.status_code in (401, 403)
        assert response.headers["X-Robots-Tag"] == "noindex, nofollow"

    def test_protected_page_with_token_indexable(self, client):
        with patch("app.routers.marketplace.MarketplaceService.get_categories", return_value=[]):
            response = client.get(
                f"{API}/marketplace/categories",
                headers={"Authorization": "Bearer anything"},
            )

        assert response.status_code == 200
        assert "X-Robots-Tag" not in response.headers


# =============================================================================
# Health Tests
# =============================================================================

class TestHealth:
    """Test health endpoints."""

    def test_health(self):
        body = TestClient(app).get(f"{API}/health").json()

        assert body["status"] == "healthy"
        assert body["version"] == "1.0.0"

    def test_ready_with_content_disabled(self, fake_supabase):
        body = TestClient(app).get(f"{API}/health/ready").json()

        assert body["status"] == "ready"
        assert body["checks"] == {"database": "healthy", "storage": "healthy", "content": "disabled"}

    def test_degraded_when_storage_down(self, fake_supabase):
        fake_supabase.storage.list_buckets.side_effect = RuntimeError("unreachable")

        body = TestClient(app).get(f"{API}/health/ready").json()

        assert body["status"] == "degraded"
        assert body["checks"]["storage"].startswith("unhealthy")


# =============================================================================
# Academics and Content Tests
# =============================================================================

class TestAcademics:
    """Test selection endpoints."""

    def test_options(self, client):
        body = client.get(f"{API}/academics/options").json()

        assert [o["value"] for o in body["semesters"]] == ["odd", "even"]

    def test_save_selection_returns_path(self, client, fake_supabase):
        response = client.post(
            f"{API}/academics/selection",
            json={"year": "SY", "branch": "it", "semester": "even"},
        )

        assert response.status_code == 200
        assert response.json()["path"] == "/sy/it/even"
        update = fake_supabase.queries("users", "update")[0]
        assert update.payload == {"year": "sy", "branch": "it", "semester": "even"}

    def test_unknown_code(self, client, fake_supabase):
        response = client.post(
            f"{API}/academics/selection",
            json={"year": "fy", "branch": "civil", "semester": "odd"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ACADEMIC_SELECTION"


class TestContent:
    """Test catalog endpoints."""

    def test_unknown_partition_code(self, client):
        response = client.get(f"{API}/content/fy/civil/odd")

        assert response.status_code == 422

    def test_unknown_subject(self, client):
        with patch("core.services.content_service.sheets_client.fetch_subjects", return_value={}):
            response = client.get(f"{API}/content/fy/comps/odd/chem")

        assert response.status_code == 404
        assert response.json()["code"] == "SUBJECT_NOT_FOUND"

    def test_subject_found(self, client, sample_subject):
        with patch("core.services.content_service.sheets_client.fetch_subjects",
                   return_value={"am1": sample_subject}):
            response = client.get(f"{API}/content/fy/comps/odd/am1/modules/1/notes")

        assert response.status_code == 200
        assert response.json() == [{"title": "Module 1 Notes", "url": "https://drive.test/m1"}]


# =============================================================================
# Progress Tests
# =============================================================================

class TestProgressEndpoints:
    """Test progress routes."""

    def test_mark_video_uses_camel_case(self, client, fake_supabase):
        response = client.put(
            f"{API}/progress/am1/videos",
            json={"module": 1, "topic": "Complex Numbers", "video": "Lecture 1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["topicProgress"] == {"am1-module1-topicComplexNumbers": 1}
        assert body["completeVideos"] == {"am1-module1-topicComplexNumbers-videoLecture1": True}

    def test_reset(self, client, fake_supabase):
        response = client.delete(f"{API}/progress/am1")

        assert response.status_code == 204
        assert fake_supabase.queries(PROGRESS_TABLE, "delete")


# =============================================================================
# Marketplace Tests
# =============================================================================

class TestMarketplaceEndpoints:
    """Test marketplace routes."""

    def test_list_items(self, client, fake_supabase, sample_item):
        fake_supabase.respond(ITEMS_TABLE, [sample_item])

        response = client.get(f"{API}/marketplace/items", params={"search": "casio"})

        assert response.status_code == 200
        assert response.json()[0]["title"] == "Casio fx-991EX"

    def test_item_view_recorded_for_buyer(self, client, fake_supabase, sample_item):
        fake_supabase.respond(ITEMS_TABLE, [sample_item])

        response = client.get(f"{API}/marketplace/items/{ITEM_ID}")

        assert response.status_code == 200
        assert fake_supabase.queries(VIEWS_TABLE, "insert")

    def test_seller_view_not_recorded(self, client, fake_supabase, sample_item):
        sample_item["seller_id"] = str(USER_ID)
        fake_supabase.respond(ITEMS_TABLE, [sample_item])

        client.get(f"{API}/marketplace/items/{ITEM_ID}")

        assert fake_supabase.queries(VIEWS_TABLE) == []

    def test_contact_link(self, client, fake_supabase, sample_item):
        fake_supabase.respond(ITEMS_TABLE, [sample_item])

        response = client.get(f"{API}/marketplace/items/{ITEM_ID}/contact")

        assert response.json()["url"].startswith("https://wa.me/919876543210")

    def test_rejected_item_hidden_from_buyer(self, client, fake_supabase, sample_item):
        sample_item.update(verification_status="rejected", admin_notes="internal")
        fake_supabase.respond(ITEMS_TABLE, [sample_item])

        item = client.get(f"{API}/marketplace/items/{ITEM_ID}")
        contact = client.get(f"{API}/marketplace/items/{ITEM_ID}/contact")

        assert item.status_code == 404
        assert "internal" not in item.text
        assert contact.status_code == 404
        assert fake_supabase.queries(VIEWS_TABLE) == []

    def test_seller_sees_own_pending_item(self, client, fake_supabase, sample_item):
        sample_item.update(seller_id=str(USER_ID), verification_status="pending")
        fake_supabase.respond(ITEMS_TABLE, [sample_item])

        response = client.get(f"{API}/marketplace/items/{ITEM_ID}")

        assert response.status_code == 200
        assert response.json()["verification_status"] == "pending"

    def test_other_sellers_items_filtered(self, client, fake_supabase):
        client.get(f"{API}/marketplace/users/{OTHER_USER_ID}/items")
        client.get(f"{API}/marketplace/users/{USER_ID}/items")

        other, own = fake_supabase.queries(ITEMS_TABLE)
        assert ("verification_status", "approved") in other.args_of("eq")
        assert ("verification_status", "approved") not in own.args_of("eq")

    def test_create_item_multipart(self, client, fake_supabase):
        fake_supabase.respond("marketplace_categories", [{"id": CATEGORY_ID}])
        fake_supabase.respond(ITEMS_TABLE, [{"id": ITEM_ID}], operation="insert")

        response = client.post(
            f"{API}/marketplace/items",
            data={
                "title": "Drafter",
                "category_id": CATEGORY_ID,
                "price": "250",
                "condition": "fair",
            },
            files=[("images", ("drafter.png", b"png-bytes", "image/png"))],
        )

        assert response.status_code == 201
        assert response.json() == {
            "id": ITEM_ID,
            "verification_status": "pending",
            "message": "Item submitted for review",
        }

    def test_create_item_blank_title(self, client, fake_supabase):
        response = client.post(
            f"{API}/marketplace/items",
            data={"title": "   ", "category_id": CATEGORY_ID, "price": "10", "condition": "new"},
        )

        assert response.status_code == 422

    def test_update_other_sellers_item(self, client, fake_supabase, sample_item):
        fake_supabase.respond(ITEMS_TABLE, [sample_item])

        response = client.patch(f"{API}/marketplace/items/{ITEM_ID}", json={"price": 1})

        assert response.status_code == 403
        assert response.json()["code"] == "NOT_ITEM_OWNER"

    def test_rate_self(self, client, fake_supabase):
        response = client.post(
            f"{API}/marketplace/users/{USER_ID}/ratings",
            json={"rating": 5, "item_id": ITEM_ID},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "SELF_RATING"

    def test_rating_out_of_range(self, client, fake_supabase):
        response = client.post(
            f"{API}/marketplace/users/{OTHER_USER_ID}/ratings",
            json={"rating": 6, "item_id": ITEM_ID},
        )

        assert response.status_code == 422


# =============================================================================
# Admin Tests
# =============================================================================

class TestAdminEndpoints:
    """Test admin routes and the admin gate."""

    def test_non_admin_forbidden(self, client):
        with patch("app.auth.dependencies.ProfileService.is_admin", return_value=False):
            response = client.get(f"{API}/admin/stats")

        assert response.status_code == 403
        assert response.json()["code"] == "ADMIN_REQUIRED"

    def test_approve_without_body(self, admin_client, fake_supabase):
        fake_supabase.respond(ITEMS_TABLE, [{"id": ITEM_ID, "verification_status": "pending"}])

        response = admin_client.post(f"{API}/admin/items/{ITEM_ID}/approve")

        assert response.status_code == 200
        assert response.json()["verification_status"] == "approved"

    def test_approve_twice_conflicts(self, admin_client, fake_supabase):
        fake_supabase.respond(ITEMS_TABLE, [{"id": ITEM_ID, "verification_status": "approved"}])

        response = admin_client.post(f"{API}/admin/items/{ITEM_ID}/approve")

        assert response.status_code == 409

    def test_reject_requires_reason(self, admin_client, fake_supabase):
        response = admin_client.post(f"{API}/admin/items/{ITEM_ID}/reject", json={})

        assert response.status_code == 400
        assert response.json()["code"] == "REJECTION_REASON_REQUIRED"

    def test_bulk_queues_task(self, admin_client):
        with patch("workers.tasks.bulk_verify_items.delay") as mock_delay:
            mock_delay.return_value = MagicMock(id="task-123")
            response = admin_client.post(
                f"{API}/admin/items/bulk",
                json={"item_ids": [ITEM_ID], "action": "reject", "reason": "Duplicate"},
            )

        assert response.status_code == 202
        assert response.json()["task_id"] == "task-123"
        mock_delay.assert_called_once_with([ITEM_ID], "reject", "Duplicate", None)

    def test_bulk_broker_down(self, admin_client):
        with patch("workers.tasks.bulk_verify_items.delay", side_effect=ConnectionError("refused")):
            response = admin_client.post(
                f"{API}/admin/items/bulk",
                json={"item_ids": [ITEM_ID], "action": "approve"},
            )

        assert response.status_code == 503

    def test_cannot_demote_self(self, admin_client):
        response = admin_client.delete(f"{API}/admin/users/{USER_ID}/admin")

        assert response.status_code == 400


# =============================================================================
# Task Tests
# =============================================================================

def fake_result(status, info=None, result=None):
    return MagicMock(status=status, info=info, result=result)


class TestTaskEndpoints:
    """Test polling and cancelling bulk jobs."""

    def test_progress(self, admin_client):
        meta = {"current": 3, "total": 4, "percent": 75, "message": "Processed 3/4 items"}
        with patch("app.routers.tasks._async_result", return_value=fake_result("PROGRESS", info=meta)):
            body = admin_client.get(f"{API}/tasks/task-123").json()

        assert body["status"] == "PROGRESS"
        assert body["progress"] == 75
        assert (body["current"], body["total"]) == (3, 4)

    def test_result_of_finished_task(self, admin_client):
        summary = {"action": "approve", "total": 1, "succeeded": [ITEM_ID], "failed": []}
        with patch("app.routers.tasks._async_result", return_value=fake_result("SUCCESS", result=summary)):
            response = admin_client.get(f"{API}/tasks/task-123/result")

        assert response.status_code == 200
        assert response.json() == {"task_id": "task-123", "status": "SUCCESS", "result": summary}

    def test_finished_bulk_job_refreshes_marketplace_once(self, admin_client):
        marketplace_cache.set(CACHE_KEY, {"items": [], "categories": []})
        summary = {"action": "approve", "total": 1, "succeeded": [ITEM_ID], "failed": []}

        with patch("app.routers.tasks._async_result", return_value=fake_result("SUCCESS", result=summary)):
            admin_client.get(f"{API}/tasks/bulk-1")
            assert marketplace_cache.get(CACHE_KEY) is None

            marketplace_cache.set(CACHE_KEY, {"items": [], "categories": []})
            admin_client.get(f"{API}/tasks/bulk-1/result")

        assert marketplace_cache.get(CACHE_KEY) is not None

    def test_bulk_job_with_no_successes_keeps_cache(self, admin_client):
        marketplace_cache.set(CACHE_KEY, {"items": [], "categories": []})
        summary = {"action": "reject", "total": 1, "succeeded": [], "failed": [{"item_id": ITEM_ID}]}

        with patch("app.routers.tasks._async_result", return_value=fake_result("SUCCESS", result=summary)):
            admin_client.get(f"{API}/tasks/bulk-2")

        assert marketplace_cache.get(CACHE_KEY) is not None

    def test_result_of_running_task_conflicts(self, admin_client):
        with patch("app.routers.tasks._async_result", return_value=fake_result("STARTED")):
            response = admin_client.get(f"{API}/tasks/task-123/result")

        assert response.status_code == 409

    def test_backend_down(self, admin_client):
        with patch("app.routers.tasks._async_result", side_effect=ConnectionError("refused")):
            response = admin_client.get(f"{API}/tasks/task-123")

        assert response.status_code == 503

    def test_cancel_finished_task(self, admin_client):
        result = fake_result("SUCCESS")
        with patch("app.routers.tasks._async_result", return_value=result):
            body = admin_client.delete(f"{API}/tasks/task-123").json()

        assert body["cancelled"] is False
        result.revoke.assert_not_called()

    def test_cancel_pending_task(self, admin_client):
        result = fake_result("PENDING")
        with patch("app.routers.tasks._async_result", return_value=result):
            body = admin_client.delete(f"{API}/tasks/task-123").json()

        assert body["cancelled"] is True
        result.revoke.assert_called_once_with(terminate=True)


# =============================================================================
# Contributors Tests
# =============================================================================

def test_contributors_unavailable(client):
    with patch("app.routers.contributors.ContributorsService.get_contributors",
               side_effect=ContributorsUnavailableError("rate limited")):
        response = client.get(f"{API}/contributors")

    assert response.status_code == 502
