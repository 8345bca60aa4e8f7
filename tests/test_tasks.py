# =============================================================================
# tests/test_tasks.py - Background Task Tests
# =============================================================================
# Tasks run eagerly with apply(); progress reporting is patched so no
# result backend is needed.
# =============================================================================

import threading
from unittest.mock import patch

from workers.celery_app import celery_app
from workers.tasks import bulk_verify_items

from core.services.marketplace_service import ITEMS_TABLE


def test_bulk_task_registered():
    assert "workers.tasks.bulk_verify_items" in celery_app.tasks
    assert celery_app.conf.task_routes["workers.tasks.bulk_verify_items"] == {"queue": "admin_tasks"}


def test_bulk_task_uses_worker_app_from_any_thread():
    seen = []
    thread = threading.Thread(target=lambda: seen.append(bulk_verify_items.app.main))
    thread.start()
    thread.join()

    assert seen == ["learnconnect_worker"]
    assert bulk_verify_items.app is celery_app


class TestBulkVerifyItems:
    """Test the bulk verification task."""

    def test_reports_progress_per_item(self, fake_supabase):
        fake_supabase.respond(
            ITEMS_TABLE,
            [{"id": "item-a", "verification_status": "pending"}],
            [{"id": "item-b", "verification_status": "approved"}],
        )

        with patch("workers.tasks.update_progress") as mock_progress:
            result = bulk_verify_items.apply(args=[["item-a", "item-b"], "approve"]).get()

        assert result["succeeded"] == ["item-a"]
        assert result["failed"][0]["code"] == "INVALID_VERIFICATION_TRANSITION"
        assert [c.args[:2] for c in mock_progress.call_args_list] == [(0, 2), (1, 2), (2, 2)]

    def test_reject_passes_reason(self, fake_supabase):
        fake_supabase.respond(ITEMS_TABLE, [{"id": "item-a", "verification_status": "pending"}])

        with patch("workers.tasks.update_progress"):
            bulk_verify_items.apply(
                args=[["item-a"], "reject"],
                kwargs={"reason": "Prohibited item", "admin_notes": "weapon"},
            ).get()

        assert fake_supabase.rpc_calls == [
            ("reject_marketplace_item", {
                "item_id": "item-a",
                "reason": "Prohibited item",
                "admin_notes_text": "weapon",
            })
        ]
