# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# One service-role client for the whole process, plus the reads and RPCs
# that several services share: profile rows, joined item rows and the
# verification functions.
#
# Auth calls that act on behalf of an end user (password sign-in, sign-up)
# use a fresh anon-key client so session state never leaks between requests.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   profile = SupabaseClient.fetch_user_profile(user_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError, normalize_uuid

logger = logging.getLogger(__name__)

# Select expression used wherever an item is shown with its seller/category.
# The explicit FK hint is needed because marketplace_items references users
# twice (seller_id and verified_by).
ITEM_SELECT = (
    "*, "
    "seller:users!marketplace_items_seller_id_fkey(*), "
    "category:marketplace_categories(*)"
)

ADMIN_ITEM_SELECT = (
    ITEM_SELECT + ", "
    "verified_by_admin:users!marketplace_items_verified_by_fkey(*)"
)


class SupabaseClientError(ApplicationError):
    """A Supabase query, RPC or client construction failed. Mapped to 502."""

    def __init__(self, message: str, code: str = "SUPABASE_ERROR", **kwargs: Any):
        super().__init__(message, code=code, **kwargs)


class SupabaseClient:
    """
    Process-wide access to Supabase.

    The service-role client bypasses Row Level Security, so ownership and
    admin checks live in core.services. All methods are class methods.

    Example:
        profile = SupabaseClient.fetch_user_profile("550e8400-...")
        SupabaseClient.call_rpc("increment_item_views", {"item_id": "660e..."})
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """The shared service-role client, created on first use."""
        if cls._instance is None:
            cls._instance = cls._create(settings.SUPABASE_SERVICE_KEY, "SUPABASE_SERVICE_KEY")
            logger.info("Service-role Supabase client ready")
        return cls._instance

    @classmethod
    def create_anon_client(cls) -> Client:
        """
        A fresh anon-key client for sign-in and sign-up.

        Never cached: signing in stores the user's session on the client.
        """
        return cls._create(settings.SUPABASE_ANON_KEY, "SUPABASE_ANON_KEY")

    @staticmethod
    def _create(key: str, key_name: str) -> Client:
        try:
            return create_client(settings.SUPABASE_URL, key)
        except Exception as e:
            raise SupabaseClientError(
                f"Could not create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion=f"Check SUPABASE_URL and {key_name} in your .env file",
            )

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        return normalize_uuid(uuid_value)

    @classmethod
    def _fetch_by_id(cls, table: str, row_id: str | UUID, select: str, code: str) -> dict[str, Any] | None:
        """First row of `table` with this id, or None."""
        row_id = cls._normalize_uuid(row_id)
        try:
            response = (
                cls.get_client()
                .table(table)
                .select(select)
                .eq("id", row_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                f"Reading {table} failed: {e}",
                code=code,
                suggestion=f"Check that the {table} table exists and is reachable",
                details={"table": table, "id": row_id},
            )
        rows = response.data or []
        return rows[0] if rows else None

    # -------------------------------------------------------------------------
    # Rows
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_user_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """The public.users row, or None if the account has no profile yet."""
        return cls._fetch_by_id("users", user_id, "*", "FETCH_PROFILE_FAILED")

    @classmethod
    def fetch_item(cls, item_id: str | UUID, select: str = ITEM_SELECT) -> dict[str, Any] | None:
        """
        A marketplace item with its seller and category embedded.

        Pass ADMIN_ITEM_SELECT to also embed the reviewing admin.
        """
        return cls._fetch_by_id("marketplace_items", item_id, select, "FETCH_ITEM_FAILED")

    # -------------------------------------------------------------------------
    # Remote Procedures
    # -------------------------------------------------------------------------

    @classmethod
    def call_rpc(cls, name: str, params: dict[str, Any]) -> Any:
        """
        Run a Postgres function through PostgREST and return response.data.

        The verification functions check the pending status and write the
        audit columns in one transaction.

        Raises:
            SupabaseClientError: RPC_FAILED for any error, including a
                function that raised
        """
        try:
            response = cls.get_client().rpc(name, params).execute()
        except Exception as e:
            raise SupabaseClientError(
                f"RPC {name} failed: {e}",
                code="RPC_FAILED",
                suggestion=f"Check that {name} is deployed and takes {sorted(params)}",
                details={"rpc": name, "params": params},
            )
        logger.debug(f"RPC {name} ok")
        return response.data
