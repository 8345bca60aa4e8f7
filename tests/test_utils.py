# =============================================================================
# tests/test_utils.py - Shared Utility Tests
# =============================================================================
# This module contains tests for:
# - Registration email checks
# - TTLCache expiry
# - WhatsApp contact links
# =============================================================================

from urllib.parse import unquote

import pytest

from app.config import settings
from core.services.marketplace_service import generate_whatsapp_url
from lib.cache import TTLCache
from lib.utils import strip_whitespace, validate_email_domain


# =============================================================================
# Email Validation Tests
# =============================================================================

class TestValidateEmailDomain:
    """Test registration email checks."""

    @pytest.mark.parametrize("email", ["a@gmail.com", "b@VJTI.ac.in", "c@outlook.com"])
    def test_allowed(self, email):
        ok, message = validate_email_domain(email, settings.allowed_email_domains_list)

        assert ok
        assert message == ""

    @pytest.mark.parametrize("email", ["", "no-at-sign", "a@b", "a b@gmail.com"])
    def test_malformed(self, email):
        ok, message = validate_email_domain(email, settings.allowed_email_domains_list)

        assert not ok
        assert message == "Please enter a valid email address"

    def test_unlisted_domain(self):
        ok, message = validate_email_domain("a@example.com", settings.allowed_email_domains_list)

        assert not ok
        assert "official email" in message


def test_strip_whitespace():
    assert strip_whitespace(" Complex\tNumbers \n") == "ComplexNumbers"


# =============================================================================
# TTLCache Tests
# =============================================================================

class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    """Test the in-process TTL cache."""

    def test_hit_before_expiry(self):
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=300, clock=clock)
        cache.set("fy-comps-odd", {"am1": 1})

        clock.now = 299
        assert cache.get("fy-comps-odd") == {"am1": 1}

    def test_miss_after_expiry(self):
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=300, clock=clock)
        cache.set("key", "value")

        clock.now = 301
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_zero_ttl_disables(self):
        cache = TTLCache(ttl_seconds=0)
        cache.set("key", "value")

        assert cache.get("key") is None

    def test_invalidate_and_clear(self):
        cache = TTLCache(ttl_seconds=60)
        cache.set("a", 1)
        cache.set("b", 2)

        cache.invalidate("a")
        assert cache.get("a") is None
        assert cache.get("b") == 2

        cache.clear()
        assert len(cache) == 0


# =============================================================================
# WhatsApp Link Tests
# =============================================================================

class TestWhatsAppUrl:
    """Test contact link generation."""

    def test_adds_country_code(self):
        url = generate_whatsapp_url("98765 43210", "Casio fx-991EX", "Rohan")

        assert url.startswith("https://wa.me/919876543210?text=")

    def test_keeps_existing_country_code(self):
        url = generate_whatsapp_url("+91-98765-43210", "Book", "Rohan")

        assert url.startswith("https://wa.me/919876543210?text=")

    def test_message_encoded_like_uri_component(self):
        url = generate_whatsapp_url("9876543210", "Casio fx-991EX", "Rohan")
        text = url.split("?text=", 1)[1]

        assert " " not in text
        assert "%20" in text
        assert "!" in text
        assert "%22Casio" in text
        assert unquote(text) == (
            'Hi Rohan! I\'m interested in your "Casio fx-991EX" listed on '
            "LearnConnect marketplace. Is it still available?"
        )
