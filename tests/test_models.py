# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for all Pydantic models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Models serialize to JSON properly
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from uuid import uuid4

import pytest
from pydantic import ValidationError

from core.models import (
    NOT_SPECIFIED,
    BulkActionRequest,
    ItemCondition,
    ItemCreate,
    MarketplaceFilters,
    MarketplaceItem,
    ProfileCreate,
    ProgressData,
    RatingCreate,
    Subject,
    UserProfile,
    VerificationStatus,
    VideoProgressUpdate,
)


# =============================================================================
# User Models
# =============================================================================

class TestUserModels:
    """Test profile schemas."""

    def test_profile_defaults(self):
        """A bare profile row gets the unset academic values."""
        profile = UserProfile(id=uuid4())

        assert profile.college == NOT_SPECIFIED
        assert profile.year == NOT_SPECIFIED
        assert profile.rating == 0.0
        assert profile.is_admin is False

    def test_profile_create_row_defaults(self):
        """New accounts start unverified, active and without admin rights."""
        user_id = uuid4()
        row = ProfileCreate(id=user_id, name="Asha", email="asha@gmail.com").to_row()

        assert row["id"] == str(user_id)
        assert row["phone"] == ""
        assert row["avatar_url"] is None
        assert row["is_verified"] is False
        assert row["is_active"] is True
        assert row["is_admin"] is False

    def test_rating_above_five_rejected(self):
        with pytest.raises(ValidationError):
            UserProfile(id=uuid4(), rating=5.5)


# =============================================================================
# Content Models
# =============================================================================

class TestContentModels:
    """Test subject catalog schemas."""

    def test_module_keys_coerced_and_sorted(self, sample_subject):
        """JSON object keys become ints and modules sort numerically."""
        subject = Subject.model_validate(sample_subject)

        assert set(subject.modules) == {1, 2}
        assert [m.number for m in subject.sorted_modules()] == [1, 2]

    def test_topic_defaults(self, sample_subject):
        subject = Subject.model_validate(sample_subject)
        topic = subject.modules[1].topics[1]

        assert topic.description == ""
        assert topic.videos == []
        assert topic.notes == []

    def test_subject_defaults(self):
        subject = Subject(key="bee", name="Basic Electrical")

        assert subject.icon == "BookOpen"
        assert subject.color == "blue"
        assert subject.modules == {}


# =============================================================================
# Progress Models
# =============================================================================

class TestProgressModels:
    """Test progress schemas."""

    def test_accepts_camel_case(self):
        data = ProgressData.model_validate({
            "completeVideos": {"am1-module1-topicX-videoY": True},
            "topicProgress": {"am1-module1-topicX": 1},
        })

        assert data.complete_videos == {"am1-module1-topicX-videoY": True}
        assert data.topic_progress == {"am1-module1-topicX": 1}

    def test_serializes_camel_case(self):
        data = ProgressData(complete_videos={"k": True})

        assert data.to_json() == {"completeVideos": {"k": True}, "topicProgress": {}}

    def test_module_must_be_positive(self):
        with pytest.raises(ValidationError):
            VideoProgressUpdate(module=0, topic="T", video="V")


# =============================================================================
# Marketplace Models
# =============================================================================

class TestMarketplaceModels:
    """Test listing schemas."""

    def test_item_create_strips_title(self):
        item = ItemCreate(
            title="  Drawing board  ",
            category_id=uuid4(),
            price=250,
            condition="good",
        )

        assert item.title == "Drawing board"
        assert item.condition == ItemCondition.GOOD

    def test_item_create_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            ItemCreate(title="   ", category_id=uuid4(), price=10, condition="new")

    def test_item_create_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ItemCreate(title="Book", category_id=uuid4(), price=-1, condition="new")

    def test_item_unknown_condition_rejected(self):
        with pytest.raises(ValidationError):
            ItemCreate(title="Book", category_id=uuid4(), price=1, condition="broken")

    def test_item_defaults_to_pending(self, sample_item):
        row = {**sample_item}
        del row["verification_status"]

        item = MarketplaceItem.model_validate(row)

        assert item.verification_status == VerificationStatus.PENDING
        assert item.seller.name == "Rohan"
        assert item.category.name == "Electronics"

    def test_filters_empty(self):
        assert MarketplaceFilters().is_empty()
        assert MarketplaceFilters(min_price=0, search="").is_empty()
        assert not MarketplaceFilters(search="calc").is_empty()

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, rating):
        with pytest.raises(ValidationError):
            RatingCreate(rating=rating, item_id=uuid4())

    def test_bulk_action_requires_items(self):
        with pytest.raises(ValidationError):
            BulkActionRequest(item_ids=[], action="approve")

    def test_bulk_action_unknown_action(self):
        with pytest.raises(ValidationError):
            BulkActionRequest(item_ids=[uuid4()], action="delete")
