# =============================================================================
# core/models/progress.py - Study Progress Schemas
# =============================================================================
# Progress is a per-user, per-subject JSON blob:
#
#   completeVideos: {"<subject>-module<n>-topic<Topic>-video<Video>": true}
#   topicProgress:  {"<subject>-module<n>-topic<Topic>": <completed count>}
#
# Topic and video titles have all whitespace removed inside keys.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class ProgressData(BaseModel):
    """Stored progress for one subject."""

    model_config = ConfigDict(populate_by_name=True)

    complete_videos: dict[str, bool] = Field(
        default_factory=dict,
        alias="completeVideos",
        description="Video key -> completed flag"
    )

    topic_progress: dict[str, int] = Field(
        default_factory=dict,
        alias="topicProgress",
        description="Topic key -> number of completed videos"
    )

    def to_json(self) -> dict:
        """Serialize with the camelCase keys used in storage."""
        return self.model_dump(by_alias=True)


class VideoProgressUpdate(BaseModel):
    """
    Request to mark a video complete or incomplete.

    Example:
        {"module": 1, "topic": "Laplace Transform", "video": "Lecture 1", "completed": true}
    """
    module: int = Field(..., ge=1)
    topic: str = Field(..., min_length=1)
    video: str = Field(..., min_length=1)
    completed: bool = True


class ProgressCount(BaseModel):
    """Completed-of-total counter with a display percentage."""
    total: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    percentage: float = Field(default=0.0, ge=0, le=100)


class TopicProgress(ProgressCount):
    title: str
    key: str


class ModuleProgress(ProgressCount):
    number: int
    topics: list[TopicProgress] = Field(default_factory=list)


class SubjectProgress(ProgressCount):
    """Progress of one subject, broken down by module and topic."""
    subject: str
    modules: list[ModuleProgress] = Field(default_factory=list)
