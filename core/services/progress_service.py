# =============================================================================
# core/services/progress_service.py - Study Progress Business Logic
# =============================================================================
# Tracks which videos a student has finished, per subject.
#
# Storage: public.user_progress (user_id, subject_key, data jsonb, updated_at),
# one row per user and subject, upserted on (user_id, subject_key).
# =============================================================================

import logging
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import strip_whitespace, utc_now_iso
from core.models.progress import (
    ModuleProgress,
    ProgressData,
    SubjectProgress,
    TopicProgress,
    VideoProgressUpdate,
)
from core.services.content_service import ContentService

logger = logging.getLogger(__name__)

PROGRESS_TABLE = "user_progress"


def topic_key(subject_key: str, module_number: int, topic_title: str) -> str:
    """Key of a topic: `{subject}-module{n}-topic{TitleWithoutSpaces}`."""
    return f"{subject_key}-module{module_number}-topic{strip_whitespace(topic_title)}"


def video_key(topic: str, video_title: str) -> str:
    """Key of a video under an already built topic key."""
    return f"{topic}-video{strip_whitespace(video_title)}"


def percentage(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return completed / total * 100


def count_completed(data: ProgressData, topic: str) -> int:
    """Number of completed videos stored under a topic key."""
    prefix = f"{topic}-video"
    return sum(
        1 for key, done in data.complete_videos.items()
        if done and key.startswith(prefix)
    )


class ProgressService:
    """
    Service for per-subject progress.

    All operations are scoped to a single user.
    """

    @staticmethod
    def get_progress(user_id: UUID | str, subject_key: str) -> ProgressData:
        """Stored progress, or empty progress when nothing was saved yet."""
        client = SupabaseClient.get_client()

        response = (
            client.table(PROGRESS_TABLE)
            .select("data")
            .eq("user_id", str(user_id))
            .eq("subject_key", subject_key)
            .limit(1)
            .execute()
        )

        rows = response.data or []
        if not rows or not rows[0].get("data"):
            return ProgressData()
        return ProgressData.model_validate(rows[0]["data"])

    @staticmethod
    def save_progress(user_id: UUID | str, subject_key: str, data: ProgressData) -> ProgressData:
        client = SupabaseClient.get_client()

        client.table(PROGRESS_TABLE).upsert(
            {
                "user_id": str(user_id),
                "subject_key": subject_key,
                "data": data.to_json(),
                "updated_at": utc_now_iso(),
            },
            on_conflict="user_id,subject_key",
        ).execute()

        return data

    @staticmethod
    def set_video_completed(
        user_id: UUID | str,
        subject_key: str,
        update: VideoProgressUpdate,
    ) -> ProgressData:
        """
        Mark one video complete or incomplete and refresh its topic counter.

        Returns:
            The saved progress
        """
        data = ProgressService.get_progress(user_id, subject_key)

        topic = topic_key(subject_key, update.module, update.topic)
        video = video_key(topic, update.video)

        data.complete_videos[video] = update.completed
        data.topic_progress[topic] = count_completed(data, topic)

        ProgressService.save_progress(user_id, subject_key, data)
        logger.info(
            f"Progress for {user_id}/{subject_key}: {video} -> "
            f"{'done' if update.completed else 'not done'}"
        )
        return data

    @staticmethod
    def reset_progress(user_id: UUID | str, subject_key: str) -> None:
        client = SupabaseClient.get_client()

        (
            client.table(PROGRESS_TABLE)
            .delete()
            .eq("user_id", str(user_id))
            .eq("subject_key", subject_key)
            .execute()
        )
        logger.info(f"Reset progress for {user_id}/{subject_key}")

    @staticmethod
    def progress_summary(
        user_id: UUID | str,
        year: str,
        branch: str,
        semester: str,
        subject_key: str,
    ) -> SubjectProgress:
        """
        Combine the subject's content with the stored progress.

        Totals count videos; a topic with no videos contributes nothing.

        Raises:
            SubjectNotFoundError: If the subject is not in the catalog
        """
        subject = ContentService.get_subject(year, branch, semester, subject_key)
        data = ProgressService.get_progress(user_id, subject_key)

        modules: list[ModuleProgress] = []
        for module in subject.sorted_modules():
            topics: list[TopicProgress] = []
            for topic in module.topics:
                key = topic_key(subject_key, module.number, topic.title)
                total = len(topic.videos)
                completed = sum(
                    1 for v in topic.videos
                    if data.complete_videos.get(video_key(key, v.title))
                )
                topics.append(TopicProgress(
                    title=topic.title,
                    key=key,
                    total=total,
                    completed=completed,
                    percentage=percentage(completed, total),
                ))

            total = sum(t.total for t in topics)
            completed = sum(t.completed for t in topics)
            modules.append(ModuleProgress(
                number=module.number,
                topics=topics,
                total=total,
                completed=completed,
                percentage=percentage(completed, total),
            ))

        total = sum(m.total for m in modules)
        completed = sum(m.completed for m in modules)
        return SubjectProgress(
            subject=subject_key,
            modules=modules,
            total=total,
            completed=completed,
            percentage=percentage(completed, total),
        )
