from typing import List, Optional, Dict, Any

from pydantic import BaseModel

from core.matching.models import MatchResult, Posting
from database.repositories.notification import NOTIFICATION_TYPE_CASTING_MATCH


class CastingInfo(BaseModel):
    casting_id: str
    title: str
    city: Optional[str] = None
    job_type: Optional[str] = None


class MatchInfo(BaseModel):
    candidate_id: str
    candidate_name: str = ""
    score: float
    reasons: List[str] = []


class TopMatchNotificationContent(BaseModel):
    casting: CastingInfo
    match: MatchInfo
    rank: int = 1


class NotificationMessageBuilder:
    @staticmethod
    def build_notification_content(
        posting: Posting,
        result: MatchResult,
        rank: int = 1
    ) -> TopMatchNotificationContent:
        """Build notification content for one ranked candidate of a casting."""
        casting_info = CastingInfo(
            casting_id=str(posting.id),
            title=posting.title or "Untitled casting",
            city=posting.city,
            job_type=posting.job_type,
        )

        match_info = MatchInfo(
            candidate_id=str(result.candidate_id),
            candidate_name=result.candidate_name or "",
            score=float(result.score),
            reasons=list(result.reasons),
        )

        return TopMatchNotificationContent(casting=casting_info, match=match_info, rank=rank)

    @staticmethod
    def build_subject(content: TopMatchNotificationContent) -> str:
        return f"You match the casting \"{content.casting.title}\""

    @staticmethod
    def to_markdown(content: TopMatchNotificationContent) -> str:
        """Convert notification content to markdown format."""
        lines = [f"**{content.casting.title}**"]

        details = []
        if content.casting.city:
            details.append(content.casting.city)
        if content.casting.job_type:
            details.append(content.casting.job_type)
        if details:
            lines.append(" | ".join(details))

        lines.append("")
        lines.append(f"Match score: **{content.match.score:.0f}%** (rank #{content.rank})")

        if content.match.reasons:
            lines.append("")
            for reason in content.match.reasons:
                lines.append(f"- {reason}")

        return "\n".join(lines)

    @staticmethod
    def to_data(content: TopMatchNotificationContent) -> Dict[str, Any]:
        """Structured data stored alongside an in-app notification."""
        return {
            'casting_id': content.casting.casting_id,
            'model_id': content.match.candidate_id,
            'score': content.match.score,
            'rank': content.rank,
        }

    @staticmethod
    def to_webhook_payload(subject: str, contents: List[TopMatchNotificationContent]) -> Dict[str, Any]:
        return {
            'type': NOTIFICATION_TYPE_CASTING_MATCH,
            'subject': subject,
            'matches': [content.model_dump() for content in contents],
        }
