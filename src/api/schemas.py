"""
Request bodies for the entity CRUD endpoints.

Create models list required columns without defaults; update models are
partial (see PartialUpdate) and name the columns that may be cleared
with an explicit null.
"""

from datetime import datetime

from pydantic import Field

from src.api.models import PartialUpdate, RequestModel
from src.domain.ports import (
    CandidateOffice,
    ElectionType,
    ElectoralEventCategory,
    GovernmentPlanSector,
    GuideCategory,
    ModerationStatus,
    PostStatus,
)


class VoterCreate(RequestModel):
    user_id: int
    document_number: str = Field(..., min_length=1)
    voting_table_id: int | None = None


class VoterUpdate(PartialUpdate):
    nullable = frozenset({"voting_table_id"})

    user_id: int | None = None
    document_number: str | None = Field(None, min_length=1)
    voting_table_id: int | None = None


class TableMemberCreate(RequestModel):
    user_id: int
    voting_table_id: int
    role_in_table: str | None = None


class TableMemberUpdate(PartialUpdate):
    nullable = frozenset({"role_in_table"})

    voting_table_id: int | None = None
    role_in_table: str | None = None


class VoteIntentionCreate(RequestModel):
    user_id: int
    candidate_id: int
    election_id: int


class VoteIntentionUpdate(PartialUpdate):
    user_id: int | None = None
    candidate_id: int | None = None
    election_id: int | None = None


class PoliticalGroupCreate(RequestModel):
    name: str = Field(..., min_length=1)
    short_name: str | None = None
    logo_url: str | None = None
    description: str | None = None


class PoliticalGroupUpdate(PartialUpdate):
    nullable = frozenset({"short_name", "logo_url", "description"})

    name: str | None = Field(None, min_length=1)
    short_name: str | None = None
    logo_url: str | None = None
    description: str | None = None


class CandidateCreate(RequestModel):
    full_name: str = Field(..., min_length=1)
    office: CandidateOffice
    biography: str | None = None
    photo_url: str | None = None
    political_group_id: int
    user_id: int | None = None


class CandidateUpdate(PartialUpdate):
    nullable = frozenset({"biography", "photo_url", "user_id"})

    full_name: str | None = Field(None, min_length=1)
    office: CandidateOffice | None = None
    biography: str | None = None
    photo_url: str | None = None
    political_group_id: int | None = None
    user_id: int | None = None


class ElectionCreate(RequestModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    type: ElectionType
    date: datetime


class ElectionUpdate(PartialUpdate):
    nullable = frozenset({"description"})

    name: str | None = Field(None, min_length=1)
    description: str | None = None
    type: ElectionType | None = None
    date: datetime | None = None


class ElectoralEventCreate(RequestModel):
    election_id: int
    name: str = Field(..., min_length=1)
    description: str | None = None
    date: datetime
    category: ElectoralEventCategory
    is_published: bool = True


class ElectoralEventUpdate(PartialUpdate):
    nullable = frozenset({"description"})

    election_id: int | None = None
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    date: datetime | None = None
    category: ElectoralEventCategory | None = None
    is_published: bool | None = None


class VotingCenterCreate(RequestModel):
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    latitude: float | None = None
    longitude: float | None = None
    department: str | None = None
    province: str | None = None
    district: str | None = None
    sketch_url: str | None = None


class VotingCenterUpdate(PartialUpdate):
    nullable = frozenset({"latitude", "longitude", "department", "province", "district", "sketch_url"})

    name: str | None = Field(None, min_length=1)
    address: str | None = Field(None, min_length=1)
    latitude: float | None = None
    longitude: float | None = None
    department: str | None = None
    province: str | None = None
    district: str | None = None
    sketch_url: str | None = None


class VotingTableCreate(RequestModel):
    code: str = Field(..., min_length=1)
    voting_center_id: int
    room: str | None = None
    floor: str | None = None


class VotingTableUpdate(PartialUpdate):
    nullable = frozenset({"room", "floor"})

    code: str | None = Field(None, min_length=1)
    voting_center_id: int | None = None
    room: str | None = None
    floor: str | None = None


class PostCreate(RequestModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    status: PostStatus | None = None
    author_id: int
    candidate_id: int | None = None


class PostUpdate(PartialUpdate):
    nullable = frozenset({"candidate_id"})

    title: str | None = Field(None, min_length=1)
    content: str | None = Field(None, min_length=1)
    status: PostStatus | None = None
    author_id: int | None = None
    candidate_id: int | None = None


class CommentCreate(RequestModel):
    post_id: int
    author_id: int
    content: str = Field(..., min_length=1)
    parent_id: int | None = None


class CommentUpdate(PartialUpdate):
    nullable = frozenset({"parent_id"})

    content: str | None = Field(None, min_length=1)
    parent_id: int | None = None


class PostModerationAlertCreate(RequestModel):
    post_id: int
    ai_summary: str = Field(..., min_length=1)
    status: ModerationStatus | None = None


class PostModerationAlertUpdate(PartialUpdate):
    nullable = frozenset({"reviewed_by_admin_id", "reviewed_at"})

    ai_summary: str | None = Field(None, min_length=1)
    status: ModerationStatus | None = None
    reviewed_by_admin_id: int | None = None
    reviewed_at: datetime | None = None


class GovernmentPlanCreate(RequestModel):
    political_group_id: int
    title: str = Field(..., min_length=1)
    description: str | None = None
    document_url: str | None = None
    from_year: int | None = None
    to_year: int | None = None


class GovernmentPlanUpdate(PartialUpdate):
    nullable = frozenset({"description", "document_url", "from_year", "to_year"})

    political_group_id: int | None = None
    title: str | None = Field(None, min_length=1)
    description: str | None = None
    document_url: str | None = None
    from_year: int | None = None
    to_year: int | None = None


class GovernmentPlanSectionCreate(RequestModel):
    government_plan_id: int
    sector: GovernmentPlanSector
    problem_identified: str
    strategic_objective: str
    indicators: str
    goals: str
    title: str = Field(..., min_length=1)
    content: str
    sort_order: int = 0


class GovernmentPlanSectionUpdate(PartialUpdate):
    government_plan_id: int | None = None
    sector: GovernmentPlanSector | None = None
    problem_identified: str | None = None
    strategic_objective: str | None = None
    indicators: str | None = None
    goals: str | None = None
    title: str | None = Field(None, min_length=1)
    content: str | None = None
    sort_order: int | None = None


class NewsItemCreate(RequestModel):
    title: str = Field(..., min_length=1)
    summary: str | None = None
    content: str | None = None
    source: str | None = None
    source_url: str | None = None
    published_at: datetime | None = None
    election_id: int | None = None
    political_group_id: int | None = None


class NewsItemUpdate(PartialUpdate):
    nullable = frozenset(
        {"summary", "content", "source", "source_url", "published_at", "election_id", "political_group_id"}
    )

    title: str | None = Field(None, min_length=1)
    summary: str | None = None
    content: str | None = None
    source: str | None = None
    source_url: str | None = None
    published_at: datetime | None = None
    election_id: int | None = None
    political_group_id: int | None = None


class GuideContentCreate(RequestModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category: GuideCategory
    election_id: int | None = None


class GuideContentUpdate(PartialUpdate):
    nullable = frozenset({"election_id"})

    title: str | None = Field(None, min_length=1)
    content: str | None = Field(None, min_length=1)
    category: GuideCategory | None = None
    election_id: int | None = None
