"""
API v1 package.

Assembles the identity routes and one CRUD router per entity.
"""

from fastapi import APIRouter

from src.api import schemas
from src.api.dependencies import get_account_service
from src.api.models import CreateUserRequest, UpdateUserRequest
from src.api.v1.crud import Messages, crud_router
from src.api.v1.routes import router as identity_router
from src.domain.accounts import AccountService
from src.domain.content import CommentService, PostModerationAlertService, PostService
from src.domain.electoral import (
    CandidateService,
    ElectionService,
    ElectoralEventService,
    GovernmentPlanSectionService,
    GovernmentPlanService,
    GuideContentService,
    NewsItemService,
    PoliticalGroupService,
)
from src.domain.voting import (
    TableMemberService,
    VoteIntentionService,
    VoterService,
    VotingCenterService,
    VotingTableService,
)


def _messages(singular: str, plural: str, feminine: bool = False) -> Messages:
    suffix = "a" if feminine else "o"
    return Messages(
        created=f"{singular} cread{suffix} correctamente",
        listed=f"{plural} obtenid{suffix}s correctamente",
        fetched=f"{singular} obtenid{suffix} correctamente",
        updated=f"{singular} actualizad{suffix} correctamente",
        removed=f"{singular} eliminad{suffix} correctamente",
    )


router = APIRouter()
router.include_router(identity_router)

for crud in (
    crud_router(
        "/users",
        "users",
        AccountService,
        CreateUserRequest,
        UpdateUserRequest,
        _messages("Usuario", "Usuarios"),
        dependency=get_account_service,
    ),
    crud_router(
        "/voters",
        "voters",
        VoterService,
        schemas.VoterCreate,
        schemas.VoterUpdate,
        _messages("Votante", "Votantes"),
    ),
    crud_router(
        "/table-members",
        "table-members",
        TableMemberService,
        schemas.TableMemberCreate,
        schemas.TableMemberUpdate,
        _messages("Miembro de mesa", "Miembros de mesa"),
    ),
    crud_router(
        "/vote-intentions",
        "vote-intentions",
        VoteIntentionService,
        schemas.VoteIntentionCreate,
        schemas.VoteIntentionUpdate,
        _messages("Intención de voto", "Intenciones de voto", feminine=True),
    ),
    crud_router(
        "/political-groups",
        "political-groups",
        PoliticalGroupService,
        schemas.PoliticalGroupCreate,
        schemas.PoliticalGroupUpdate,
        _messages("Agrupación política", "Agrupaciones políticas", feminine=True),
    ),
    crud_router(
        "/candidates",
        "candidates",
        CandidateService,
        schemas.CandidateCreate,
        schemas.CandidateUpdate,
        _messages("Candidato", "Candidatos"),
    ),
    crud_router(
        "/elections",
        "elections",
        ElectionService,
        schemas.ElectionCreate,
        schemas.ElectionUpdate,
        _messages("Elección", "Elecciones", feminine=True),
    ),
    crud_router(
        "/electoral-events",
        "electoral-events",
        ElectoralEventService,
        schemas.ElectoralEventCreate,
        schemas.ElectoralEventUpdate,
        _messages("Evento electoral", "Eventos electorales"),
    ),
    crud_router(
        "/voting-centers",
        "voting-centers",
        VotingCenterService,
        schemas.VotingCenterCreate,
        schemas.VotingCenterUpdate,
        _messages("Local de votación", "Locales de votación"),
    ),
    crud_router(
        "/voting-tables",
        "voting-tables",
        VotingTableService,
        schemas.VotingTableCreate,
        schemas.VotingTableUpdate,
        _messages("Mesa de votación", "Mesas de votación", feminine=True),
    ),
    crud_router(
        "/posts",
        "posts",
        PostService,
        schemas.PostCreate,
        schemas.PostUpdate,
        _messages("Post", "Posts"),
    ),
    crud_router(
        "/comments",
        "comments",
        CommentService,
        schemas.CommentCreate,
        schemas.CommentUpdate,
        _messages("Comentario", "Comentarios"),
    ),
    crud_router(
        "/post-moderation-alerts",
        "post-moderation-alerts",
        PostModerationAlertService,
        schemas.PostModerationAlertCreate,
        schemas.PostModerationAlertUpdate,
        _messages("Alerta de moderación", "Alertas de moderación", feminine=True),
    ),
    crud_router(
        "/government-plans",
        "government-plans",
        GovernmentPlanService,
        schemas.GovernmentPlanCreate,
        schemas.GovernmentPlanUpdate,
        _messages("Plan de gobierno", "Planes de gobierno"),
    ),
    crud_router(
        "/government-plan-sections",
        "government-plan-sections",
        GovernmentPlanSectionService,
        schemas.GovernmentPlanSectionCreate,
        schemas.GovernmentPlanSectionUpdate,
        _messages("Sección del plan de gobierno", "Secciones del plan de gobierno", feminine=True),
    ),
    crud_router(
        "/news",
        "news",
        NewsItemService,
        schemas.NewsItemCreate,
        schemas.NewsItemUpdate,
        _messages("Noticia", "Noticias", feminine=True),
    ),
    crud_router(
        "/guide-contents",
        "guide-contents",
        GuideContentService,
        schemas.GuideContentCreate,
        schemas.GuideContentUpdate,
        _messages("Contenido de guía", "Contenidos de guía"),
    ),
):
    router.include_router(crud)

__all__ = ["router"]
