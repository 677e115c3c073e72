from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import CurrentSession
from app.db.session import get_db
from app.knowledge_base.models.article import ArticleStatus
from app.knowledge_base.schemas.article import ArticleCreate, ArticleResponse, ArticleUpdate
from app.knowledge_base.services.article_service import ArticleService

router = APIRouter()


@router.get("/articles", response_model=list[ArticleResponse])
def list_articles(
    ctx: CurrentSession,
    status: ArticleStatus | None = None,
    category_id: UUID | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
) -> list[ArticleResponse]:
    articles = ArticleService(db).list_articles(
        ctx,
        status_filter=status.value if status else None,
        category_id=category_id,
        search=search,
    )
    return [ArticleResponse.model_validate(a) for a in articles]


@router.post("/articles", response_model=ArticleResponse, status_code=201)
def create_article(
    data: ArticleCreate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> ArticleResponse:
    article = ArticleService(db).create_article(ctx, data)
    return ArticleResponse.model_validate(article)


@router.get("/articles/{article_id}", response_model=ArticleResponse)
def get_article(
    article_id: UUID,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> ArticleResponse:
    return ArticleResponse.model_validate(ArticleService(db).get_article(ctx, article_id))


@router.patch("/articles/{article_id}", response_model=ArticleResponse)
def update_article(
    article_id: UUID,
    data: ArticleUpdate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> ArticleResponse:
    article = ArticleService(db).update_article(ctx, article_id, data)
    return ArticleResponse.model_validate(article)


@router.delete("/articles/{article_id}", status_code=204)
def delete_article(
    article_id: UUID,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> None:
    ArticleService(db).delete_article(ctx, article_id)
