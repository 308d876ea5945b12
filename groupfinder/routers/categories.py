"""
Categories Router

Endpoints:
- GET /categories - List categories
- POST /categories - Create a category (admin)
- GET /tags - List tags
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy import or_, select

from groupfinder.config import get_settings
from groupfinder.dependencies import AdminUser, DbSession
from groupfinder.models import Category, Tag
from groupfinder.schemas.category import CategoryCreate, CategoryResponse, TagResponse
from groupfinder.services.rate_limiter import limiter
from groupfinder.utils import slugify

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(tags=["Categories"])


@router.get(
    "/categories",
    response_model=list[CategoryResponse],
    summary="List categories",
)
@limiter.limit(settings.rate_limit_default)
def list_categories(request: Request, db: DbSession) -> list[CategoryResponse]:
    categories = db.scalars(select(Category).order_by(Category.name)).all()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
@limiter.limit(settings.rate_limit_write)
def create_category(
    request: Request,
    category_data: CategoryCreate,
    db: DbSession,
    admin: AdminUser,
) -> CategoryResponse:
    slug = category_data.slug or slugify(category_data.name)

    stmt = select(Category).where(
        or_(Category.name == category_data.name, Category.slug == slug)
    )
    if db.execute(stmt).scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A category with this name or slug already exists",
        )

    category = Category(
        name=category_data.name,
        slug=slug,
        description=category_data.description,
    )
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info(f"Category created: {category.slug} by user {admin.id}")
    return CategoryResponse.model_validate(category)


@router.get(
    "/tags",
    response_model=list[TagResponse],
    summary="List tags",
)
@limiter.limit(settings.rate_limit_default)
def list_tags(request: Request, db: DbSession) -> list[TagResponse]:
    tags = db.scalars(select(Tag).order_by(Tag.name)).all()
    return [TagResponse.model_validate(t) for t in tags]
