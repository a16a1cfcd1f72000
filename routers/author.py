import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from dependencies import get_author_manager, get_page_request, make_sort_parser
from schemas.author import AuthorCreate, AuthorRead, AuthorSortField, AuthorUpdate
from schemas.shared import AuthorSummary, BookSummary, ID_MAX, Page, PageRequest, SortControl
from services.author_service import AuthorManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/authors", tags=["authors"])

parse_author_sort = make_sort_parser(AuthorSortField)


@router.get("", response_model=Page[AuthorSummary])
async def get_authors_router(
    page_request: PageRequest = Depends(get_page_request),
    sort: List[SortControl] = Depends(parse_author_sort),
    manager: AuthorManager = Depends(get_author_manager),
):
    logger.info(
        "GET /authors page=%s size=%s", page_request.page, page_request.size
    )
    return await manager.list(page_request, sort)


@router.get("/{author_id}", response_model=AuthorRead)
async def get_author_router(
    author_id: int = Path(..., ge=1, le=ID_MAX),
    manager: AuthorManager = Depends(get_author_manager),
):
    logger.info("GET /authors/%s", author_id)
    return await manager.get(author_id)


@router.get("/{author_id}/books", response_model=List[BookSummary])
async def get_author_books(
    author_id: int = Path(..., ge=1, le=ID_MAX),
    manager: AuthorManager = Depends(get_author_manager),
):
    logger.info("GET /authors/%s/books", author_id)
    return await manager.list_books(author_id)


@router.post("", response_model=AuthorRead, status_code=status.HTTP_201_CREATED)
async def create_author(
    author: AuthorCreate,
    manager: AuthorManager = Depends(get_author_manager),
):
    logger.info("POST /authors %s %s", author.name, author.surname)
    return await manager.create(author)


@router.put("/{author_id}", response_model=AuthorRead)
async def update_author(
    new_author: AuthorUpdate,
    author_id: int = Path(..., ge=1, le=ID_MAX),
    manager: AuthorManager = Depends(get_author_manager),
):
    logger.info("PUT /authors/%s", author_id)
    return await manager.update(author_id, new_author)


@router.delete("/{author_id}", status_code=status.HTTP_204_NO_CONTENT)
async def del_author(
    author_id: int = Path(..., ge=1, le=ID_MAX),
    manager: AuthorManager = Depends(get_author_manager),
):
    logger.info("DELETE /authors/%s", author_id)
    await manager.delete(author_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
