import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from dependencies import get_book_manager, get_page_request, make_sort_parser
from schemas.book import BookCreate, BookRead, BookSortField, BookUpdate
from schemas.shared import BookSummary, ID_MAX, Page, PageRequest, SortControl
from services.book_service import BookManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["books"])

parse_book_sort = make_sort_parser(BookSortField)


@router.get("", response_model=Page[BookSummary])
async def get_books_router(
    page_request: PageRequest = Depends(get_page_request),
    sort: List[SortControl] = Depends(parse_book_sort),
    manager: BookManager = Depends(get_book_manager),
):
    logger.info("GET /books page=%s size=%s", page_request.page, page_request.size)
    return await manager.list(page_request, sort)


@router.get("/{book_id}", response_model=BookRead)
async def get_book_router(
    book_id: int = Path(..., ge=1, le=ID_MAX),
    manager: BookManager = Depends(get_book_manager),
):
    logger.info("GET /books/%s", book_id)
    return await manager.get(book_id)


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED)
async def create_book(
    book: BookCreate,
    manager: BookManager = Depends(get_book_manager),
):
    logger.info("POST /books %s", book.title)
    return await manager.create(book)


@router.put("/{book_id}", response_model=BookRead)
async def update_book(
    new_book: BookUpdate,
    book_id: int = Path(..., ge=1, le=ID_MAX),
    manager: BookManager = Depends(get_book_manager),
):
    logger.info("PUT /books/%s", book_id)
    return await manager.update(book_id, new_book)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: int = Path(..., ge=1, le=ID_MAX),
    manager: BookManager = Depends(get_book_manager),
):
    logger.info("DELETE /books/%s", book_id)
    await manager.delete(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
