"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from app.schemas import PopulateIn, PopulateOut, ReadingIn, ReadingOut, SearchOut, TableOut
from datastore.errors import AllocationError, InvalidArgument, NullHandle
from datastore.reading_tree import ReadingTree, build_default_tree
from services.populator import build_readings, populate_tree, validate_request
from services.sensor import build_default_source
from settings import get_settings

router = APIRouter()


def get_tree() -> ReadingTree:
    return build_default_tree()


@router.post(
    "/readings",
    status_code=status.HTTP_201_CREATED,
    response_model=ReadingOut,
    summary="Insert a single reading.",
)
async def insert_reading(
    payload: ReadingIn,
    tree: ReadingTree = Depends(get_tree),
) -> ReadingOut:
    try:
        node = tree.insert(payload.to_record())
    except AllocationError as exc:
        raise HTTPException(
            status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
            detail=str(exc),
        ) from exc
    except NullHandle as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    return ReadingOut.from_record(node.record)


@router.post(
    "/readings/populate",
    status_code=status.HTTP_201_CREATED,
    response_model=PopulateOut,
    summary="Generate daily readings and insert them in shuffled order.",
)
async def populate_readings(
    payload: PopulateIn,
    tree: ReadingTree = Depends(get_tree),
) -> PopulateOut:
    settings = get_settings()
    try:
        request = validate_request(
            payload.month, payload.day, payload.num_days, year=payload.year
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    readings = build_readings(
        request.start,
        request.num_days,
        build_default_source(settings.shuffle_seed),
        hour=settings.reading_hour,
    )
    try:
        inserted = populate_tree(tree, readings)
    except AllocationError as exc:
        raise HTTPException(
            status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
            detail=str(exc),
        ) from exc
    return PopulateOut(inserted=inserted, count=tree.count)


@router.get(
    "/readings",
    response_model=TableOut,
    summary="All readings in ascending timestamp order.",
)
async def list_readings(tree: ReadingTree = Depends(get_tree)) -> TableOut:
    records = tree.in_order()
    return TableOut(
        count=len(records),
        height=tree.height,
        readings=[ReadingOut.from_record(record) for record in records],
    )


@router.get(
    "/readings/{timestamp}",
    response_model=SearchOut,
    summary="Exact-match search by timestamp, with the descent path.",
    responses={status.HTTP_404_NOT_FOUND: {"model": SearchOut}},
)
async def search_reading(
    timestamp: int,
    tree: ReadingTree = Depends(get_tree),
):
    try:
        trace = tree.trace_search(timestamp)
    except InvalidArgument as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    result = SearchOut(
        timestamp=timestamp,
        found=trace.found,
        reading=ReadingOut.from_record(trace.node.record) if trace.node else None,
        path=[ReadingOut.from_record(record) for record in trace.path],
    )
    if not trace.found:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=result.model_dump(mode="json"),
        )
    return result


@router.delete(
    "/readings",
    summary="Destroy the tree and start over with an empty one.",
)
async def reset_readings(tree: ReadingTree = Depends(get_tree)) -> dict[str, int]:
    released = tree.destroy()
    build_default_tree.cache_clear()
    return {"released": released}


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
