"""
Upload API Routes

Endpoints for CSV file upload, session management and data preview.
"""

import math
from datetime import datetime

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from api.schemas.responses import PreviewResponse, SessionInfo, UploadResponse
from config import get_settings
from core.cache import analysis_cache, session_store
from core.csv_parser import csv_parser
from core.data_profiler import data_profiler
from core.dataset import Dataset
from core.logging_config import upload_logger as logger


router = APIRouter()


def get_session_dataset(session_id: str) -> Dataset:
    """Dataset for a live session, or 404."""
    dataset = session_store.get_dataset(session_id)
    if dataset is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return dataset


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: UploadFile = File(...),
) -> UploadResponse:
    """
    Upload a CSV file for analysis.

    Creates a new session and returns the detected column types.
    """
    settings = get_settings()

    # Validate file type
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(
            status_code=400,
            detail="Only CSV files are supported"
        )

    # Read file content
    content = await file.read()

    # Check file size
    file_size_mb = len(content) / (1024 * 1024)
    if file_size_mb > settings.max_file_size_mb:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {settings.max_file_size_mb}MB"
        )

    try:
        dataset = csv_parser.parse_bytes(content, file.filename)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Failed to parse {file.filename}")
        raise HTTPException(
            status_code=400,
            detail=f"Error parsing CSV file: {str(e)}"
        )

    session_id = csv_parser.generate_session_id(file.filename)
    session_store.create(session_id, dataset, {
        "filename": file.filename,
        "status": "ready",
        "file_size_mb": file_size_mb,
    })
    logger.info(f"Created session {session_id} for {file.filename}")

    return UploadResponse(
        session_id=session_id,
        filename=file.filename,
        row_count=dataset.row_count,
        column_count=dataset.column_count,
        columns=list(dataset.headers),
        column_types=data_profiler.column_types(dataset),
        message=f"Loaded {dataset.row_count} rows with {dataset.column_count} columns.",
    )


@router.get("/sessions/{session_id}", response_model=SessionInfo)
async def get_session(session_id: str) -> SessionInfo:
    """Get session information."""

    session = session_store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    dataset: Dataset = session["dataset"]
    return SessionInfo(
        session_id=session_id,
        filename=session.get("filename", "unknown"),
        created_at=datetime.fromtimestamp(session.get("created_at", 0)),
        row_count=dataset.row_count,
        column_count=dataset.column_count,
        columns=list(dataset.headers),
        status=session.get("status", "unknown"),
    )


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str) -> dict:
    """Delete a session and its data."""

    if not session_store.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found")

    return {"message": f"Session {session_id} deleted successfully"}


@router.get("/sessions")
async def list_sessions() -> dict:
    """List all active sessions."""

    session_ids = session_store.list_sessions()
    sessions = []

    for sid in session_ids:
        session = session_store.get(sid)
        if session:
            sessions.append({
                "session_id": sid,
                "filename": session.get("filename"),
                "row_count": session["dataset"].row_count,
                "status": session.get("status"),
            })

    return {"sessions": sessions, "count": len(sessions)}


@router.get("/sessions/{session_id}/preview", response_model=PreviewResponse)
async def get_preview(
    session_id: str,
    page: int = Query(default=0, ge=0, description="Zero-based page index"),
) -> PreviewResponse:
    """One page of raw rows plus the detected column types."""
    dataset = get_session_dataset(session_id)
    page_size = get_settings().analysis.preview_page_size

    start = page * page_size
    return PreviewResponse(
        session_id=session_id,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(dataset.row_count / page_size),
        row_count=dataset.row_count,
        columns=list(dataset.headers),
        column_types=data_profiler.column_types(dataset),
        rows=dataset.raw_rows(start, start + page_size),
    )


@router.post("/clear-cache")
async def clear_cache() -> dict:
    """
    Clear all cached results and sessions.

    Use this if you see stale data or want to force fresh analysis.
    """
    analysis_cache.clear()
    sessions_cleared = session_store.clear_all()
    logger.info(f"Cleared cache and {sessions_cleared} sessions")

    return {
        "message": "Cache cleared successfully",
        "sessions_cleared": sessions_cleared,
        "analysis_cache": "cleared",
    }
