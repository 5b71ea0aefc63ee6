"""
Health check endpoints for monitoring service status.
"""

import logging

from fastapi import APIRouter, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..dependencies import DBSessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if the API is running.
    """
    return {"status": "healthy", "service": "VidShare API"}


@router.get("/db", status_code=status.HTTP_200_OK)
async def health_check_database(db_session: DBSessionDep):
    """
    Check database connectivity.
    Reports "unhealthy" instead of failing when the database cannot be reached.
    """
    try:
        result = await db_session.execute(text("SELECT 1"))
        result.scalar()
        return {
            "status": "healthy",
            "service": "database",
            "dialect": db_session.bind.dialect.name,
        }
    except SQLAlchemyError as e:
        logger.warning("Database health check failed: %s", e)
        return {"status": "unhealthy", "service": "database", "error": str(e)}
