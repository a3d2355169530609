"""
School Directory — Stats Route Handler
========================================

What:  GET /api/stats, aggregate counts for the landing page.

Response:
    {"totalSchools": 12, "totalStudents": "4.3K+", "totalCities": 5}
"""

from fastapi import APIRouter, Depends

from school_directory.dependencies import get_school_service
from school_directory.schemas.school import ErrorResponse, StatsResponse
from school_directory.services.school_service import SchoolService

router = APIRouter(prefix="/api", tags=["Stats"])


@router.get(
    "/stats",
    response_model=StatsResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Aggregate directory statistics",
    description=(
        "Total schools, distinct cities and the student sum. The student sum "
        "is abbreviated from 1000 upwards (e.g. 1500 → \"1.5K+\")."
    ),
)
async def get_stats(
    service: SchoolService = Depends(get_school_service),
) -> StatsResponse:
    return await service.get_stats()
