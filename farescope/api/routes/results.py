"""
Experiment results API endpoints.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from farescope.api.schemas.results import ExperimentResponse
from farescope.config import Settings, get_settings
from farescope.database import Database, get_database
from farescope.exceptions import ExperimentNotFoundError
from farescope.services.experiment_service import ExperimentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/results")


def get_experiment_service(
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_settings),
) -> ExperimentService:
    return ExperimentService(database, settings)


@router.get("", response_model=List[ExperimentResponse])
async def list_results(
    service: ExperimentService = Depends(get_experiment_service),
) -> List[ExperimentResponse]:
    """
    All configured experiments with their findings.

    Example:
        GET /results
    """
    findings = await service.get_all_findings()
    return [ExperimentResponse.from_findings(item) for item in findings]


@router.get("/{name}", response_model=ExperimentResponse)
async def get_result(
    name: str,
    service: ExperimentService = Depends(get_experiment_service),
) -> ExperimentResponse:
    """
    One experiment by name.

    Example:
        GET /results/experiment
    """
    try:
        findings = await service.get_findings_by_name(name)
    except ExperimentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return ExperimentResponse.from_findings(findings)
