# File: fundiflow/api/v1/routes_ai.py

from fastapi import APIRouter, Depends, HTTPException

from fundiflow.ai.flows.project_comparison import (
    CompareProjectsInput,
    CompareProjectsOutput,
    compare_projects,
)
from fundiflow.ai.flows.project_priority import (
    ProjectPriorityInput,
    ProjectPriorityOutput,
    suggest_project_priority,
)
from fundiflow.ai.flows.worker_matching import (
    MatchWorkerToProjectInput,
    MatchWorkerToProjectOutput,
    match_worker_to_project,
)
from fundiflow.ai.runtime import AIResponseError, AIServiceUnavailable
from fundiflow.api.deps import get_current_user
from fundiflow.models.user import User

router = APIRouter()


async def _run(flow, payload):
    try:
        return await flow(payload)
    except AIServiceUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except AIResponseError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/project-priority", response_model=ProjectPriorityOutput, summary="Suggest project priority")
async def project_priority(payload: ProjectPriorityInput, _: User = Depends(get_current_user)):
    return await _run(suggest_project_priority, payload)


@router.post("/match-worker", response_model=MatchWorkerToProjectOutput, summary="Match a worker to a project")
async def match_worker(payload: MatchWorkerToProjectInput, _: User = Depends(get_current_user)):
    return await _run(match_worker_to_project, payload)


@router.post("/compare-projects", response_model=CompareProjectsOutput, summary="Compare two projects")
async def compare(payload: CompareProjectsInput, _: User = Depends(get_current_user)):
    return await _run(compare_projects, payload)
