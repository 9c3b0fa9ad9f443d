# fundiflow/ai/flows/worker_matching.py
"""
Pick the worker most likely to complete a project on time based on
skills, availability and past performance.
"""

from typing import List, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from fundiflow.ai.runtime import AIResponseError, define_flow


class PoolWorker(BaseModel):
    worker_id: str = Field(description="The ID of the worker.")
    skills: List[str] = Field(description="The skills of the worker.")
    availability: str = Field(description="The availability of the worker (e.g., hours per week).")
    past_performance: float = Field(description="The worker's past performance (e.g., completion rate).")


class MatchWorkerToProjectInput(BaseModel):
    project_id: str = Field(description="The ID of the project to be assigned.")
    worker_pool: List[PoolWorker] = Field(min_length=1, description="Workers to consider for the assignment.")
    project_deadline: str = Field(description="The deadline for the project (e.g., YYYY-MM-DD).")
    project_description: str = Field(description="Requirements and goals of the project.")
    skills_required: List[str] = Field(default=[], description="Skills required for the project.")


class MatchWorkerToProjectOutput(BaseModel):
    worker_id: str = Field(description="The ID of the worker most likely to complete the project on time.")
    reasoning: str = Field(description="Why this worker was selected.")


PROMPT = """\
You are a production manager tasked with assigning workers to projects. Given a project description, a list of available workers with their skills, availability, and past performance, and the project deadline, you must select the worker most likely to complete the project on time.

Project Description: {{ project_description }}
Project Deadline: {{ project_deadline }}
Skills Required: {{ skills_required | join(", ") }}

Available Workers:
{% for w in worker_pool %}
  Worker ID: {{ w.worker_id }}
  Skills: {{ w.skills | join(", ") }}
  Availability: {{ w.availability }}
  Past Performance: {{ w.past_performance }}
{% endfor %}

Based on this information, select the worker ID most likely to complete the project on time, and explain your reasoning.
"""

worker_matching_flow = define_flow(
    "matchWorkerToProjectFlow", MatchWorkerToProjectInput, MatchWorkerToProjectOutput, PROMPT
)


async def match_worker_to_project(
    data: MatchWorkerToProjectInput, client: Optional[AsyncOpenAI] = None
) -> MatchWorkerToProjectOutput:
    result = await worker_matching_flow(data, client=client)
    if result.worker_id not in {w.worker_id for w in data.worker_pool}:
        raise AIResponseError(f"Model picked unknown worker {result.worker_id!r}")
    return result
