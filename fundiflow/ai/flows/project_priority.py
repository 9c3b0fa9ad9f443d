# fundiflow/ai/flows/project_priority.py
"""
Suggest the order in which to prioritize projects given their deadlines
and the available workers.
"""

from typing import List, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from fundiflow.ai.runtime import define_flow


class PriorityProject(BaseModel):
    name: str = Field(description="The name of the project.")
    deadline: str = Field(description="The deadline for the project (ISO format).")
    description: str = Field(description="The description of the project.")
    workers: List[str] = Field(default=[], description="Names of workers available for the project.")


class ProjectPriorityInput(BaseModel):
    projects: List[PriorityProject] = Field(min_length=1, description="A list of projects to prioritize.")
    workers: List[str] = Field(description="A list of available workers and their skills/availability.")


class ProjectPriorityOutput(BaseModel):
    priority_order: List[str] = Field(description="The suggested order of project names to prioritize.")
    reasoning: str = Field(description="The detailed reasoning behind the suggested priority order.")


PROMPT = """\
You are an expert production manager assistant. Given a list of projects with deadlines and a list of available workers, determine the optimal order in which to prioritize the projects to ensure timely completion and efficient resource allocation.

Projects:
{% for p in projects %}
- Name: {{ p.name }}, Deadline: {{ p.deadline }}, Description: {{ p.description }}, Workers: {{ p.workers | join(", ") }}
{% endfor %}

Workers:
{% for w in workers %}
- {{ w }}
{% endfor %}

Consider the deadlines of the projects, and the skills and availability of the workers. Provide a clear and concise reasoning for your suggested priority order, and the optimal order of project names in the "priority_order" array.
"""

project_priority_flow = define_flow(
    "projectPriorityFlow", ProjectPriorityInput, ProjectPriorityOutput, PROMPT
)


async def suggest_project_priority(
    data: ProjectPriorityInput, client: Optional[AsyncOpenAI] = None
) -> ProjectPriorityOutput:
    return await project_priority_flow(data, client=client)
