# fundiflow/ai/flows/project_comparison.py

from typing import Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from fundiflow.ai.runtime import define_flow


class ProjectVitals(BaseModel):
    name: str = Field(description="The name of the project.")
    deadline: str = Field(description="The deadline for the project (ISO format).")
    status: str = Field(description="The current status of the project (e.g., In Progress, On Hold).")
    progress: float = Field(ge=0, le=100, description="Completion progress as a percentage (0-100).")


class CompareProjectsInput(BaseModel):
    project_one: ProjectVitals
    project_two: ProjectVitals


class CompareProjectsOutput(BaseModel):
    analysis: str = Field(
        description="A detailed analysis comparing the two projects, highlighting key differences, risks, and outlooks."
    )


PROMPT = """\
You are an expert production analyst. Given the vital statistics for two projects, provide a comparative analysis.

Your analysis should be insightful and highlight the key differences. Consider the following aspects:
- Progress vs. Deadline: Which project is on track? Which is at risk of falling behind?
- Status: What does the current status imply for each project?
- Overall Outlook: What is the general outlook for each project? Are there any hidden risks or opportunities?

Provide a concise but comprehensive analysis.

Project A: {{ project_one.name }}
- Deadline: {{ project_one.deadline }}
- Status: {{ project_one.status }}
- Progress: {{ project_one.progress }}%

Project B: {{ project_two.name }}
- Deadline: {{ project_two.deadline }}
- Status: {{ project_two.status }}
- Progress: {{ project_two.progress }}%
"""

project_comparison_flow = define_flow(
    "projectComparisonFlow", CompareProjectsInput, CompareProjectsOutput, PROMPT
)


async def compare_projects(
    data: CompareProjectsInput, client: Optional[AsyncOpenAI] = None
) -> CompareProjectsOutput:
    return await project_comparison_flow(data, client=client)
