# File: tests/test_ai.py

"""
AI flows against a fake OpenAI client.
"""

import json
from types import SimpleNamespace

import pytest

from fundiflow.ai import runtime
from fundiflow.ai.flows.project_comparison import CompareProjectsInput, compare_projects
from fundiflow.ai.flows.project_priority import ProjectPriorityInput, project_priority_flow
from fundiflow.ai.flows.worker_matching import MatchWorkerToProjectInput, match_worker_to_project


class FakeCompletions:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(reply):
    completions = FakeCompletions(reply if isinstance(reply, str) else json.dumps(reply))
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


PRIORITY_INPUT = {
    "projects": [
        {"name": "Rover", "deadline": "2026-05-01", "description": "Mars rover", "workers": ["Alice"]},
        {"name": "Drone", "deadline": "2026-04-01", "description": "Quadcopter", "workers": []},
    ],
    "workers": ["Alice: Soldering, 40h/week"],
}

MATCH_INPUT = {
    "project_id": "p1",
    "worker_pool": [
        {"worker_id": "w1", "skills": ["Soldering"], "availability": "40h", "past_performance": 0.9},
        {"worker_id": "w2", "skills": ["Wiring"], "availability": "20h", "past_performance": 0.7},
    ],
    "project_deadline": "2026-05-01",
    "project_description": "Board assembly",
    "skills_required": ["Soldering"],
}


def test_prompt_renders_every_project():
    prompt = project_priority_flow.render(ProjectPriorityInput.model_validate(PRIORITY_INPUT))
    assert "Name: Rover, Deadline: 2026-05-01" in prompt
    assert "Name: Drone" in prompt
    assert "- Alice: Soldering, 40h/week" in prompt


@pytest.mark.asyncio
async def test_flow_requests_json_and_validates_reply():
    client = fake_client({"priority_order": ["Drone", "Rover"], "reasoning": "Drone is due first."})

    result = await project_priority_flow(ProjectPriorityInput.model_validate(PRIORITY_INPUT), client=client)

    assert result.priority_order == ["Drone", "Rover"]
    call = client.chat.completions.calls[0]
    assert call["response_format"] == {"type": "json_object"}
    assert call["messages"][0]["role"] == "system"
    assert "priority_order" in call["messages"][0]["content"]


@pytest.mark.asyncio
async def test_invalid_reply_raises_response_error():
    client = fake_client("not json at all")
    with pytest.raises(runtime.AIResponseError):
        await compare_projects(
            CompareProjectsInput.model_validate({
                "project_one": {"name": "A", "deadline": "2026-01-01", "status": "In Progress", "progress": 10},
                "project_two": {"name": "B", "deadline": "2026-02-01", "status": "On Hold", "progress": 80},
            }),
            client=client,
        )


@pytest.mark.asyncio
async def test_match_rejects_worker_outside_pool():
    client = fake_client({"worker_id": "w9", "reasoning": "?"})
    with pytest.raises(runtime.AIResponseError):
        await match_worker_to_project(MatchWorkerToProjectInput.model_validate(MATCH_INPUT), client=client)


def test_missing_api_key_is_service_unavailable(monkeypatch):
    monkeypatch.setattr(runtime.settings, "openai_api_key", None)
    with pytest.raises(runtime.AIServiceUnavailable):
        runtime.get_openai_client()


# ----------------------------------------------------
# HTTP
# ----------------------------------------------------

def test_route_without_key_is_503(client, admin_headers):
    resp = client.post("/api/v1/ai/project-priority", json=PRIORITY_INPUT, headers=admin_headers)
    assert resp.status_code == 503


def test_route_with_bad_reply_is_502(client, admin_headers, monkeypatch):
    monkeypatch.setattr(runtime, "get_openai_client", lambda: fake_client({"wrong": "shape"}))
    resp = client.post("/api/v1/ai/match-worker", json=MATCH_INPUT, headers=admin_headers)
    assert resp.status_code == 502


def test_route_returns_flow_output(client, admin_headers, monkeypatch):
    reply = {"worker_id": "w1", "reasoning": "Has soldering skills and the best record."}
    monkeypatch.setattr(runtime, "get_openai_client", lambda: fake_client(reply))
    resp = client.post("/api/v1/ai/match-worker", json=MATCH_INPUT, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == reply
