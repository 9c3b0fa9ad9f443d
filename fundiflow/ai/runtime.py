# fundiflow/ai/runtime.py
"""
Minimal runtime for LLM flows.

A flow is an input model, an output model and a Jinja2 prompt template.
Calling the flow renders the prompt, sends it to the OpenAI chat
completions API in JSON mode and validates the reply against the output
model. There is no retry; failures surface as AIServiceUnavailable
(service not configured or unreachable) or AIResponseError (reply does not
match the output model).
"""

import json
import logging
from typing import Generic, Optional, Type, TypeVar

from jinja2 import Environment, StrictUndefined
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from fundiflow.core.config import settings

logger = logging.getLogger(__name__)

In = TypeVar("In", bound=BaseModel)
Out = TypeVar("Out", bound=BaseModel)

_env = Environment(undefined=StrictUndefined, trim_blocks=True, lstrip_blocks=True)

_client: Optional[AsyncOpenAI] = None


class AIServiceUnavailable(RuntimeError):
    pass


class AIResponseError(RuntimeError):
    pass


def get_openai_client() -> AsyncOpenAI:
    global _client
    if not settings.openai_api_key:
        raise AIServiceUnavailable("AI service is not configured (OPENAI_API_KEY missing)")
    if _client is None:
        _client = AsyncOpenAI(api_key=settings.openai_api_key)
    return _client


class Flow(Generic[In, Out]):
    def __init__(
        self,
        name: str,
        input_model: Type[In],
        output_model: Type[Out],
        prompt: str,
        temperature: float = 0.3,
    ):
        self.name = name
        self.input_model = input_model
        self.output_model = output_model
        self.template = _env.from_string(prompt)
        self.temperature = temperature

    def render(self, data: In) -> str:
        return self.template.render(**data.model_dump())

    def system_prompt(self) -> str:
        schema = json.dumps(self.output_model.model_json_schema(), indent=2)
        return (
            "Respond only with a JSON object that validates against this JSON schema:\n"
            f"{schema}"
        )

    async def __call__(self, data: In, client: Optional[AsyncOpenAI] = None) -> Out:
        if not isinstance(data, self.input_model):
            data = self.input_model.model_validate(data)
        client = client or get_openai_client()

        try:
            response = await client.chat.completions.create(
                model=settings.openai_model,
                messages=[
                    {"role": "system", "content": self.system_prompt()},
                    {"role": "user", "content": self.render(data)},
                ],
                response_format={"type": "json_object"},
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logger.error("[AI] %s request failed: %s", self.name, e)
            raise AIServiceUnavailable(f"AI service request failed: {e}") from e

        raw = response.choices[0].message.content or ""
        try:
            output = self.output_model.model_validate_json(raw)
        except ValidationError as e:
            logger.error("[AI] %s returned an invalid reply: %s", self.name, raw[:500])
            raise AIResponseError(f"{self.name} returned an invalid reply") from e

        logger.info("[AI] %s completed", self.name)
        return output


def define_flow(
    name: str, input_model: Type[In], output_model: Type[Out], prompt: str, **kwargs
) -> Flow[In, Out]:
    return Flow(name, input_model, output_model, prompt, **kwargs)
