from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fastapi import status
from pydantic import BaseModel

from app.core.errors import ErrorResponse


@dataclass(frozen=True)
class ErrorExample:
    status_code: int
    example_name: str
    description: str
    value: dict[str, Any] = field(default_factory=dict)
    model: type[BaseModel] = ErrorResponse
    summary: str | None = None


def error_responses(*examples: ErrorExample) -> dict[int | str, dict[str, Any]]:
    """Build a FastAPI ``responses`` mapping, grouping examples by status code."""
    responses: dict[int | str, dict[str, Any]] = {}
    for example in examples:
        response: dict[str, Any] | None = responses.get(example.status_code)
        if response is None:
            examples_payload: dict[str, dict[str, Any]] = {}
            content: dict[str, dict[str, dict[str, Any]]] = {
                "application/json": {"examples": examples_payload}
            }
            response = {
                "model": example.model,
                "description": example.description,
                "content": content,
            }
            responses[example.status_code] = response

        example_entry: dict[str, Any] = {
            "summary": example.summary or example.description,
            "value": example.value,
        }
        response_content: dict[str, dict[str, dict[str, Any]]] = response["content"]
        response_content["application/json"]["examples"][example.example_name] = example_entry

    return responses


def rate_limited_example(description: str = "Rate limit exceeded") -> ErrorExample:
    return ErrorExample(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        example_name="rate_limited",
        description=description,
        summary="Too many requests",
        value={"error": "rate_limited", "message": "Too many requests"},
    )


def validation_error_example(field_name: str) -> ErrorExample:
    return ErrorExample(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        example_name="validation_error",
        description="Invalid request body",
        summary="Request validation failed",
        value={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": [
                {
                    "loc": ["body", field_name],
                    "msg": "Field required",
                    "type": "missing",
                }
            ],
        },
    )
