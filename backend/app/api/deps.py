"""Route Dependencies — typed access to the body parsed by the pipeline.

Invariants:
    - Handlers never re-read the raw body; they validate request.state.parsed_body
    - Validation failures surface as RequestValidationError (400 via error_handlers)
"""

from typing import Callable, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parsed_body(model: type[ModelT]) -> Callable[[Request], ModelT]:
    """Dependency factory validating the pipeline's parsed body against `model`."""

    def dependency(request: Request) -> ModelT:
        body = getattr(request.state, "parsed_body", {})
        try:
            return model.model_validate(body)
        except ValidationError as e:
            raise RequestValidationError(e.errors(include_url=False))

    return dependency
