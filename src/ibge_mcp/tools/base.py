"""Tool registration and the error boundary every tool call passes through.

Tools are plain async handlers `(pipeline, params) -> str` registered with
`@ibge_tool`. `ToolSpec.run` validates arguments, wraps the handler in the
pipeline's metrics instrumentation, and turns any failure into a rendered
`ToolError` so the MCP client always receives Markdown.

Example:
    >>> class EchoParams(BaseModel):
    ...     text: str
    >>>
    >>> @ibge_tool("ibge_echo", "Repete o texto informado.", EchoParams)
    ... async def echo(pipeline: Pipeline, params: EchoParams) -> str:
    ...     return params.text
    >>>
    >>> await TOOLS["ibge_echo"].run(pipeline, {"text": "olá"})
    'olá'
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from ibge_mcp.foundation.errors import ErrorKind, ToolError

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline

P = TypeVar("P", bound=BaseModel)

Handler = Callable[["Pipeline", P], Awaitable[str]]


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "entrada"
        problems.append(f"{loc}: {err['msg']}")
    return "Parâmetros inválidos - " + "; ".join(problems)


@dataclass(frozen=True, slots=True)
class ToolSpec(Generic[P]):
    """A registered tool.

    Attributes:
        name: MCP tool name
        description: Text shown to the client for tool selection
        params_model: Pydantic model validating the call arguments
        handler: Coroutine doing the work
        api: Upstream API label used in metrics
        related_tools: Suggested alternatives shown on failure
    """

    name: str
    description: str
    params_model: type[P]
    handler: Handler[P]
    api: str | None = None
    related_tools: tuple[str, ...] = ()

    async def run(self, pipeline: Pipeline, arguments: Mapping[str, object] | P | None = None) -> str:
        """Validate, execute under metrics, and render failures. Never raises for tool errors."""
        try:
            params = (
                arguments if isinstance(arguments, self.params_model)
                else self.params_model.model_validate(dict(arguments or {}))
            )
        except ValidationError as e:
            return ToolError(
                tool_name=self.name, message=_format_validation_error(e), kind=ErrorKind.VALIDATION,
            ).render()

        try:
            return await pipeline.instrument(self.name, self.api, lambda: self.handler(pipeline, params))
        except Exception as e:
            pipeline.logger.warn("Tool failed", {"tool": self.name, "error": str(e)})
            return ToolError.from_exception(
                self.name, e, params=params.model_dump(), related_tools=self.related_tools,
            ).render()


TOOLS: dict[str, ToolSpec[BaseModel]] = {}


def ibge_tool(
    name: str,
    description: str,
    params_model: type[P],
    *,
    api: str | None = None,
    related_tools: tuple[str, ...] = (),
) -> Callable[[Handler[P]], Handler[P]]:
    """Register an async handler in TOOLS under `name`."""

    def decorator(handler: Handler[P]) -> Handler[P]:
        if name in TOOLS:
            raise ValueError(f"Tool '{name}' already registered")
        TOOLS[name] = ToolSpec(name, description.strip(), params_model, handler, api, related_tools)  # type: ignore[assignment]
        return handler

    return decorator
