"""FastMCP server exposing every registered IBGE tool over stdio.

Each `ToolSpec` is adapted into a keyword-only coroutine whose signature
mirrors its params model, so FastMCP derives the same JSON schema the
model validates. The pipeline is bound at server creation.

Example:
    >>> mcp = create_server(Pipeline())
    >>> mcp.run()
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Annotated

from fastmcp import FastMCP
from pydantic import Field

from ibge_mcp.foundation.config import get_settings
from ibge_mcp.runtime import Pipeline
from ibge_mcp.tools import TOOLS

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ibge_mcp.tools import ToolSpec


# ═══════════════════════════════════════════════════════════════════════════════
# Tool Adapters
# ═══════════════════════════════════════════════════════════════════════════════


def tool_signature(spec: ToolSpec) -> inspect.Signature:
    """Keyword-only signature built from the params model fields."""
    params = []
    for name, info in spec.params_model.model_fields.items():
        annotation = Annotated[(info.annotation, *info.metadata, Field(description=info.description))]
        default = inspect.Parameter.empty if info.is_required() else info.default
        params.append(inspect.Parameter(name, inspect.Parameter.KEYWORD_ONLY, default=default, annotation=annotation))
    return inspect.Signature(params, return_annotation=str)


def make_handler(spec: ToolSpec, pipeline: Pipeline) -> Callable[..., Awaitable[str]]:
    """Coroutine FastMCP can introspect; arguments are re-validated by `spec.run`."""

    async def handler(**kwargs: object) -> str:
        return await spec.run(pipeline, kwargs)

    sig = tool_signature(spec)
    handler.__name__ = spec.name
    handler.__qualname__ = spec.name
    handler.__doc__ = spec.description
    handler.__signature__ = sig  # type: ignore[attr-defined]
    handler.__annotations__ = {p.name: p.annotation for p in sig.parameters.values()} | {"return": str}
    return handler


# ═══════════════════════════════════════════════════════════════════════════════
# Server
# ═══════════════════════════════════════════════════════════════════════════════


def create_server(pipeline: Pipeline | None = None) -> FastMCP:
    """Build the FastMCP app with every tool in TOOLS registered."""
    pipeline = pipeline or Pipeline()
    settings = pipeline.settings
    mcp = FastMCP(settings.server_name, version=settings.server_version)

    for spec in TOOLS.values():
        mcp.tool(name=spec.name, description=spec.description)(make_handler(spec, pipeline))

    pipeline.logger.debug("Tools registered", {"count": len(TOOLS), "tools": sorted(TOOLS)})
    return mcp


def main() -> None:
    """Console entry point: serve over stdio until the client disconnects."""
    settings = get_settings()
    pipeline = Pipeline(settings)
    mcp = create_server(pipeline)
    pipeline.logger.info(f"{settings.server_name} v{settings.server_version} running on stdio")
    mcp.run()
