"""Structured error responses for tool failures.

Tools convert pipeline exceptions into a `ToolError` at their boundary and
return the rendered Markdown; the pipeline itself only records and re-raises.
"""

from __future__ import annotations

from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .errors import ErrorKind, HttpStatusError, classify_exception

# Common IBGE API statuses: (message, suggestion)
IBGE_ERROR_CODES: dict[int, tuple[str, str]] = {
    400: ("Parâmetros inválidos", "Verifique se os parâmetros estão no formato correto."),
    404: ("Recurso não encontrado", "Verifique se o código ou identificador existe."),
    500: ("Erro interno do servidor IBGE", "Tente novamente em alguns minutos."),
    502: ("Serviço IBGE temporariamente indisponível", "Tente novamente em alguns minutos."),
    503: ("Serviço IBGE em manutenção", "Tente novamente mais tarde."),
}

_KIND_SUGGESTIONS: dict[ErrorKind, str] = {
    ErrorKind.NETWORK: (
        "Não foi possível conectar à API do IBGE.\n"
        "Verifique sua conexão com a internet e tente novamente."
    ),
    ErrorKind.TIMEOUT: (
        "A requisição demorou demais para responder.\n"
        "Tente novamente ou reduza o escopo da consulta (menos localidades ou períodos)."
    ),
    ErrorKind.PARSE: "A resposta da API não pôde ser interpretada. Tente novamente mais tarde.",
}


class ToolError(BaseModel):
    """Structured error response for a failed tool call.

    Attributes:
        tool_name: Name of the tool that failed
        message: Human-readable error message
        kind: Error classification
        status: HTTP status when the failure came from the upstream API
        params: Parameters used in the call (None values are skipped on render)
        suggestion: Hint for the caller; defaults from status or kind
        related_tools: Other tools that may help
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, validate_default=True)

    tool_name: Annotated[str, Field(min_length=1)]
    message: Annotated[str, Field(min_length=1)]
    kind: ErrorKind = ErrorKind.UNKNOWN
    status: int | None = None
    params: dict[str, object] = Field(default_factory=dict)
    suggestion: str | None = None
    related_tools: tuple[str, ...] = ()

    @computed_field
    @property
    def is_retryable(self) -> bool:
        """Whether the same call might succeed later."""
        if self.kind in (ErrorKind.NETWORK, ErrorKind.TIMEOUT):
            return True
        return self.status is not None and self.status >= 500

    @classmethod
    def from_exception(
        cls,
        tool_name: str,
        exc: BaseException,
        params: dict[str, object] | None = None,
        related_tools: tuple[str, ...] = (),
    ) -> Self:
        """Create from exception with auto-classification."""
        return cls(
            tool_name=tool_name,
            message=str(exc) or type(exc).__name__,
            kind=classify_exception(exc),
            status=exc.status if isinstance(exc, HttpStatusError) else None,
            params=params or {},
            related_tools=related_tools,
        )

    @classmethod
    def not_found(cls, tool_name: str, item: str, search_tool: str | None = None) -> Self:
        return cls(
            tool_name=tool_name,
            message=f"{item} não encontrado",
            suggestion=(
                f"Use {search_tool} para buscar o item correto."
                if search_tool else "Verifique se o identificador está correto."
            ),
        )

    @classmethod
    def empty_result(cls, tool_name: str, suggestion: str | None = None) -> Self:
        return cls(
            tool_name=tool_name,
            message="Nenhum dado encontrado",
            suggestion=suggestion or "Tente ajustar os parâmetros de busca.",
        )

    @classmethod
    def invalid_value(cls, tool_name: str, field: str, value: object, expected: str) -> Self:
        return cls(
            tool_name=tool_name,
            message=f'Valor inválido para "{field}": "{value}"',
            kind=ErrorKind.VALIDATION,
            suggestion=f"Formato esperado: {expected}",
        )

    def render(self) -> str:
        """Format error as Markdown for LLM consumption."""
        known = IBGE_ERROR_CODES.get(self.status) if self.status is not None else None

        parts = [f"## Erro: {self.tool_name}\n\n"]
        if self.status is not None:
            parts.append(f"**Código HTTP:** {self.status}\n")
        parts.append(f"**Mensagem:** {known[0] if known else self.message}\n\n")

        shown = {k: v for k, v in self.params.items() if v is not None}
        if shown:
            parts.append("### Parâmetros utilizados\n\n")
            parts.extend(f"- **{k}:** {v}\n" for k, v in shown.items())
            parts.append("\n")

        suggestion = self.suggestion or (known[1] if known else _KIND_SUGGESTIONS.get(self.kind))
        if suggestion:
            parts.append(f"### Sugestão\n\n{suggestion}\n\n")

        if self.related_tools:
            parts.append("### Ferramentas relacionadas\n\n")
            parts.extend(f"- `{tool}`\n" for tool in self.related_tools)

        return "".join(parts)

    __str__ = render
