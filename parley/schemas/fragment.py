"""Fragment and response-state schemas for the structured response stream.

A Fragment is one partial snapshot of the JSON object the model is
generating. Any prefix of the stream may omit any field, so every field
is optional. ResponseState is the running result the accumulator folds
fragments into.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

logger = logging.getLogger(__name__)


class Link(BaseModel):
    """A reference link the model attached to its answer."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Human-readable link title")
    url: str = Field(description="Target URL")


class LinksObj(BaseModel):
    """Side-object carrying reference links for the answer."""

    model_config = ConfigDict(frozen=True)

    links: list[Link] = Field(
        default_factory=list, description="Links relevant to the answer"
    )

    @field_validator("links", mode="before")
    @classmethod
    def _drop_incomplete_links(cls, value: Any) -> Any:
        # A half-streamed list ends with an entry missing label or url
        if not isinstance(value, list):
            return value
        return [
            item for item in value
            if isinstance(item, Link)
            or (
                isinstance(item, dict)
                and isinstance(item.get("label"), str)
                and isinstance(item.get("url"), str)
            )
        ]


class Fragment(BaseModel):
    """One partial update of the model's structured output."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    content: str | None = Field(
        default=None,
        description="REQUIRED response message content",
    )
    links_obj: LinksObj | None = Field(
        default=None,
        alias="linksObj",
        description="Links to relevant information sources",
    )
    needs_help_obj: dict[str, Any] | None = Field(
        default=None,
        alias="needsHelpObj",
        description="Set when the user needs support or further assistance",
    )
    is_prospect_obj: dict[str, Any] | None = Field(
        default=None,
        alias="isProspectObj",
        description="Set when the user asks about access, pricing, plans or costs",
    )
    follow_up_questions: list[str | None] | None = Field(
        default=None,
        alias="followUpQuestions",
        description="Questions the user is likely to ask next, in their words",
    )

    @classmethod
    def from_partial(cls, data: Any) -> Fragment:
        """Build a Fragment from a decoded (possibly partial) JSON value.

        Each field is validated on its own. A field that fails validation
        is dropped, so one malformed side-object never discards the text
        that arrived alongside it. Non-object payloads give an empty
        Fragment.
        """
        if not isinstance(data, dict):
            return cls()

        values: dict[str, Any] = {}
        for name, (key, adapter) in _FIELD_ADAPTERS.items():
            raw = data.get(key)
            if raw is None:
                continue
            try:
                values[name] = adapter.validate_python(raw)
            except ValidationError as exc:
                logger.debug(
                    "Dropping malformed %s in fragment (%d errors)",
                    key, exc.error_count(),
                )
        return cls(**values)

    @classmethod
    def output_schema(cls) -> dict[str, Any]:
        """JSON schema of the response contract, keyed by wire names."""
        return cls.model_json_schema(by_alias=True)


_FIELD_ADAPTERS: dict[str, tuple[str, TypeAdapter]] = {
    "content": ("content", TypeAdapter(str)),
    "links_obj": ("linksObj", TypeAdapter(LinksObj)),
    "needs_help_obj": ("needsHelpObj", TypeAdapter(dict[str, Any])),
    "is_prospect_obj": ("isProspectObj", TypeAdapter(dict[str, Any])),
    "follow_up_questions": ("followUpQuestions", TypeAdapter(list[str | None])),
}


class SideObjects(BaseModel):
    """The side-signals collected from the stream, one slot per kind.

    Slots are independent: the upstream contract says at most one is set,
    but nothing here enforces it.
    """

    model_config = ConfigDict(frozen=True)

    links: LinksObj | None = None
    needs_help: dict[str, Any] | None = None
    is_prospect: dict[str, Any] | None = None


class ResponseState(BaseModel):
    """Accumulated state of one assistant response."""

    model_config = ConfigDict(frozen=True)

    content: str = ""
    side_objects: SideObjects = Field(default_factory=SideObjects)
    follow_up_questions: list[str] = Field(default_factory=list)
