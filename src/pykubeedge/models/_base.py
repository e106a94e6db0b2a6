"""Base model for KubeEdge twin documents.

Every document model inherits from :class:`TwinBaseModel`, which
provides:

* ``frozen=True``: documents are built once per publish and never
  mutated afterwards.
* ``populate_by_name=True`` so wire aliases (``temperature``) and
  Python field names (``actual``) are both accepted on input.
* :meth:`TwinBaseModel.to_payload`, which serializes by alias and drops
  every ``None`` member.  The receiving side merges partial twins, so an
  absent member must never appear as ``null``.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, ValidationError

from pykubeedge.exceptions import KubeEdgeSerializationError


class TwinBaseModel(BaseModel):
    """Base for twin and state documents."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation as a plain dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        """Return the wire representation as compact JSON text."""
        try:
            return self.model_dump_json(by_alias=True, exclude_none=True)
        except ValueError as exc:
            # PydanticSerializationError is a ValueError subclass.
            raise KubeEdgeSerializationError(f"Cannot serialize {type(self).__name__}: {exc}") from exc

    def to_payload(self) -> bytes:
        """Return the UTF-8 encoded JSON payload."""
        return self.to_json().encode("utf-8")

    @classmethod
    def from_payload(cls, payload: bytes | str) -> Self:
        """Parse a wire payload back into a model instance."""
        try:
            return cls.model_validate_json(payload)
        except ValidationError as exc:
            raise KubeEdgeSerializationError(f"Cannot parse {cls.__name__}: {exc}") from exc


def serialize_document(document: TwinBaseModel) -> bytes:
    """Serialize *document* into the bytes published on the wire."""
    return document.to_payload()
