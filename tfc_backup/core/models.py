"""Data model and typed API envelopes for the export pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ResourceKind(str, Enum):
    """Kinds of exported resources."""

    WORKSPACE = "workspace"
    VARIABLE_SET = "variable_set"


class PayloadKind(str, Enum):
    """Kinds of payloads fetched per resource."""

    ATTRIBUTES = "attributes"
    VARIABLES = "variables"


class RunState(str, Enum):
    """Run-level states of an export."""

    START = "start"
    RESOLVING_WORKSPACES = "resolving_workspaces"
    EXPORTING = "exporting"
    DONE = "done"
    ABORTED_EARLY = "aborted_early"


@dataclass(frozen=True)
class Workspace:
    """A Terraform Cloud workspace identity."""

    name: str
    id: str


@dataclass(frozen=True)
class VariableSet:
    """An organization-scoped variable set identity."""

    name: str
    id: str

    @property
    def sanitized_name(self) -> str:
        """Name with spaces replaced by hyphens, used for artifact naming."""
        return self.name.replace(" ", "-")


@dataclass
class PaginatedCollection(Generic[T]):
    """Items gathered across pages together with the server-reported total."""

    items: list[T] = field(default_factory=list)
    expected_total: int = 0
    pages_fetched: int = 0

    @property
    def observed_total(self) -> int:
        return len(self.items)

    @property
    def is_consistent(self) -> bool:
        return self.observed_total == self.expected_total


@dataclass(frozen=True)
class ExportArtifact:
    """One persisted payload of one resource."""

    resource_kind: ResourceKind
    resource_key: str
    payload_kind: PayloadKind
    payload: bytes

    @property
    def filename(self) -> str:
        if self.resource_kind == ResourceKind.VARIABLE_SET:
            return f"varset-{self.resource_key}-{self.payload_kind.value}.json"
        return f"{self.resource_key}-{self.payload_kind.value}.json"


@dataclass(frozen=True)
class ExportError:
    """A failed fetch-and-persist of one payload."""

    resource_kind: ResourceKind
    resource_key: str
    operation: PayloadKind
    cause: str

    @property
    def message(self) -> str:
        noun = "workspace" if self.resource_kind == ResourceKind.WORKSPACE else "varset"
        return f"Failed to dump {noun} {self.operation.value} for {self.resource_key}: {self.cause}"


# Typed envelopes for the JSON:API responses consumed by the pipeline.


class _Envelope(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NamedAttributes(_Envelope):
    name: str


class ResourceRef(_Envelope):
    id: str = Field(min_length=1)


class NamedResource(_Envelope):
    id: str = Field(min_length=1)
    attributes: NamedAttributes


class Pagination(_Envelope):
    total_count: int = Field(alias="total-count", ge=0)


class Meta(_Envelope):
    pagination: Pagination


class SingleResourceResponse(_Envelope):
    """Envelope of ``GET /organizations/{org}/workspaces/{name}``."""

    data: ResourceRef


class CollectionPage(_Envelope):
    """Envelope of one page of a paginated collection."""

    data: list[NamedResource]
    meta: Meta
