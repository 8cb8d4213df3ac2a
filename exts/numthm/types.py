from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EnvironmentSpec:
    key: str
    name: str
    emphasis: str


@dataclass(frozen=True)
class EnvironmentOccurrence:
    key: str
    label: str | None
    title: str | None
    assigned_number: str
    source_path: str


@dataclass(frozen=True)
class LabelEntry:
    label: str
    number: str
    title: str | None
    path: str
    name: str

    @property
    def numbered_name(self) -> str:
        return f"{self.name} {self.number}"


@dataclass(frozen=True)
class ReferenceRequest:
    label: str
    wants_title: bool
    source_path: str


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    kind: str
    message: str
    path: str

    def as_dict(self) -> dict[str, str]:
        return {
            "severity": self.severity,
            "kind": self.kind,
            "message": self.message,
            "path": self.path,
        }
