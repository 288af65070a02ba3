from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union

class OpKind(str, Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"

class FieldState(str, Enum):
    ABSENT = "absent"    # not provided (missing, empty, "_No response_", "(no change)")
    CLEARED = "cleared"  # explicitly "(none)"
    SET = "set"

@dataclass
class FormField:
    raw: str = ""
    value: str = ""
    checked: bool = False

@dataclass(frozen=True)
class FieldInput:
    state: FieldState = FieldState.ABSENT
    value: Optional[str] = None

    @property
    def is_set(self) -> bool:
        return self.state is FieldState.SET

ABSENT = FieldInput()
CLEARED = FieldInput(FieldState.CLEARED)

@dataclass
class MarkerFields:
    title: FieldInput = ABSENT
    description: FieldInput = ABSENT
    link: FieldInput = ABSENT
    category: FieldInput = ABSENT
    icon: FieldInput = ABSENT
    lat: FieldInput = ABSENT
    lng: FieldInput = ABSENT

    def optional(self) -> Dict[str, FieldInput]:
        return {
            "title": self.title,
            "description": self.description,
            "link": self.link,
            "category": self.category,
            "icon": self.icon,
        }

@dataclass
class AddMarker:
    fields: MarkerFields
    marker_id: Optional[str] = None
    issue_number: Optional[int] = None

@dataclass
class UpdateMarker:
    marker_id: str
    fields: MarkerFields = field(default_factory=MarkerFields)
    focus: bool = False

@dataclass
class DeleteMarker:
    marker_id: str
    confirmed: bool = False

Operation = Union[AddMarker, UpdateMarker, DeleteMarker]

@dataclass
class Outcome:
    ok: bool
    message: str

    def to_dict(self) -> Dict[str, object]:
        return {"ok": self.ok, "message": self.message}

    @classmethod
    def success(cls, message: str) -> "Outcome":
        return cls(True, message)

    @classmethod
    def fail(cls, message: str) -> "Outcome":
        return cls(False, message)
