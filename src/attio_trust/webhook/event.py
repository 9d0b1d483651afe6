#!/usr/bin/env python3
"""
Attio Trust - Webhook Event Module

Read-only view over a verified webhook payload. The ``type`` string
(``"<category>.<action>"``, e.g. ``record.created``) is parsed once into
EventCategory and EventAction values that the classifiers match on.
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")


class EventCategory(str, Enum):
    RECORD = "record"
    LIST_ENTRY = "list_entry"
    NOTE = "note"
    TASK = "task"
    COMMENT = "comment"
    OBJECT = "object"
    LIST = "list"
    ATTRIBUTE = "attribute"
    WORKSPACE_MEMBER = "workspace_member"
    UNKNOWN = "unknown"


class EventAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class EventType:
    """Parsed form of an event ``type`` string."""

    raw: Optional[str]
    category: EventCategory
    action: EventAction

    @classmethod
    def parse(cls, raw: Optional[str]) -> "EventType":
        if not raw:
            return cls(raw, EventCategory.UNKNOWN, EventAction.UNKNOWN)

        category_name = str(raw).partition(".")[0]
        action_name = str(raw).rpartition(".")[2]
        try:
            category = EventCategory(category_name)
        except ValueError:
            category = EventCategory.UNKNOWN
        try:
            action = EventAction(action_name)
        except ValueError:
            action = EventAction.UNKNOWN
        return cls(raw, category, action)


def _parse_timestamp(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        # Nanosecond timestamps: datetime keeps microseconds only
        text = _EXTRA_FRACTION.sub(r"\1", str(value).strip())
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class WebhookEvent:
    """A verified webhook payload."""

    def __init__(self, payload: Union[str, bytes, Mapping[str, Any]]):
        if isinstance(payload, (str, bytes)):
            payload = json.loads(payload)
        if not isinstance(payload, Mapping):
            raise TypeError(f"Webhook payload must be a JSON object, got {type(payload).__name__}")

        self._raw = MappingProxyType(dict(payload))
        self.id = self._raw.get("id")
        self.type: Optional[str] = self._raw.get("type")
        self.event_type = EventType.parse(self.type)
        self.occurred_at = _parse_timestamp(self._raw.get("occurred_at"))
        data = self._raw.get("data")
        self.data: Mapping[str, Any] = MappingProxyType(dict(data)) if isinstance(data, Mapping) else MappingProxyType({})

    @property
    def raw_data(self) -> Mapping[str, Any]:
        return self._raw

    @property
    def category(self) -> EventCategory:
        return self.event_type.category

    @property
    def action(self) -> EventAction:
        return self.event_type.action

    @property
    def object_type(self) -> Optional[str]:
        return self.data.get("object")

    @property
    def record(self) -> Optional[Any]:
        return self.data.get("record")

    @property
    def record_id(self) -> Optional[str]:
        """Record id, from either ``{"id": "..."}`` or ``{"id": {"record_id": "..."}}``."""
        record = self.record
        if record is None:
            return None
        identifier = record.get("id") if isinstance(record, Mapping) else record
        if isinstance(identifier, Mapping):
            identifier = identifier.get("record_id")
        return identifier

    @property
    def record_data(self) -> Mapping[str, Any]:
        record = self.record
        return record if isinstance(record, Mapping) else {}

    @property
    def changes(self) -> Optional[Any]:
        """Changed fields; only update events carry them."""
        if not self.is_updated_event():
            return None
        return self.data.get("changes")

    def is_record_event(self) -> bool:
        return self.category is EventCategory.RECORD

    def is_list_entry_event(self) -> bool:
        return self.category is EventCategory.LIST_ENTRY

    def is_note_event(self) -> bool:
        return self.category is EventCategory.NOTE

    def is_task_event(self) -> bool:
        return self.category is EventCategory.TASK

    def is_created_event(self) -> bool:
        return self.action is EventAction.CREATED

    def is_updated_event(self) -> bool:
        return self.action is EventAction.UPDATED

    def is_deleted_event(self) -> bool:
        return self.action is EventAction.DELETED

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "type": self.type,
            "occurred_at": self.occurred_at.isoformat() if self.occurred_at else None,
            "object_type": self.object_type,
            "record_id": self.record_id,
            "record_data": dict(self.record_data),
            "changes": self.changes,
            "data": dict(self.data)
        }
        return {key: value for key, value in data.items() if value is not None}

    def to_json(self) -> str:
        return json.dumps(dict(self._raw))

    def __repr__(self) -> str:
        return f"<WebhookEvent id={self.id} type={self.type}>"
