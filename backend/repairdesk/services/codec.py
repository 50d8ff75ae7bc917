from __future__ import annotations
"""JSON codec for the persisted repair data record.

``parse_snapshot`` never raises for bad input: it returns a ``SnapshotResult``
holding either the validated ``RepairData`` or a human-readable error.
"""
import json
from dataclasses import dataclass
from typing import Optional
from pydantic import ValidationError
from repairdesk.models.entities import RepairData

COLLECTIONS = ('customers', 'technicians', 'devices', 'tickets')


@dataclass(frozen=True)
class SnapshotResult:
    snapshot: Optional[RepairData] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def describe_validation_error(e: ValidationError) -> str:
    first = e.errors()[0]
    loc = '.'.join(str(p) for p in first.get('loc', ()))
    more = e.error_count() - 1
    suffix = f' (+{more} more)' if more > 0 else ''
    return f"{loc}: {first.get('msg')}{suffix}" if loc else f"{first.get('msg')}{suffix}"


def parse_snapshot(text: Optional[str]) -> SnapshotResult:
    if text is None or not text.strip():
        return SnapshotResult(error='Invalid JSON: empty input')
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        return SnapshotResult(error=f'Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})')
    if not isinstance(raw, dict):
        return SnapshotResult(error='Invalid data: expected a JSON object with customers, technicians, devices and tickets')
    for name in COLLECTIONS:
        if raw.get(name) is not None and not isinstance(raw[name], list):
            return SnapshotResult(error=f'Invalid data: {name} must be a list')
    try:
        snapshot = RepairData.model_validate(raw)
    except ValidationError as e:
        return SnapshotResult(error=f'Invalid data: {describe_validation_error(e)}')
    for name in COLLECTIONS:
        seen = set()
        for item in getattr(snapshot, name):
            if item.id in seen:
                return SnapshotResult(error=f'Invalid data: duplicate id {item.id} in {name}')
            seen.add(item.id)
    return SnapshotResult(snapshot=snapshot)


def dump_snapshot(snapshot: RepairData, indent: Optional[int] = 2) -> str:
    return json.dumps(snapshot.to_record(), indent=indent, ensure_ascii=False)


__all__ = ['SnapshotResult', 'describe_validation_error', 'parse_snapshot', 'dump_snapshot', 'COLLECTIONS']
