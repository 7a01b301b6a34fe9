"""Result of a like/subscription toggle."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

CREATED = "created"
REVOKED = "revoked"


@dataclass
class ToggleResult:
    state: str
    target_type: str
    target_id: int
    record_id: Optional[int] = None

    @property
    def created(self) -> bool:
        return self.state == CREATED

    @property
    def status_code(self) -> int:
        return 201 if self.created else 200


def from_toggle(entity, created: bool, target_type: str, target_id: int) -> ToggleResult:
    return ToggleResult(
        state=CREATED if created else REVOKED,
        target_type=target_type,
        target_id=target_id,
        record_id=entity.id if entity is not None else None,
    )
