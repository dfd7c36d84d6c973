from typing import Optional

import attrs


@attrs.frozen
class CheckInMeta:
    """Who admitted the ticket, and where."""

    gate_id: Optional[str] = None
    operator_id: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict[str, Optional[str]]:
        return {'gate_id': self.gate_id, 'operator_id': self.operator_id, 'notes': self.notes}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional['CheckInMeta']:
        if not data:
            return None
        return cls(
            gate_id=data.get('gate_id'),
            operator_id=data.get('operator_id'),
            notes=data.get('notes'),
        )
