# myroutine/services/photos/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from myroutine.models.exercise import Photo


@dataclass(frozen=True, slots=True)
class PhotoOut:
    public_id: str
    id_exercise: int
    url: str
    created_at: datetime | None

    @classmethod
    def from_model(cls, row: Photo) -> PhotoOut:
        return cls(
            public_id=row.public_id,
            id_exercise=row.exercise_id,
            url=row.url,
            created_at=row.created_at,
        )
