"""
Request shapes handed to the enrollment service.

``GradeUpdateRequest`` fields default to ``UNSET`` so that a field left out
of the request is distinguishable from one explicitly set to ``None``
(which clears the stored value).
"""

from dataclasses import dataclass, fields
from typing import Any


class _Unset:
    __slots__ = ()

    def __repr__(self):
        return 'UNSET'

    def __bool__(self):
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class EnrollmentRequest:
    student_id: int | None
    course_id: int | None
    academic_year: str | None
    semester: int | None = None


@dataclass(frozen=True)
class GradeUpdateRequest:
    grade: Any = UNSET
    marks: Any = UNSET
    status: Any = UNSET
    remarks: Any = UNSET

    @classmethod
    def from_data(cls, data: dict) -> 'GradeUpdateRequest':
        """Build a request from a mapping, keeping only the keys it contains."""
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in names})

    def changes(self) -> dict:
        """Fields present in the request, in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }
