# transcript.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

import pandas as pd

from db_utils import COLUMN_SEPARATOR
from errors import ValidationError

# Columns requested from `takes NATURAL JOIN course`, in TranscriptRow order.
TRANSCRIPT_COLUMNS = ("title", "course_id", "semester", "year", "grade", "credits")

# Newest year first; within a year Fall, then Summer, then Spring, then unknown terms.
TRANSCRIPT_ORDER = (
    "ORDER BY year DESC, "
    "CASE semester WHEN 'Spring' THEN 1 WHEN 'Summer' THEN 2 WHEN 'Fall' THEN 3 ELSE 0 END DESC"
)

GRADE_POINTS = {
    "A": 4.0, "A+": 4.0, "A-": 4.0,
    "B": 3.0, "B+": 3.0, "B-": 3.0,
    "C": 2.0, "C+": 2.0, "C-": 2.0,
    "D": 1.0, "D+": 1.0, "D-": 1.0,
}


def grade_points(grade) -> float:
    """Quality points per credit hour. F, W and anything unknown count as 0."""
    return GRADE_POINTS.get(grade, 0.0)


@dataclass(frozen=True)
class TranscriptRow:
    title: str
    course_id: str
    semester: str
    year: str
    grade: str
    credits: int

    def __post_init__(self):
        if self.credits < 0:
            raise ValidationError(f"Negative credit hours for {self.course_id}: {self.credits}")

    @classmethod
    def parse(cls, line: str) -> "TranscriptRow":
        """Builds a row from a tuple joined by QueryExecutor.columns."""
        # Titles may contain the separator, the other fields never do.
        parts = line.rsplit(COLUMN_SEPARATOR, len(TRANSCRIPT_COLUMNS) - 1)
        if len(parts) != len(TRANSCRIPT_COLUMNS):
            raise ValidationError(f"Malformed transcript row: {line!r}")
        title, course_id, semester, year, grade, credits = parts
        try:
            credit_hours = float(credits)
        except ValueError as e:
            raise ValidationError(f"Invalid credit hours in transcript row: {line!r}") from e
        # NUMBER(2,0) comes back as "3" or "3.0"; anything fractional is bad data.
        if not credit_hours.is_integer():
            raise ValidationError(f"Fractional credit hours in transcript row: {line!r}")
        return cls(title, course_id, semester, year, grade, int(credit_hours))

    def describe(self) -> str:
        return (
            f"Took {self.title} ({self.course_id}) in {self.semester} of {self.year} "
            f"and received grade of '{self.grade}' | {self.credits} credits"
        )


@dataclass
class Transcript:
    student_name: str
    rows: List[TranscriptRow] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)
    gpa: float = 0.0
    quality_points: float = 0.0
    total_credits: int = 0

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(r.title, r.course_id, r.semester, r.year, r.grade, r.credits) for r in self.rows],
            columns=[c.upper() for c in TRANSCRIPT_COLUMNS],
        )


def compute(rows: Sequence[TranscriptRow], student_name: str) -> Transcript:
    """
    Computes the GPA and the printable transcript. Rows are reported in the
    order given; callers fetch them already sorted with TRANSCRIPT_ORDER.
    """
    quality_points = 0.0
    total_credits = 0
    lines = []
    for row in rows:
        lines.append(row.describe())
        quality_points += grade_points(row.grade) * row.credits
        total_credits += row.credits

    gpa = quality_points / total_credits if total_credits > 0 else 0.0
    header = [f"***Transcript for: {student_name}***", f"GPA: {gpa:.2f}"]
    return Transcript(
        student_name=student_name,
        rows=list(rows),
        lines=header + lines,
        gpa=gpa,
        quality_points=quality_points,
        total_credits=total_credits,
    )
