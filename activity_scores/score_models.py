#!/usr/bin/env python3

"""
Data Models for Activity Score Reconciliation
=============================================

Roster students, scraped activity results, and the score table built from them.
Roster students and activity results are frozen once created.
"""

from dataclasses import dataclass, field

from activity_scores.errors import DataShapeError

UNIQUE_ID_COLUMN = "Unique User ID"
NAME_COLUMN = "Name"


#============================================
def make_canonical_name(first_name: str, last_name: str) -> str:
	"""Return the roster join key, 'Last, First', exactly as given."""
	return f"{last_name}, {first_name}"


#============================================
@dataclass(frozen=True)
class RosterStudent:
	unique_id: str
	first_name: str
	last_name: str
	pass_threshold_percent: float
	canonical_name: str = field(init=False)

	def __post_init__(self) -> None:
		if not 0 <= self.pass_threshold_percent <= 100:
			raise DataShapeError(
				f"pass threshold for {self.unique_id!r} must be 0-100, "
				f"got {self.pass_threshold_percent}"
			)
		object.__setattr__(
			self, "canonical_name", make_canonical_name(self.first_name, self.last_name)
		)


#============================================
@dataclass(frozen=True)
class ActivityResult:
	scraped_name: str
	activity_label: str
	completed_count: int
	incorrect_count: int
	total_count: int
	block: str = ""

	def __post_init__(self) -> None:
		for attr in ("completed_count", "incorrect_count", "total_count"):
			value = getattr(self, attr)
			if not isinstance(value, int) or isinstance(value, bool) or value < 0:
				raise DataShapeError(
					f"{self.scraped_name} / {self.activity_label}: "
					f"{attr} must be a non-negative int, got {value!r}"
				)
		if self.completed_count > self.total_count:
			raise DataShapeError(
				f"{self.scraped_name} / {self.activity_label}: "
				f"completed {self.completed_count} exceeds total {self.total_count}"
			)

	#============================================
	@classmethod
	def from_collector_dict(cls, scraped_name: str, data: dict) -> "ActivityResult":
		"""
		Build a result from the collector's {completed, incorrect, total, name, block} dict.
		"""
		missing = [key for key in ("completed", "incorrect", "total", "name") if key not in data]
		if missing:
			raise DataShapeError(f"result for {scraped_name!r} is missing {', '.join(missing)}")
		return cls(
			scraped_name=scraped_name,
			activity_label=str(data["name"]),
			completed_count=data["completed"],
			incorrect_count=data["incorrect"],
			total_count=data["total"],
			block=str(data.get("block", "") or ""),
		)


#============================================
@dataclass
class ScoreRow:
	unique_id: str
	canonical_name: str
	scores: dict[str, int] = field(default_factory=dict)

	def as_csv_dict(self) -> dict:
		"""Flatten into a dict keyed by output column titles."""
		row = {UNIQUE_ID_COLUMN: self.unique_id, NAME_COLUMN: self.canonical_name}
		row.update(self.scores)
		return row


#============================================
@dataclass
class ScoreTable:
	titles: list[str] = field(default_factory=list)
	rows: list[ScoreRow] = field(default_factory=list)

	def header(self) -> list[str]:
		return [UNIQUE_ID_COLUMN, NAME_COLUMN] + list(self.titles)


#============================================
@dataclass
class Diagnostics:
	"""Non-fatal findings collected during one run."""
	unmatched_names: list[str] = field(default_factory=list)
	unmatched_students: list[str] = field(default_factory=list)
	incorrect_warnings: list[tuple[str, str, int]] = field(default_factory=list)
	label_collisions: list[str] = field(default_factory=list)
