#!/usr/bin/env python3

# Standard Library
import re
from collections import Counter
from dataclasses import dataclass

# PIP3 modules
import unidecode

from activity_scores.errors import DataShapeError, MatchConflictError
from activity_scores.score_models import RosterStudent


__all__ = [
	"MATCH_TIERS",
	"NameMatch",
	"TierResult",
	"build_roster_students",
	"find_best_match",
	"match_roster_names",
	"run_match_tier",
	"similarity",
	"validate_match_tiers",
]

# strictest first, each tier only sees names left unclaimed by the ones before it
MATCH_TIERS = (0.9, 0.7, 0.5, 0.3, 0.1)

ROSTER_COLUMNS = ("Unique User ID", "First Name", "Last Name", "2 pts")


#============================================
def parse_percent(text: str) -> float | None:
	"""Parse a numeric percent string, returning None when empty or invalid."""
	clean = (text or "").strip().rstrip("%").strip()
	if not clean:
		return None
	try:
		value = float(clean)
	except ValueError:
		return None
	return value


#============================================
def build_roster_students(roster_rows: list[dict]) -> list[RosterStudent]:
	"""
	Turn parsed roster rows into RosterStudent records, keeping roster order.

	Each row needs 'Unique User ID', 'First Name', 'Last Name' and '2 pts'.
	Names are used verbatim for the 'Last, First' canonical name.
	"""
	students: list[RosterStudent] = []
	seen_ids: set[str] = set()
	seen_names: dict[str, str] = {}
	for line_number, row in enumerate(roster_rows, start=1):
		missing = [column for column in ROSTER_COLUMNS if row.get(column) is None]
		if missing:
			raise DataShapeError(f"roster row {line_number} is missing {', '.join(missing)}")

		unique_id = str(row["Unique User ID"]).strip()
		if not unique_id:
			raise DataShapeError(f"roster row {line_number} has an empty Unique User ID")
		if unique_id in seen_ids:
			raise DataShapeError(f"roster row {line_number} repeats Unique User ID {unique_id}")

		threshold = parse_percent(str(row["2 pts"]))
		if threshold is None:
			raise DataShapeError(
				f"roster row {line_number} has a non-numeric '2 pts' value: {row['2 pts']!r}"
			)

		student = RosterStudent(
			unique_id=unique_id,
			first_name=str(row["First Name"]),
			last_name=str(row["Last Name"]),
			pass_threshold_percent=threshold,
		)
		if student.canonical_name in seen_names:
			raise DataShapeError(
				f"roster row {line_number}: {student.canonical_name!r} is also used by "
				f"{seen_names[student.canonical_name]}, names must be unique to match"
			)
		seen_ids.add(unique_id)
		seen_names[student.canonical_name] = unique_id
		students.append(student)
	return students


#============================================
def similarity(a: str, b: str, fold_accents: bool = False) -> float:
	"""
	Return the Dice coefficient of the character bigrams of a and b.

	Whitespace is ignored and the comparison is case-sensitive.
	"""
	if fold_accents:
		a = unidecode.unidecode(a)
		b = unidecode.unidecode(b)
	a = re.sub(r"\s+", "", a)
	b = re.sub(r"\s+", "", b)
	if a == b:
		return 1.0
	if len(a) < 2 or len(b) < 2:
		return 0.0

	a_bigrams = Counter(a[i:i + 2] for i in range(len(a) - 1))
	shared = 0
	for i in range(len(b) - 1):
		bigram = b[i:i + 2]
		if a_bigrams[bigram] > 0:
			a_bigrams[bigram] -= 1
			shared += 1
	return (2.0 * shared) / (len(a) + len(b) - 2)


#============================================
def find_best_match(name: str, candidates: list[str], fold_accents: bool = False) -> tuple[str | None, float]:
	"""
	Return (best candidate, rating); equal ratings go to the alphabetically first candidate.
	"""
	best_target = None
	best_rating = 0.0
	for candidate in candidates:
		rating = similarity(name, candidate, fold_accents)
		if best_target is None or rating > best_rating:
			best_target, best_rating = candidate, rating
		elif rating == best_rating and candidate < best_target:
			best_target = candidate
	return best_target, best_rating


#============================================
def validate_match_tiers(tiers) -> tuple[float, ...]:
	"""Check that tiers are strictly descending thresholds in (0, 1]."""
	try:
		values = tuple(float(t) for t in tiers)
	except (TypeError, ValueError):
		raise DataShapeError(f"match tiers must be a list of numbers, got {tiers!r}")
	if not values:
		raise DataShapeError("match tiers must not be empty")
	for value in values:
		if not 0 < value <= 1:
			raise DataShapeError(f"match tier {value} is outside (0, 1]")
	for higher, lower in zip(values, values[1:]):
		if lower >= higher:
			raise DataShapeError(f"match tiers must strictly descend: {values}")
	return values


#============================================
class NameMatch:
	"""
	One-to-one pairing of roster canonical names with scraped names.

	A scraped name can be assigned once; a second claim raises MatchConflictError.
	"""

	def __init__(self) -> None:
		self._scraped_by_canonical: dict[str, str] = {}
		self._canonical_by_scraped: dict[str, str] = {}
		self._details: dict[str, tuple[float, float]] = {}

	#============================================
	def assign(self, canonical_name: str, scraped_name: str, threshold: float, rating: float) -> None:
		claimed_by = self._canonical_by_scraped.get(scraped_name)
		if claimed_by is not None:
			raise MatchConflictError(scraped_name, canonical_name, claimed_by)
		if canonical_name in self._scraped_by_canonical:
			raise DataShapeError(
				f"{canonical_name!r} is already matched to "
				f"{self._scraped_by_canonical[canonical_name]!r}"
			)
		self._scraped_by_canonical[canonical_name] = scraped_name
		self._canonical_by_scraped[scraped_name] = canonical_name
		self._details[canonical_name] = (threshold, rating)

	#============================================
	def get(self, canonical_name: str) -> str | None:
		return self._scraped_by_canonical.get(canonical_name)

	def claimed_by(self, scraped_name: str) -> str | None:
		return self._canonical_by_scraped.get(scraped_name)

	def is_claimed(self, scraped_name: str) -> bool:
		return scraped_name in self._canonical_by_scraped

	def tier_of(self, canonical_name: str) -> float | None:
		"""Threshold of the tier that accepted this roster name."""
		details = self._details.get(canonical_name)
		return details[0] if details else None

	def rating_of(self, canonical_name: str) -> float | None:
		details = self._details.get(canonical_name)
		return details[1] if details else None

	def items(self):
		return self._scraped_by_canonical.items()

	def as_dict(self) -> dict[str, str]:
		return dict(self._scraped_by_canonical)

	def __contains__(self, canonical_name: str) -> bool:
		return canonical_name in self._scraped_by_canonical

	def __len__(self) -> int:
		return len(self._scraped_by_canonical)


#============================================
@dataclass(frozen=True)
class TierResult:
	threshold: float
	matches: tuple[tuple[str, str, float], ...]
	unmatched_students: tuple[RosterStudent, ...]
	remaining_names: tuple[str, ...]


#============================================
def run_match_tier(
	students: list[RosterStudent],
	remaining_names: list[str],
	threshold: float,
	name_match: NameMatch,
	fold_accents: bool = False,
) -> TierResult:
	"""
	Match students against the pool at one threshold without touching name_match.

	Each accepted name leaves the pool before the next student is tried.
	"""
	pool = list(remaining_names)
	tier_claims: dict[str, str] = {}
	matches = []
	unmatched = []
	for student in students:
		target, rating = find_best_match(student.canonical_name, pool, fold_accents)
		if target is None or rating < threshold:
			unmatched.append(student)
			continue
		claimed_by = tier_claims.get(target) or name_match.claimed_by(target)
		if claimed_by is not None:
			raise MatchConflictError(target, student.canonical_name, claimed_by)
		tier_claims[target] = student.canonical_name
		matches.append((student.canonical_name, target, rating))
		pool.remove(target)
	return TierResult(
		threshold=threshold,
		matches=tuple(matches),
		unmatched_students=tuple(unmatched),
		remaining_names=tuple(pool),
	)


#============================================
def match_roster_names(
	students: list[RosterStudent],
	scraped_names: list[str],
	tiers: tuple[float, ...] = MATCH_TIERS,
	fold_accents: bool = False,
) -> tuple[NameMatch, list[RosterStudent], list[str]]:
	"""
	Pair roster students with scraped names over descending similarity tiers.

	Returns (name_match, unmatched students, unmatched scraped names).
	"""
	tiers = validate_match_tiers(tiers)
	name_match = NameMatch()
	remaining_students = list(students)
	remaining_names = list(scraped_names)
	for threshold in tiers:
		if not remaining_students or not remaining_names:
			break
		tier = run_match_tier(remaining_students, remaining_names, threshold, name_match, fold_accents)
		for canonical_name, scraped_name, rating in tier.matches:
			name_match.assign(canonical_name, scraped_name, threshold, rating)
		remaining_students = list(tier.unmatched_students)
		remaining_names = [name for name in scraped_names if not name_match.is_claimed(name)]
	return name_match, remaining_students, remaining_names
