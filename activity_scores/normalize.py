#!/usr/bin/env python3

from rich.console import Console
from rich.style import Style
from rich.table import Table

from activity_scores.consolidate import build_activity_batches
from activity_scores.consolidate import consolidate_activity_batches
from activity_scores.consolidate import find_label_collisions
from activity_scores.errors import NoActivitiesError
from activity_scores.roster_matching import MATCH_TIERS, NameMatch, match_roster_names
from activity_scores.score_models import Diagnostics, RosterStudent, ScoreTable
from activity_scores.scoring import INCORRECT_WARNING_COUNT, build_score_table

console = Console()
warning_color = Style(color="rgb(255, 187, 51)" )  # RGB for bright orange

#============================================
def normalize(
	students: list[RosterStudent],
	raw_batches: list,
	tiers: tuple[float, ...] = MATCH_TIERS,
	incorrect_warning: int = INCORRECT_WARNING_COUNT,
	fold_accents: bool = False,
) -> tuple[ScoreTable, Diagnostics, NameMatch]:
	"""
	Run consolidation, matching and scoring over one set of inputs.

	Parameters
	----------
	students : list
		Roster students in roster order.
	raw_batches : list
		Collector output, one mapping per activity, most recent first.

	Returns
	-------
	tuple
		(score table, diagnostics, name match). Raises NoActivitiesError when
		there is nothing to score and MatchConflictError when a scraped name
		would be used twice.
	"""
	if not raw_batches:
		raise NoActivitiesError("No assignments!")

	batches = build_activity_batches(raw_batches)
	diagnostics = Diagnostics()
	diagnostics.label_collisions.extend(find_label_collisions(batches))
	results_by_name = consolidate_activity_batches(batches)

	name_match, unmatched_students, unmatched_names = match_roster_names(
		students, list(results_by_name.keys()), tiers=tiers, fold_accents=fold_accents,
	)
	diagnostics.unmatched_students.extend(s.canonical_name for s in unmatched_students)
	diagnostics.unmatched_names.extend(unmatched_names)

	table = build_score_table(
		students, name_match, results_by_name, diagnostics, incorrect_warning=incorrect_warning,
	)
	return table, diagnostics, name_match


#============================================
def print_diagnostics(diagnostics: Diagnostics) -> None:
	"""Print the non-fatal findings of a run."""
	if diagnostics.unmatched_names:
		console.print("Unmatched scraped names:", style=warning_color)
		for name in diagnostics.unmatched_names:
			console.print(f"  {name}")
	if diagnostics.unmatched_students:
		console.print("Roster students without activity results:", style=warning_color)
		for name in diagnostics.unmatched_students:
			console.print(f"  {name}")
	for label in diagnostics.label_collisions:
		console.print(f"Activity title used more than once, merged into one column: {label}", style=warning_color)
	for name, label, incorrect in diagnostics.incorrect_warnings:
		console.print(f"{name} / {label}: {incorrect} incorrect")


#============================================
def display_matches(students: list[RosterStudent], name_match: NameMatch) -> None:
	"""Show each roster name next to the scraped name it was paired with."""
	table = Table(show_header=True, header_style="bold magenta")
	table.add_column("Roster Name", style="dim", width=30)
	table.add_column("Scraped Name", justify="left")
	table.add_column("Tier", justify="right")
	table.add_column("Rating", justify="right")

	for student in students:
		scraped_name = name_match.get(student.canonical_name)
		if scraped_name is None:
			table.add_row(student.canonical_name, "", "", "")
			continue
		table.add_row(
			student.canonical_name,
			scraped_name,
			f"{name_match.tier_of(student.canonical_name):.1f}",
			f"{name_match.rating_of(student.canonical_name):.3f}",
		)
	console.print(table)
