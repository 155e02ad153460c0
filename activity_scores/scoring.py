#!/usr/bin/env python3

from activity_scores.roster_matching import NameMatch
from activity_scores.score_models import ActivityResult, Diagnostics, RosterStudent, ScoreRow, ScoreTable

INCORRECT_WARNING_COUNT = 4

#============================================
def score_activity(result: ActivityResult, pass_threshold_percent: float) -> int:
	"""
	Convert one activity result into a 0, 1 or 2 point score.

	Parameters
	----------
	result : ActivityResult
		Completed, incorrect and total counts for one student on one activity.
	pass_threshold_percent : float
		Percent of the activity that must be completed for full credit.

	Returns
	-------
	int
		0 when nothing was completed, 1 when the completion ratio is below
		the threshold, otherwise 2. Reaching the threshold exactly is full credit.
	"""
	if result.completed_count == 0:
		return 0
	# completed / total < percent / 100, without float division
	if result.completed_count * 100 < pass_threshold_percent * result.total_count:
		return 1
	return 2


#============================================
def build_score_table(
	students: list[RosterStudent],
	name_match: NameMatch,
	results_by_name: dict[str, list[ActivityResult]],
	diagnostics: Diagnostics,
	incorrect_warning: int = INCORRECT_WARNING_COUNT,
) -> ScoreTable:
	"""
	Build one ScoreRow per roster student, in roster order.

	Activity titles are collected in the order they are first seen and
	high incorrect counts are added to diagnostics.
	"""
	table = ScoreTable()
	for student in students:
		row = ScoreRow(unique_id=student.unique_id, canonical_name=student.canonical_name)
		scraped_name = name_match.get(student.canonical_name)
		results = results_by_name.get(scraped_name, []) if scraped_name is not None else []
		for result in results:
			if result.activity_label not in table.titles:
				table.titles.append(result.activity_label)
			row.scores[result.activity_label] = score_activity(result, student.pass_threshold_percent)
			if result.incorrect_count >= incorrect_warning:
				diagnostics.incorrect_warnings.append(
					(student.canonical_name, result.activity_label, result.incorrect_count)
				)
		table.rows.append(row)
	return table
