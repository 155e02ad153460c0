#!/usr/bin/env python3

import os
import sys

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

import activity_scores.normalize as normalize
from activity_scores.errors import NoActivitiesError
from activity_scores.score_models import RosterStudent


#============================================
def quiz(completed: int, total: int, label: str, incorrect: int = 0) -> dict:
	return {"completed": completed, "incorrect": incorrect, "total": total, "name": label, "block": "P3"}


#============================================
def test_single_student_example():
	students = [RosterStudent("s1", "John", "Smith", 80)]
	raw_batches = [{"John Smith": quiz(8, 10, "Quiz1", incorrect=1)}]
	table, diagnostics, name_match = normalize.normalize(students, raw_batches)
	assert name_match.get("Smith, John") == "John Smith"
	assert table.header() == ["Unique User ID", "Name", "Quiz1"]
	assert [row.as_csv_dict() for row in table.rows] == [
		{"Unique User ID": "s1", "Name": "Smith, John", "Quiz1": 2},
	]
	assert diagnostics.incorrect_warnings == []
	assert diagnostics.unmatched_students == []


#============================================
def test_orphaned_activity_columns_are_dropped():
	students = [
		RosterStudent("s1", "John", "Smith", 80),
		RosterStudent("s2", "Q", "Zed", 80),
	]
	raw_batches = [
		{"John Smith": quiz(8, 10, "Quiz1")},
		{"Nobody Known": quiz(10, 10, "Quiz2")},
	]
	table, diagnostics, _ = normalize.normalize(students, raw_batches)
	assert table.titles == ["Quiz1"]
	assert diagnostics.unmatched_names == ["Nobody Known"]
	assert diagnostics.unmatched_students == ["Zed, Q"]
	assert table.rows[1].as_csv_dict() == {"Unique User ID": "s2", "Name": "Zed, Q"}


#============================================
def test_repeated_activity_title_shares_one_column():
	students = [RosterStudent("s1", "John", "Smith", 80)]
	raw_batches = [
		{"John Smith": quiz(10, 10, "Quiz1")},
		{"John Smith": quiz(0, 10, "Quiz1")},
	]
	table, diagnostics, _ = normalize.normalize(students, raw_batches)
	assert table.titles == ["Quiz1"]
	assert diagnostics.label_collisions == ["Quiz1"]
	# the older activity is scored last
	assert table.rows[0].scores == {"Quiz1": 0}


#============================================
def test_no_activities():
	students = [RosterStudent("s1", "John", "Smith", 80)]
	with pytest.raises(NoActivitiesError):
		normalize.normalize(students, [])


#============================================
def test_print_diagnostics(capsys):
	students = [RosterStudent("s1", "John", "Smith", 80)]
	raw_batches = [
		{"John Smith": quiz(3, 10, "Quiz1", incorrect=6)},
		{"Nobody Known": quiz(10, 10, "Quiz2")},
	]
	table, diagnostics, name_match = normalize.normalize(students, raw_batches)
	normalize.print_diagnostics(diagnostics)
	normalize.display_matches(students, name_match)
	output = capsys.readouterr().out
	assert "Unmatched scraped names:" in output
	assert "Nobody Known" in output
	assert "Smith, John / Quiz1: 6 incorrect" in output


#============================================
def main() -> None:
	test_single_student_example()
	test_orphaned_activity_columns_are_dropped()
	test_repeated_activity_title_shares_one_column()
	print("normalize tests passed")


#============================================
if __name__ == '__main__':
	main()
