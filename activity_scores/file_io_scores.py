#!/usr/bin/env python3

import csv
import datetime

import yaml
from rich.console import Console

from activity_scores.errors import DataShapeError
from activity_scores.roster_matching import ROSTER_COLUMNS
from activity_scores.score_models import ScoreTable
from activity_scores.timestamp_tools import format_activity_label
from activity_scores.timestamp_tools import is_before_boundary
from activity_scores.timestamp_tools import parse_activity_date

console = Console()

#==============
def detect_delimiter(path: str) -> str:
	"""Detect a delimiter (comma or tab) by inspecting the first non-empty line."""
	with open(path, "r", encoding="utf-8-sig", newline="") as f:
		for line in f:
			line = line.strip("\r\n")
			if not line.strip():
				continue
			if line.count("\t") > line.count(","):
				return "\t"
			return ","
	return ","

#==============
def find_column_ci(header: list[str], target: str) -> int | None:
	"""Find a column name case-insensitively."""
	needle = target.strip().lower()
	for i, name in enumerate(header):
		if name.strip().lower() == needle:
			return i
	return None

#==============
def read_roster_rows(roster_csv: str) -> list[dict]:
	"""
	Read a roster CSV or TSV into a list of row dictionaries.

	Parameters
	----------
	roster_csv : str
		Path to the roster file. A leading byte order mark is ignored.

	Returns
	-------
	list
		One dict per student in file order, keyed by 'Unique User ID',
		'First Name', 'Last Name' and '2 pts'. Header names are matched
		case-insensitively. Cell values are kept exactly as read.
	"""
	console.print(f"reading roster from file {roster_csv}")
	delimiter = detect_delimiter(roster_csv)
	with open(roster_csv, "r", encoding="utf-8-sig", newline="") as f:
		reader = csv.reader(f, delimiter=delimiter)
		header = next(reader, None)
		if header is None:
			raise DataShapeError(f"roster file {roster_csv} is empty")

		column_indices = {}
		for column in ROSTER_COLUMNS:
			index = find_column_ci(header, column)
			if index is None:
				raise DataShapeError(f"roster file {roster_csv} has no '{column}' column")
			column_indices[column] = index

		roster_rows = []
		for row_list in reader:
			if not any(cell.strip() for cell in row_list):
				continue
			roster_row = {}
			for column, index in column_indices.items():
				roster_row[column] = row_list[index] if index < len(row_list) else None
			roster_rows.append(roster_row)

	console.print(f"Read {len(roster_rows)} students from roster file")
	return roster_rows

#==============
def read_activity_batches(activities_yml: str, since_date: datetime.date | None, subject: str = "Math") -> list[dict]:
	"""
	Read collector output saved as YAML into activity batches.

	Parameters
	----------
	activities_yml : str
		YAML list of activities, most recent first. Each activity has
		'results' mapping scraped names to {completed, incorrect, total},
		and either a 'name' label or a 'title' and 'date'. 'block' is optional.
	since_date : datetime.date or None
		Stop at the first activity dated before this day.
	subject : str
		Prefix for labels built from 'title' and 'date'.

	Returns
	-------
	list
		One dict per activity mapping scraped name to
		{completed, incorrect, total, name, block}.
	"""
	if since_date is not None:
		console.print(f"Loading assignments since {since_date.month}/{since_date.day:02d}/{since_date:%y}")
	with open(activities_yml, "r") as f:
		try:
			activities = yaml.safe_load(f)
		except yaml.YAMLError as error:
			raise DataShapeError(f"{activities_yml} is not valid YAML: {error}")
	if activities is None:
		return []
	if not isinstance(activities, list):
		raise DataShapeError(f"{activities_yml} must hold a list of activities")

	batches = []
	for index, activity in enumerate(activities):
		if not isinstance(activity, dict):
			raise DataShapeError(f"activity {index} in {activities_yml} is not a mapping")

		activity_date = None
		if activity.get("date") is not None:
			try:
				activity_date = parse_activity_date(activity["date"])
			except ValueError as error:
				raise DataShapeError(f"activity {index}: {error}")
			# activities are listed newest first, so everything after this is older
			if since_date is not None and is_before_boundary(activity_date, since_date):
				break

		label = activity.get("name")
		if label is None:
			if activity.get("title") is None or activity_date is None:
				raise DataShapeError(f"activity {index} needs either 'name' or both 'title' and 'date'")
			label = format_activity_label(subject, activity["title"], activity_date)
		block = str(activity.get("block", "") or "")

		results = activity.get("results") or {}
		if not isinstance(results, dict):
			raise DataShapeError(f"activity {index} results must map names to counts")
		batch = {}
		for scraped_name, counts in results.items():
			if not isinstance(counts, dict):
				raise DataShapeError(f"activity {index}: counts for {scraped_name!r} must be a mapping")
			entry = dict(counts)
			entry["name"] = str(label)
			entry.setdefault("block", block)
			batch[str(scraped_name)] = entry
		batches.append(batch)

	console.print(f"Read {len(batches)} activities from {activities_yml}")
	return batches

#==============
def write_scores_csv(scores_csv: str, table: ScoreTable) -> None:
	"""
	Write the score table with one column per activity title.

	Activities a student never touched are left blank.
	"""
	console.print(f"writing CSV to file {scores_csv}")
	with open(scores_csv, "w", newline="") as output_file:
		writer = csv.DictWriter(output_file, table.header(), restval="")
		writer.writeheader()
		writer.writerows(row.as_csv_dict() for row in table.rows)
