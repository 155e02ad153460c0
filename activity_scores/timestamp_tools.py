#!/usr/bin/env python3

import datetime

DATE_FORMATS = ("%m/%d/%y", "%m/%d/%Y", "%Y-%m-%d")

#==========================================
def default_since_date(today: datetime.date = None) -> datetime.date:
	"""Return yesterday, the default oldest activity date to include."""
	if today is None:
		today = datetime.date.today()
	return today - datetime.timedelta(days=1)

#==========================================
def parse_activity_date(value) -> datetime.date:
	"""
	Convert a date from the command line or the activities file into a date.

	Parameters
	----------
	value : str, datetime.date or datetime.datetime
		Strings may be 'm/d/yy', 'm/d/yyyy' or 'yyyy-mm-dd'.
		YAML already loads unquoted ISO dates as date objects.

	Returns
	-------
	datetime.date
		Raises ValueError if the string matches none of the formats.
	"""
	if isinstance(value, datetime.datetime):
		return value.date()
	if isinstance(value, datetime.date):
		return value
	text = str(value).strip()
	for date_format in DATE_FORMATS:
		try:
			return datetime.datetime.strptime(text, date_format).date()
		except ValueError:
			continue
	raise ValueError(f"Failed to parse date: {value}")

#==========================================
def format_due_date(due_date: datetime.date) -> str:
	"""Short month/day form used in activity titles, e.g. '1/05'."""
	return f"{due_date.month}/{due_date.day:02d}"

#==========================================
def format_activity_label(subject: str, title: str, due_date: datetime.date) -> str:
	"""Build the gradebook column title for one activity."""
	return f"{subject} - {title} - due {format_due_date(due_date)}"

#==========================================
def is_before_boundary(activity_date: datetime.date, since_date: datetime.date) -> bool:
	"""True when an activity is older than the oldest date to include."""
	return activity_date < since_date

# Example assert command; tailor with actual data
assert format_activity_label("Math", "Slopes", datetime.date(2021, 1, 5)) == "Math - Slopes - due 1/05"
