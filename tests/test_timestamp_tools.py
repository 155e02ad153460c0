#!/usr/bin/env python3

import os
import sys
import datetime

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

import activity_scores.timestamp_tools as timestamp_tools


#============================================
def test_parse_activity_date_formats():
	expected = datetime.date(2021, 1, 20)
	assert timestamp_tools.parse_activity_date("1/20/21") == expected
	assert timestamp_tools.parse_activity_date("01/20/2021") == expected
	assert timestamp_tools.parse_activity_date("2021-01-20") == expected
	assert timestamp_tools.parse_activity_date(expected) == expected
	assert timestamp_tools.parse_activity_date(datetime.datetime(2021, 1, 20, 15, 30)) == expected
	with pytest.raises(ValueError):
		timestamp_tools.parse_activity_date("next tuesday")


#============================================
def test_default_since_date_is_yesterday():
	assert timestamp_tools.default_since_date(datetime.date(2021, 3, 1)) == datetime.date(2021, 2, 28)


#============================================
def test_activity_label_and_boundary():
	due = datetime.date(2021, 11, 3)
	assert timestamp_tools.format_activity_label("Math", "Area", due) == "Math - Area - due 11/03"
	assert timestamp_tools.is_before_boundary(datetime.date(2021, 1, 19), datetime.date(2021, 1, 20))
	assert not timestamp_tools.is_before_boundary(datetime.date(2021, 1, 20), datetime.date(2021, 1, 20))


#============================================
def main() -> None:
	test_parse_activity_date_formats()
	test_default_since_date_is_yesterday()
	test_activity_label_and_boundary()
	print("timestamp tools tests passed")


#============================================
if __name__ == '__main__':
	main()
