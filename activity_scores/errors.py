#!/usr/bin/env python3

"""
Exceptions raised while reconciling roster names with scraped activity results.
"""

#============================================
class ActivityScoreError(Exception):
	"""Base class for all score reconciliation errors."""


#============================================
class DataShapeError(ActivityScoreError, ValueError):
	"""A roster row, activity result, or config value is malformed."""


#============================================
class MatchConflictError(ActivityScoreError):
	"""A scraped name was claimed by two roster students."""

	def __init__(self, scraped_name: str, canonical_name: str, claimed_by: str) -> None:
		self.scraped_name = scraped_name
		self.canonical_name = canonical_name
		self.claimed_by = claimed_by
		message = (
			f"Duplicate use of {scraped_name!r}: wanted by {canonical_name!r}, "
			f"already matched to {claimed_by!r}"
		)
		super().__init__(message)


#============================================
class NoActivitiesError(ActivityScoreError):
	"""There are no activity batches to score."""
