#!/usr/bin/env python3

from activity_scores.errors import DataShapeError
from activity_scores.score_models import ActivityResult


#============================================
def build_activity_batches(raw_batches: list) -> list[dict[str, ActivityResult]]:
	"""
	Convert collector output into batches of ActivityResult.

	Parameters
	----------
	raw_batches : list
		One dict per activity, most recent first, mapping each scraped
		display name to {completed, incorrect, total, name, block}.

	Returns
	-------
	list
		Same order and keys, with ActivityResult values.
	"""
	batches = []
	for index, raw_batch in enumerate(raw_batches):
		if not isinstance(raw_batch, dict):
			raise DataShapeError(f"activity batch {index} is not a mapping of names to results")
		batch = {}
		for scraped_name, data in raw_batch.items():
			if isinstance(data, ActivityResult):
				batch[scraped_name] = data
				continue
			if not isinstance(data, dict):
				raise DataShapeError(f"result for {scraped_name!r} in batch {index} is not a mapping")
			batch[scraped_name] = ActivityResult.from_collector_dict(str(scraped_name), data)
		batches.append(batch)
	return batches


#============================================
def consolidate_activity_batches(batches: list[dict[str, ActivityResult]]) -> dict[str, list[ActivityResult]]:
	"""
	Group results by scraped name, keeping batch order within each name.
	"""
	results_by_name: dict[str, list[ActivityResult]] = {}
	for batch in batches:
		for result in batch.values():
			results_by_name.setdefault(result.scraped_name, []).append(result)
	return results_by_name


#============================================
def find_label_collisions(batches: list[dict[str, ActivityResult]]) -> list[str]:
	"""
	Return activity labels used by more than one batch, in first-seen order.

	Such batches share one output column.
	"""
	seen_labels = set()
	collisions = []
	for batch in batches:
		batch_labels = []
		for result in batch.values():
			if result.activity_label not in batch_labels:
				batch_labels.append(result.activity_label)
		for label in batch_labels:
			if label in seen_labels and label not in collisions:
				collisions.append(label)
			seen_labels.add(label)
	return collisions
