#!/usr/bin/env python3

#length, then alphabetical ordering of import statements
import os
import sys
import yaml
import argparse
from types import MappingProxyType

from rich.console import Console
from rich.style import Style
from rich.table import Table

import activity_scores.file_io_scores as file_io_scores
import activity_scores.normalize as normalize
import activity_scores.roster_matching as roster_matching
import activity_scores.timestamp_tools as timestamp_tools
from activity_scores.errors import DataShapeError, MatchConflictError, NoActivitiesError

console = Console()
warning_color = Style(color="rgb(255, 187, 51)" )  # RGB for bright orange
data_color = Style(color="rgb(187, 51, 255)" )  # RGB for purple

DEFAULT_CONFIG = {
	"roster file": "Roster.csv",
	"activities file": "activities.yml",
	"scores file": "Scores.csv",
	"subject": "Math",
	"match tiers": list(roster_matching.MATCH_TIERS),
	"incorrect warning": 4,
	"fold accents": False,
}

#============================================
def parse_args(argv: list = None) -> argparse.Namespace:
	"""Parse command-line arguments."""
	parser = argparse.ArgumentParser(
		description=(
			"Match scraped activity results to a class roster and write "
			"a 0/1/2 score for every student and activity."
		)
	)
	parser.add_argument("since_date", nargs="?", default=None,
		help="Oldest activity date to include, e.g. 1/20/21 (default: yesterday)")
	parser.add_argument("-c", "--config", dest="config_yaml", default=None,
		help="YAML config file")
	parser.add_argument("-r", "--roster", dest="roster_csv", default=None,
		help="Roster CSV with Unique User ID, First Name, Last Name, 2 pts")
	parser.add_argument("-a", "--activities", dest="activities_yml", default=None,
		help="Collected activity results YAML, most recent activity first")
	parser.add_argument("-o", "--output", dest="scores_csv", default=None,
		help="Output scores CSV")
	parser.add_argument("-n", "--dry-run", dest="dry_run", action="store_true",
		help="Do not write the scores file, only print a summary")
	parser.add_argument("-v", "--verbose", dest="verbose", action="store_true",
		help="Show the roster to scraped name matches")
	parser.set_defaults(dry_run=False, verbose=False)
	args = parser.parse_args(argv)
	return args

#============================================
def load_yaml_config(config_yaml: str | None) -> MappingProxyType:
	"""
	Load the YAML config over the defaults and freeze it.

	Args:
		config_yaml (str): Path to the YAML file, or None for defaults only.

	Returns:
		MappingProxyType: Read-only config.
	"""
	config = dict(DEFAULT_CONFIG)
	if config_yaml is not None:
		if not os.path.isfile(config_yaml):
			raise DataShapeError(f"file not found: {config_yaml}")
		with open(config_yaml, "r") as f:
			try:
				file_config = yaml.safe_load(f)
			except yaml.YAMLError as error:
				raise DataShapeError(f"config file {config_yaml} is not valid YAML: {error}")
		if file_config is not None:
			if not isinstance(file_config, dict):
				raise DataShapeError(f"config file {config_yaml} must hold a mapping")
			unknown = sorted(set(file_config) - set(DEFAULT_CONFIG))
			if unknown:
				raise DataShapeError(f"unknown config keys in {config_yaml}: {', '.join(unknown)}")
			config.update(file_config)

	config["match tiers"] = roster_matching.validate_match_tiers(config["match tiers"])
	incorrect_warning = config["incorrect warning"]
	if not isinstance(incorrect_warning, int) or isinstance(incorrect_warning, bool) or incorrect_warning < 1:
		raise DataShapeError(f"incorrect warning must be a positive int, got {config['incorrect warning']!r}")
	config["fold accents"] = bool(config["fold accents"])
	return MappingProxyType(config)

#============================================
def prepare_params(args: argparse.Namespace) -> dict:
	"""Combine command line options with the config into file paths and settings."""
	config = load_yaml_config(args.config_yaml)

	since_date = timestamp_tools.default_since_date()
	if args.since_date is not None:
		try:
			since_date = timestamp_tools.parse_activity_date(args.since_date)
		except ValueError:
			console.print(f"Failed to parse date: {args.since_date}", style=warning_color)

	params = {
		"config": config,
		"since_date": since_date,
		"roster_csv": args.roster_csv or config["roster file"],
		"activities_yml": args.activities_yml or config["activities file"],
		"scores_csv": args.scores_csv or config["scores file"],
	}
	for key in ("roster_csv", "activities_yml"):
		if not os.path.isfile(params[key]):
			raise DataShapeError(f"file not found: {params[key]}")
	return params

#============================================
def display_info(params: dict) -> None:
	"""Display the files and settings for this run in a table."""
	table = Table(show_header=True, header_style="bold magenta")
	table.add_column("Name", style="dim", width=20)
	table.add_column("Value", justify="left")

	table.add_row("Roster CSV", params["roster_csv"])
	table.add_row("Activities YAML", params["activities_yml"])
	table.add_row("Scores CSV", params["scores_csv"])
	table.add_row("Since Date", params["since_date"].isoformat())
	table.add_row("Match Tiers", ", ".join(f"{t:.1f}" for t in params["config"]["match tiers"]))
	console.print(table)

#============================================
def run(params: dict, dry_run: bool = False, verbose: bool = False) -> bool:
	"""
	Read inputs, score them and write the scores file.

	Returns False when there were no activities and nothing was written.
	"""
	config = params["config"]
	roster_rows = file_io_scores.read_roster_rows(params["roster_csv"])
	students = roster_matching.build_roster_students(roster_rows)
	raw_batches = file_io_scores.read_activity_batches(
		params["activities_yml"], params["since_date"], subject=config["subject"],
	)

	try:
		table, diagnostics, name_match = normalize.normalize(
			students,
			raw_batches,
			tiers=config["match tiers"],
			incorrect_warning=config["incorrect warning"],
			fold_accents=config["fold accents"],
		)
	except NoActivitiesError:
		console.print("No assignments!", style=warning_color)
		return False

	if verbose:
		normalize.display_matches(students, name_match)
	normalize.print_diagnostics(diagnostics)
	console.print(
		f"\nMatched {len(name_match)} of {len(students)} students "
		f"across {len(table.titles)} activities", style=data_color,
	)

	if dry_run:
		return True
	file_io_scores.write_scores_csv(params["scores_csv"], table)
	console.print(f"\nScores written to: {params['scores_csv']}")
	return True

#============================================
def main(argv: list = None) -> None:
	args = parse_args(argv)
	try:
		params = prepare_params(args)
		display_info(params)
		run(params, dry_run=args.dry_run, verbose=args.verbose)
	except MatchConflictError as error:
		console.print(f"{error} ... this is really bad!!!", style="red")
		sys.exit(2)
	except DataShapeError as error:
		console.print(f"ERROR: {error}", style="red")
		sys.exit(1)

#============================================
if __name__ == '__main__':
	main()
