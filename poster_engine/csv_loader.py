"""
CSV loading module.
Reads a Letterboxd "watched" export and normalizes each row into a FilmEntry.
"""

# Standard libs for CSV parsing, typing, and paths
import csv  # header-based CSV reader
from typing import Dict, Iterable, List, Optional  # type hints
from pathlib import Path  # filesystem-safe paths

# Import our FilmEntry data class used by the resolver
from .models import FilmEntry  # normalized CSV record

# Console logging
from loguru import logger  # console logger


class FilmCsvLoader:
	"""
	Handles loading and cleaning of Letterboxd CSV exports.
	"""

	# Export headers (lowercased) -> normalized field names
	KEY_ALIASES = {
		'letterboxd uri': 'letterboxdUri',  # only multi-word header in the export
		'letterboxduri': 'letterboxdUri',  # already camel-cased by a previous pass
	}

	def load_entries_from_csv(self, filepath: str) -> List[FilmEntry]:
		"""
		Load films from a CSV file with a header row (Date, Name, Year, Letterboxd URI).
		Returns a list of FilmEntry objects in file order.
		"""
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Film CSV file not found: {filepath}")

		logger.info(f"[CsvLoader] Loading films from {filepath}...")  # log action

		# utf-8-sig strips the byte order mark some spreadsheet tools add
		with open(filepath, 'r', encoding='utf-8-sig', newline='') as f:
			entries = self.parse_rows(csv.DictReader(f))  # parse every row

		logger.info(f"[CsvLoader] Successfully loaded {len(entries)} films.")  # summary
		return entries  # return list

	def parse_rows(self, rows: Iterable[Dict[str, Optional[str]]]) -> List[FilmEntry]:
		"""
		Convert raw key/value rows (from a CSV reader or an uploaded JSON body) into FilmEntry objects.
		Rows without a film name are skipped.
		"""
		entries = []  # accumulator for parsed entries
		for row_num, row in enumerate(rows, 1):  # keep track of row number for diagnostics
			cleaned = self.clean_row(row)  # normalize keys
			name = str(cleaned.get('name') or '').strip()  # film title
			if not name:
				logger.warning(f"[CsvLoader] Skipping row {row_num}: no film name")  # nothing to look up
				continue  # move on
			entries.append(
				FilmEntry(
					name=name,  # title to resolve
					date=self._blank_to_none(cleaned.get('date')),  # logged date
					year=self._blank_to_none(cleaned.get('year')),  # release year text
					letterboxd_uri=self._blank_to_none(cleaned.get('letterboxdUri')),  # optional link
				)
			)
		return entries  # list of entries

	def clean_row(self, row: Dict[str, Optional[str]]) -> Dict[str, Optional[str]]:
		"""
		Lowercase every header and map known multi-word headers to their normalized names.
		Values are kept as-is.
		"""
		cleaned = {}  # normalized mapping
		for key, value in row.items():
			if key is None:  # extra cells beyond the header row
				continue  # ignore
			cleaned_key = key.strip().lower()  # "Name" -> "name"
			cleaned_key = self.KEY_ALIASES.get(cleaned_key, cleaned_key)  # "letterboxd uri" -> "letterboxdUri"
			cleaned[cleaned_key] = value
		return cleaned

	def _blank_to_none(self, value: Optional[str]) -> Optional[str]:
		"""Trim a value and turn empty strings into None."""
		if value is None:  # missing column
			return None
		value = str(value).strip()  # remove surrounding spaces
		return value or None  # empty -> None
