"""
Tests for Letterboxd CSV loading and key normalization.
"""

import pytest

from poster_engine.csv_loader import FilmCsvLoader

SAMPLE_CSV = (
	"\ufeffDate,Name,Year,Letterboxd URI\n"
	"2023-01-02,Alien,1979,https://boxd.it/2b0k\n"
	"2023-01-05,,2001,https://boxd.it/empty\n"
	"2023-01-09,Paris; Texas,1984,\n"
)


def test_load_entries_from_csv(tmp_path):
	path = tmp_path / "watched.csv"
	path.write_text(SAMPLE_CSV, encoding="utf-8")

	entries = FilmCsvLoader().load_entries_from_csv(str(path))
	assert [e.name for e in entries] == ["Alien", "Paris; Texas"]
	assert entries[0].date == "2023-01-02"
	assert entries[0].year_int == 1979
	assert entries[0].letterboxd_uri == "https://boxd.it/2b0k"
	assert entries[1].letterboxd_uri is None


def test_missing_file(tmp_path):
	with pytest.raises(FileNotFoundError):
		FilmCsvLoader().load_entries_from_csv(str(tmp_path / "missing.csv"))


def test_clean_row_normalizes_keys():
	cleaned = FilmCsvLoader().clean_row({"Date": "d", "Name": "n", "Letterboxd URI": "u", None: ["extra"]})
	assert cleaned == {"date": "d", "name": "n", "letterboxdUri": "u"}


def test_parse_rows_accepts_already_normalized_rows():
	rows = [{"name": "Heat", "year": 1995, "letterboxdUri": "https://boxd.it/heat", "date": None}]
	entry = FilmCsvLoader().parse_rows(rows)[0]
	assert entry.name == "Heat"
	assert entry.year == "1995"
	assert entry.letterboxd_uri == "https://boxd.it/heat"
	assert entry.date is None
