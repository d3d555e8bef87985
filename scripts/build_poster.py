"""
Build a poster from a Letterboxd CSV export without running the API.

This script:
1) Loads films from the CSV export
2) Resolves each title against TMDB (TMDB_API_KEY must be set)
3) Packs the matched movies onto the grid
4) Saves the poster document to the store directory

Usage:
    python -m scripts.build_poster --csv watched.csv [--store data/posters]
"""

import argparse  # command line options
import time  # measure step timings

from loguru import logger  # console logging

from poster_engine.config import GridConfig, store_dir  # environment configuration
from poster_engine.csv_loader import FilmCsvLoader  # CSV ingestion
from poster_engine.poster_service import PosterService  # create workflow
from poster_engine.repository import PosterRepository  # JSON document store
from poster_engine.tmdb_client import MovieResolver, TmdbClient  # title lookups


def parse_args(argv=None):
	parser = argparse.ArgumentParser(description="Build a film poster from a Letterboxd CSV export")
	parser.add_argument('--csv', required=True, help="path to the Letterboxd watched.csv export")
	parser.add_argument('--store', default=None, help="poster store directory (default: $POSTER_STORE_DIR or data/posters)")
	return parser.parse_args(argv)


def main(argv=None):
	args = parse_args(argv)

	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Build Film Poster")
	logger.info("=" * 60)

	# 1) Load data
	logger.info("[1/3] Loading films...")
	entries = FilmCsvLoader().load_entries_from_csv(args.csv)  # read export
	logger.info(f"[OK] Loaded {len(entries)} films")  # confirm count

	# 2) Resolve + pack + save
	logger.info("[2/3] Resolving titles and packing poster...")
	t0 = time.time()  # start timer
	service = PosterService(
		repository=PosterRepository(args.store or store_dir()),
		resolver=MovieResolver(TmdbClient()),
		config=GridConfig.from_env(),
	)
	poster = service.create_poster(entries)
	logger.info(f"[OK] Poster built in {time.time() - t0:.2f}s with {len(poster)} movies")  # report

	# 3) Report
	logger.info(f"[3/3] Saved poster id: {poster.id}")
	logger.info("=" * 60)
	print(poster.id)  # machine-readable output
	return poster


if __name__ == '__main__':
	main()  # invoke builder
