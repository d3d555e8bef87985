"""
FastAPI server exposing the poster builder API.
Endpoints:
- GET /health: basic health check
- GET /config: grid geometry the renderer needs (columns, row height, resize bounds)
- GET /posters: list stored posters
- POST /posters: create a poster from normalized Letterboxd rows
- GET /posters/{poster_id}: fetch one poster
- DELETE /posters/{poster_id}: delete a poster
- PATCH /posters/{poster_id}: replace movies and/or layout (after a drag/resize session)
- POST /posters/{poster_id}/movies: append already-resolved movies
- DELETE /posters/{poster_id}/movies/{index}: remove one movie and its tile
- POST /posters/{poster_id}/repack: re-run the auto-packer over the whole poster
- GET /movies/{movie_id}: alternative poster images for a movie

Startup reads grid and TMDB settings from the environment and wires the service.
"""

# Import standard libraries for timing
import time  # measure startup latency
from typing import List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for request/response models
from fastapi import FastAPI, HTTPException, Request, Response  # FastAPI primitives
from fastapi.responses import JSONResponse  # error payloads
from pydantic import BaseModel  # request/response schema definitions

# Import our internal modules for layout and persistence
from poster_engine.config import GridConfig, store_dir  # environment configuration
from poster_engine.csv_loader import FilmCsvLoader  # row normalization
from poster_engine.errors import NotFoundError, ValidationError  # mapped to HTTP errors
from poster_engine.models import MovieRecord, Poster, Tile  # core data classes
from poster_engine.poster_service import PosterService  # poster workflows
from poster_engine.repository import PosterRepository  # JSON document store
from poster_engine.tmdb_client import MovieResolver, TmdbClient  # metadata lookups

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Film Poster Builder API", version="1.0.0")  # web app

# Globals that hold the service instance and measured startup time
SERVICE: Optional[PosterService] = None  # will point to the wired service
STARTUP_TIME_S: float = 0.0  # measures how long startup took


# Pydantic model for one uploaded Letterboxd row (keys already normalized by the client)
class FilmEntryIn(BaseModel):
	name: Optional[str] = None  # film title; rows without one are skipped
	date: Optional[str] = None  # date logged
	year: Optional[str] = None  # release year
	letterboxdUri: Optional[str] = None  # link to Letterboxd


# Pydantic model for the poster creation payload
class CreatePosterIn(BaseModel):
	movies: List[FilmEntryIn]  # rows from the uploaded CSV


# Pydantic model that describes a resolved movie in requests and responses
class MovieModel(BaseModel):
	id: int  # catalog id
	title: str  # display title
	poster_path: Optional[str] = None  # poster image path
	original_title: Optional[str] = None
	overview: Optional[str] = None
	release_date: Optional[str] = None
	popularity: float = 0.0
	vote_average: float = 0.0
	vote_count: int = 0
	original_language: Optional[str] = None
	genre_ids: List[int] = []


# Pydantic model for one layout item, in the grid renderer's field names
class TileModel(BaseModel):
	i: str  # rendering key
	x: int  # column
	y: int  # row
	w: int  # width in cells
	h: int  # height in cells
	minW: int
	maxW: int
	minH: int
	maxH: int


# Pydantic model for the complete poster payload
class PosterOut(BaseModel):
	id: str  # poster id
	movies: List[MovieModel]  # display order
	layout: List[TileModel]  # layout[i] belongs to movies[i]
	entryIds: List[str]  # stable ids per entry


# Pydantic model for PATCH requests
class PatchPosterIn(BaseModel):
	movies: Optional[List[MovieModel]] = None  # full replacement movie list
	layout: Optional[List[TileModel]] = None  # full replacement layout


# Pydantic model for appending resolved movies
class AppendMoviesIn(BaseModel):
	movies: List[MovieModel]


# Pydantic model for the grid geometry handed to the renderer
class GridConfigOut(BaseModel):
	maxCols: int  # columns before wrapping
	rowHeight: int  # pixel height of one grid row
	filmWidth: int  # default tile width
	filmHeight: int  # default tile height
	minW: int
	maxW: int
	minH: int
	maxH: int


# Pydantic model for the movie images response
class MovieImagesOut(BaseModel):
	id: int  # movie id
	images: dict  # {"posters": [...]}


def poster_out(poster: Poster) -> PosterOut:
	"""Convert a Poster into its response schema."""
	return PosterOut(
		id=poster.id,
		movies=[MovieModel(**m.to_dict()) for m in poster.movies],
		layout=[TileModel(**t.to_dict()) for t in poster.tiles],
		entryIds=poster.entry_ids,
	)


def to_movie(m: MovieModel) -> MovieRecord:
	return MovieRecord.from_tmdb(m.model_dump())


def to_tile(t: TileModel) -> Tile:
	return Tile.from_dict(t.model_dump())


def get_service() -> PosterService:
	"""Return the wired service or fail with 503 while startup is pending."""
	if SERVICE is None:  # service must be ready to serve
		logger.warning("[API] Request received but service not initialized")  # guard log
		raise HTTPException(status_code=503, detail="Service not initialized")
	return SERVICE


# Map engine errors onto HTTP statuses; the poster is unchanged in both cases
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
	logger.info(f"[API] {request.method} {request.url.path} rejected: {exc}")
	return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
	logger.info(f"[API] {request.method} {request.url.path} not found: {exc}")
	return JSONResponse(status_code=404, content={"detail": str(exc)})


# FastAPI startup hook to wire the service once
@app.on_event("startup")
async def startup_event():
	"""Read configuration and build the poster service."""
	global SERVICE, STARTUP_TIME_S  # refer to module-level globals
	start = time.time()  # start timer for startup latency

	logger.info("[API] Startup: reading configuration and wiring service...")  # log intent

	config = GridConfig.from_env()  # fails fast on bad grid settings
	client = TmdbClient()  # TMDB_API_URL / TMDB_API_KEY from the environment
	SERVICE = PosterService(
		repository=PosterRepository(store_dir()),  # POSTER_STORE_DIR
		resolver=MovieResolver(client),
		config=config,
		client=client,
	)

	STARTUP_TIME_S = time.time() - start  # elapsed seconds
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s | grid={config.max_cols} cols")  # summary log


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness checks."""
	return {
		"status": "ok",  # constant indicator
		"service_ready": SERVICE is not None,  # True if service wired
		"startup_seconds": round(STARTUP_TIME_S, 2)  # startup latency
	}


@app.get("/config", response_model=GridConfigOut)
def grid_config():
	"""Return the grid geometry so the renderer uses the same columns, row height and bounds."""
	cfg = get_service().config
	return GridConfigOut(
		maxCols=cfg.max_cols,
		rowHeight=cfg.row_height,
		filmWidth=cfg.film_width,
		filmHeight=cfg.film_height,
		minW=cfg.min_film_width,
		maxW=cfg.max_film_width,
		minH=cfg.min_film_height,
		maxH=cfg.max_film_height,
	)


@app.get("/posters", response_model=List[PosterOut])
def list_posters():
	"""Return every stored poster."""
	return [poster_out(p) for p in get_service().list_posters()]


@app.post("/posters", response_model=PosterOut)
def create_poster(body: CreatePosterIn):
	"""Resolve the uploaded films and create a freshly packed poster."""
	rows = [m.model_dump() for m in body.movies]  # plain dicts for the normalizer
	entries = FilmCsvLoader().parse_rows(rows)  # skip rows without a name
	logger.debug(f"[API] /posters received {len(rows)} rows, {len(entries)} usable")  # debug log of input
	poster = get_service().create_poster(entries)  # resolve + pack + save
	return poster_out(poster)


@app.get("/posters/{poster_id}", response_model=PosterOut)
def get_poster(poster_id: str):
	return poster_out(get_service().get_poster(poster_id))


@app.delete("/posters/{poster_id}", status_code=204)
def delete_poster(poster_id: str):
	get_service().delete_poster(poster_id)
	return Response(status_code=204)


@app.patch("/posters/{poster_id}", response_model=PosterOut)
def patch_poster(poster_id: str, body: PatchPosterIn):
	"""Replace movies and/or layout, e.g. after the user finished dragging tiles."""
	movies = [to_movie(m) for m in body.movies] if body.movies is not None else None
	layout = [to_tile(t) for t in body.layout] if body.layout is not None else None
	return poster_out(get_service().patch_poster(poster_id, movies=movies, layout=layout))


@app.post("/posters/{poster_id}/movies", response_model=PosterOut)
def append_movies(poster_id: str, body: AppendMoviesIn):
	return poster_out(get_service().append_movies(poster_id, [to_movie(m) for m in body.movies]))


@app.delete("/posters/{poster_id}/movies/{index}", response_model=PosterOut)
def remove_movie(poster_id: str, index: int):
	return poster_out(get_service().remove_movie(poster_id, index))


@app.post("/posters/{poster_id}/repack", response_model=PosterOut)
def repack_poster(poster_id: str):
	return poster_out(get_service().repack_poster(poster_id))


@app.get("/movies/{movie_id}", response_model=MovieImagesOut)
def get_movie(movie_id: int):
	"""Return alternative poster images for a movie."""
	posters = get_service().get_movie_posters(movie_id)
	return MovieImagesOut(id=movie_id, images={"posters": posters})
