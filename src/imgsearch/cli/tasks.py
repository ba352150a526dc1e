"""
Command-line tasks for imgsearch.

Run with invoke, for example:

    invoke --search-root src/imgsearch/cli index-photos --directory ~/Pictures --recursive
    invoke --search-root src/imgsearch/cli search --query "beach photos from 2023 with my cousin"
"""

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from invoke import Context, task

from imgsearch.config import get_default_user_id
from imgsearch.errors import ImgSearchError
from imgsearch.logging_config import configure_structured_logging, get_logger
from imgsearch.models.photo import FaceGroup, PhotoRecord
from imgsearch.services.photo_store import get_photo_store
from imgsearch.services.search import get_search_service
from imgsearch.utils.exif import extract_photo_record, find_image_files

logger = get_logger(__name__)


def _load_environment(env_file: str) -> None:
    if os.path.exists(env_file):
        load_dotenv(dotenv_path=env_file)
        logger.info("environment_loaded", env_file=env_file)
    else:
        logger.debug("environment_file_not_found", env_file=env_file)
    configure_structured_logging()


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


@task
def index_photos(
    c: Context,
    directory: str,
    user_id: str = "",
    env_file: str = ".env",
    recursive: bool = False,
    dry_run: bool = False,
):
    """
    Index images from a local directory, reading capture date and GPS from EXIF.

    Args:
        c (Context): Invoke context.
        directory (str): Path to the directory containing images.
        user_id (str): Owner of the photos. Defaults to IMGSEARCH_USER_ID.
        env_file (str): Path to the environment file. Default is '.env'.
        recursive (bool): Search for images in subdirectories. Default is False.
        dry_run (bool): List the files and what was extracted without saving.
    """
    _load_environment(env_file)
    user_id = user_id or get_default_user_id()

    if not os.path.isdir(directory):
        logger.error("directory_not_found", directory=directory)
        return

    image_files = find_image_files(directory, recursive=recursive)
    if not image_files:
        logger.warning("no_image_files_found", directory=directory, recursive=recursive)
        return

    logger.info("indexing_started", directory=directory, user_id=user_id, files=len(image_files), dry_run=dry_run)

    store = None if dry_run else get_photo_store(user_id)
    indexed = failed = 0

    for path in image_files:
        record = extract_photo_record(path, user_id)

        if dry_run:
            location = f"({record.latitude}, {record.longitude})" if record.has_location else "none"
            print(f"- {path}: taken={record.date_taken}, location={location}")
            continue

        try:
            store.save_photo(record)
            indexed += 1
        except ImgSearchError as e:
            logger.error("photo_index_failed", path=str(path), error=str(e))
            failed += 1

    if dry_run:
        logger.info("dry_run_completed", files=len(image_files))
        return

    logger.info("indexing_finished", indexed=indexed, failed=failed, total=len(image_files))
    print(f"\nIndexing complete. Indexed: {indexed}, Failed: {failed}")


@task
def import_records(c: Context, json_file: str, user_id: str = "", env_file: str = ".env"):
    """
    Import photo records enriched by external analysis (tags, places, faces).

    The file holds {"photos": [...], "faceGroups": [...]}; each photo uses the
    PhotoRecord.to_dict() field names plus an optional "faceGroupIds" list.

    Args:
        c (Context): Invoke context.
        json_file (str): Path to the JSON export.
        user_id (str): Owner of the photos. Defaults to IMGSEARCH_USER_ID.
        env_file (str): Path to the environment file. Default is '.env'.
    """
    _load_environment(env_file)
    user_id = user_id or get_default_user_id()
    store = get_photo_store(user_id)

    payload = json.loads(Path(json_file).read_text(encoding="utf-8"))

    for group in payload.get("faceGroups", []):
        store.save_face_group(FaceGroup(id=group["id"], user_id=user_id, name=group.get("name")))

    photos = payload.get("photos", [])
    for data in photos:
        record = PhotoRecord.from_dict({**data, "userId": user_id})
        store.save_photo(record)
        store.remove_faces(record.id)
        for face_group_id in data.get("faceGroupIds", []):
            store.add_face(record.id, face_group_id)

    logger.info("records_imported", user_id=user_id, photos=len(photos), face_groups=len(payload.get("faceGroups", [])))
    print(f"Imported {len(photos)} photo(s).")


@task
def search(c: Context, query: str, user_id: str = "", page: int = 1, limit: int = 0, env_file: str = ".env"):
    """
    Search photos with a free-text query and print the JSON response.

    Args:
        c (Context): Invoke context.
        query (str): Search phrase, e.g. "sunset at the beach in 2023".
        user_id (str): Owner of the photos. Defaults to IMGSEARCH_USER_ID.
        page (int): 1-based page number.
        limit (int): Results per page. 0 uses SEARCH_PAGE_SIZE.
        env_file (str): Path to the environment file. Default is '.env'.
    """
    _load_environment(env_file)
    service = get_search_service(user_id or get_default_user_id())
    result = service.search(query, page=page, limit=limit or None)
    _print_json(result.to_dict())


@task
def clusters(c: Context, radius: float = 0.0, user_id: str = "", env_file: str = ".env"):
    """
    Print geotagged photos grouped into places.

    Args:
        c (Context): Invoke context.
        radius (float): Cluster radius in kilometers. 0 uses CLUSTER_RADIUS_KM.
        user_id (str): Owner of the photos. Defaults to IMGSEARCH_USER_ID.
        env_file (str): Path to the environment file. Default is '.env'.
    """
    _load_environment(env_file)
    service = get_search_service(user_id or get_default_user_id())
    _print_json(service.get_clusters(radius_km=radius or None))


@task
def timeline(c: Context, year: int = 0, user_id: str = "", env_file: str = ".env"):
    """
    Print the month-by-month timeline of one year.

    Args:
        c (Context): Invoke context.
        year (int): Calendar year. 0 uses the current year.
        user_id (str): Owner of the photos. Defaults to IMGSEARCH_USER_ID.
        env_file (str): Path to the environment file. Default is '.env'.
    """
    _load_environment(env_file)
    service = get_search_service(user_id or get_default_user_id())
    _print_json(service.get_timeline(year=year or None))


@task
def people(c: Context, user_id: str = "", env_file: str = ".env"):
    """
    Print the user's face groups with their face counts and preview photos.

    Args:
        c (Context): Invoke context.
        user_id (str): Owner of the photos. Defaults to IMGSEARCH_USER_ID.
        env_file (str): Path to the environment file. Default is '.env'.
    """
    _load_environment(env_file)
    store = get_photo_store(user_id or get_default_user_id())
    _print_json({"data": [person.to_dict() for person in store.list_face_groups()]})


@task
def rename_person(c: Context, face_group_id: str, name: str, user_id: str = "", env_file: str = ".env"):
    """
    Rename a face group, so that "with my <name>" finds its photos.

    Args:
        c (Context): Invoke context.
        face_group_id (str): ID of the face group.
        name (str): New name. An empty string clears the name.
        user_id (str): Owner of the photos. Defaults to IMGSEARCH_USER_ID.
        env_file (str): Path to the environment file. Default is '.env'.
    """
    _load_environment(env_file)
    store = get_photo_store(user_id or get_default_user_id())

    face_group = store.rename_face_group(face_group_id, name.strip() or None)
    if face_group is None:
        logger.error("face_group_not_found", face_group_id=face_group_id)
        print(f"Face group not found: {face_group_id}")
        return

    _print_json(face_group.to_dict())
