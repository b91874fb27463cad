#!/usr/bin/env python3
"""
Import the course catalog into MongoDB

Reads course rows from a YAML, JSON or CSV file and stores them in the
Courses collection. The catalog is read-only for the API; this script is
the only writer.

Usage:
    python scripts/import_courses.py data/courses.csv [--replace]
"""

import argparse
import csv
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.core.config import get_config
from src.core.document_store import COURSES
from src.core.mongo_manager import close_mongo_manager, get_mongo_manager
from src.models.mongo_models import CourseDocument
from src.utils.logger import get_logger, setup_logger_from_config

logger = get_logger(__name__)


def load_rows(path: Path) -> List[Dict[str, Any]]:
    """
    Load raw course rows from file (YAML, JSON, or CSV)

    Args:
        path: Path to the catalog file

    Returns:
        List of row dictionaries
    """
    suffix = path.suffix.lower()

    if suffix in ['.yaml', '.yml']:
        with open(path, 'r', encoding='utf-8') as f:
            rows = yaml.safe_load(f) or []
    elif suffix == '.json':
        with open(path, 'r', encoding='utf-8') as f:
            rows = json.load(f)
    elif suffix == '.csv':
        with open(path, 'r', encoding='utf-8', newline='') as f:
            # Convert empty strings to None
            rows = [{k: (v if v else None) for k, v in row.items()} for row in csv.DictReader(f)]
    else:
        raise ValueError(f"Unsupported catalog format: {suffix}")

    if not isinstance(rows, list):
        raise ValueError(f"Expected a list of courses in {path}")

    return rows


def to_course_document(row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Validate one row; course codes are stored uppercased. None if invalid."""
    try:
        course = CourseDocument(**row)
    except ValidationError as e:
        logger.warning(f"⚠️  Skipping course row {row.get('courseCode')!r}: {e.error_count()} invalid field(s)")
        return None

    course.course_code = course.course_code.upper()
    return course.to_document()


def import_courses(path: Path, replace: bool = False) -> int:
    """
    Import courses from a file into the Courses collection

    Args:
        path: Catalog file
        replace: Delete existing courses first

    Returns:
        Number of inserted courses
    """
    documents = [doc for doc in (to_course_document(row) for row in load_rows(path)) if doc]
    logger.info(f"📚 Loaded {len(documents)} valid courses from {path.name}")

    config = get_config()
    mongo_manager = get_mongo_manager(config.mongodb_config)

    try:
        collection = mongo_manager.get_collection(COURSES)

        if replace:
            deleted = collection.delete_many({}).deleted_count
            logger.info(f"🗑️  Removed {deleted} existing courses")

        if not documents:
            return 0

        result = collection.insert_many(documents)
        logger.info(f"✅ Inserted {len(result.inserted_ids)} courses")
        return len(result.inserted_ids)
    finally:
        close_mongo_manager()


def main():
    parser = argparse.ArgumentParser(description="Import the course catalog into MongoDB")
    parser.add_argument("file", type=Path, help="Catalog file (.yaml, .yml, .json or .csv)")
    parser.add_argument("--replace", action="store_true", help="Delete existing courses first")
    args = parser.parse_args()

    setup_logger_from_config(get_config())

    if not args.file.exists():
        logger.error(f"❌ File not found: {args.file}")
        sys.exit(1)

    import_courses(args.file, replace=args.replace)


if __name__ == "__main__":
    main()
