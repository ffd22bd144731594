"""
CLI entrypoint for offline ingestion of finding batches from a JSON file, e.g.:

  python -m app.ingest findings.json

The file holds one finding batch object or an array of them (same shape as POST /findings).
Each batch is committed on its own so one bad batch does not discard the others.
"""

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.database import session_scope
from app.core.errors import AlertServiceError
from app.schemas.findings import FindingBatch
from app.services.alert_ingest import ingest_findings
from app.services.alert_repository import AlertRepository

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def load_batches(path: str) -> list[FindingBatch]:
    """Parse and validate the batches in a JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    items = data if isinstance(data, list) else [data]
    return [FindingBatch.model_validate(item) for item in items]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Raise alerts from a file of finding batches.")
    parser.add_argument("path", help="JSON file with one batch object or an array of batches")
    args = parser.parse_args(argv)

    try:
        batches = load_batches(args.path)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error("Cannot read finding batches from %s: %s", args.path, e)
        return 1

    radius = get_settings().SPEC_CONTEXT_RADIUS
    created = 0
    failed = 0
    for batch in batches:
        try:
            with session_scope() as db:
                created += len(ingest_findings(AlertRepository(db), batch, radius=radius))
        except AlertServiceError as e:
            failed += 1
            logger.error("Batch for endpoint %s rejected: %s", batch.api_endpoint_uuid, e.message)
    logger.info("Ingestion completed: batches=%s alerts_created=%s failed=%s", len(batches), created, failed)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
