"""Findings endpoint: accept one ingestion batch from upstream analyzers and raise alerts."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.deps import get_alert_repository, raise_http_error
from app.core.config import get_settings
from app.core.errors import AlertServiceError
from app.schemas.findings import FindingBatch, IngestResponse
from app.services.alert_ingest import ingest_findings
from app.services.alert_repository import AlertRepository

router = APIRouter()


@router.post("", response_model=IngestResponse, status_code=201)
def post_findings(
    body: FindingBatch,
    repository: Annotated[AlertRepository, Depends(get_alert_repository)],
) -> IngestResponse:
    """
    Turn a batch of findings for one endpoint into alerts.

    Findings that duplicate an unresolved alert (or an earlier finding in the same batch)
    are dropped. Returns the number of alerts created and their ids.
    """
    try:
        alerts = ingest_findings(
            repository, body, radius=get_settings().SPEC_CONTEXT_RADIUS
        )
    except AlertServiceError as e:
        repository.session.rollback()
        raise_http_error(e)
    repository.session.commit()
    return IngestResponse(accepted=len(alerts), ids=[a.uuid for a in alerts])
