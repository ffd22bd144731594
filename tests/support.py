"""Shared test helpers: in-memory SQLite database and small model builders."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Alert, ApiEndpoint, Base, OpenApiSpec


def make_engine():
    """In-memory SQLite engine shared across connections, with working SAVEPOINTs."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite issues its own BEGIN lazily, which breaks SAVEPOINT; take over transaction control.
    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    return engine


def make_session_factory():
    engine = make_engine()
    return engine, sessionmaker(bind=engine, autocommit=False, autoflush=False)


def add_spec(
    db: Session,
    name: str = "petstore",
    spec: str = "{}",
    extension: str = "JSON",
    minimized_spec_context: dict | None = None,
) -> OpenApiSpec:
    row = OpenApiSpec(
        name=name,
        spec=spec,
        extension=extension,
        minimized_spec_context=minimized_spec_context or {},
    )
    db.add(row)
    db.flush()
    return row


def add_endpoint(
    db: Session,
    path: str = "/users/{id}/profile",
    host: str = "api.example.com",
    method: str = "GET",
    openapi_spec_name: str | None = None,
) -> ApiEndpoint:
    row = ApiEndpoint(path=path, host=host, method=method, openapi_spec_name=openapi_spec_name)
    db.add(row)
    db.flush()
    return row


def add_alert(
    db: Session,
    endpoint: ApiEndpoint,
    type: str = "PII_DATA_DETECTED",
    description: str = "Sensitive data detected.",
    status: str = "OPEN",
    risk_score: int = 3,
    created_minutes_ago: int = 0,
    resolution_message: str | None = None,
) -> Alert:
    row = Alert(
        type=type,
        risk_score=risk_score,
        status=status,
        description=description,
        context={},
        resolution_message=resolution_message,
        api_endpoint_uuid=endpoint.uuid,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=created_minutes_ago),
    )
    db.add(row)
    db.flush()
    return row
