"""Tests for app.services.alert_query against an in-memory SQLite database."""

import unittest

from app.schemas.alerts import GetAlertParams
from app.services.alert_query import build_alert_query, get_alert, get_alerts, get_top_alerts
from app.services.alert_repository import AlertRepository
from tests.support import add_alert, add_endpoint, add_spec, make_session_factory


class AlertQueryTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine, factory = make_session_factory()
        self.db = factory()
        self.repository = AlertRepository(self.db)
        spec = add_spec(
            self.db,
            minimized_spec_context={"paths": {"lineNumber": 3, "minimizedSpec": "paths:"}},
        )
        self.ep_a = add_endpoint(self.db, path="/a", host="a.example.com", openapi_spec_name=spec.name)
        self.ep_b = add_endpoint(self.db, path="/b", host="b.example.com")
        self.db.commit()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()


class TestOrdering(AlertQueryTestCase):
    def test_equal_risk_sorted_by_status_then_newest(self) -> None:
        resolved = add_alert(self.db, self.ep_a, description="r", status="RESOLVED", created_minutes_ago=3)
        open_old = add_alert(self.db, self.ep_a, description="o1", status="OPEN", created_minutes_ago=5)
        open_new = add_alert(self.db, self.ep_a, description="o2", status="OPEN", created_minutes_ago=1)
        ignored = add_alert(self.db, self.ep_a, description="i", status="IGNORED", created_minutes_ago=0)
        self.db.commit()
        expected = [resolved.uuid, open_new.uuid, open_old.uuid, ignored.uuid]
        for order in (None, "ASC", "DESC"):
            with self.subTest(order=order):
                alerts, total = get_alerts(self.repository, GetAlertParams(order=order))
                self.assertEqual([a.uuid for a in alerts], expected)
                self.assertEqual(total, 4)

    def test_risk_score_direction(self) -> None:
        low = add_alert(self.db, self.ep_a, description="low", risk_score=1)
        high = add_alert(self.db, self.ep_a, description="high", risk_score=3)
        self.db.commit()
        alerts, _ = get_alerts(self.repository, GetAlertParams())
        self.assertEqual([a.uuid for a in alerts], [high.uuid, low.uuid])
        alerts, _ = get_alerts(self.repository, GetAlertParams(order="ASC"))
        self.assertEqual([a.uuid for a in alerts], [low.uuid, high.uuid])


class TestFilters(AlertQueryTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.pii = add_alert(self.db, self.ep_a, type="PII_DATA_DETECTED", description="p", risk_score=3)
        self.new = add_alert(self.db, self.ep_a, type="NEW_ENDPOINT", description="n", risk_score=1, status="IGNORED")
        self.other = add_alert(self.db, self.ep_b, type="PII_DATA_DETECTED", description="p", risk_score=3, status="RESOLVED")
        self.db.commit()

    def _uuids(self, **params: object) -> set[str]:
        alerts, _ = get_alerts(self.repository, GetAlertParams(**params))
        return {a.uuid for a in alerts}

    def test_endpoint_filter(self) -> None:
        self.assertEqual(self._uuids(api_endpoint_uuid=self.ep_b.uuid), {self.other.uuid})

    def test_type_filter(self) -> None:
        self.assertEqual(self._uuids(alert_types=["NEW_ENDPOINT"]), {self.new.uuid})

    def test_risk_score_filter(self) -> None:
        self.assertEqual(self._uuids(risk_scores=[3]), {self.pii.uuid, self.other.uuid})

    def test_host_filter(self) -> None:
        self.assertEqual(self._uuids(hosts=["b.example.com"]), {self.other.uuid})

    def test_status_filter(self) -> None:
        self.assertEqual(self._uuids(status=["OPEN", "IGNORED"]), {self.pii.uuid, self.new.uuid})

    def test_empty_lists_do_not_filter(self) -> None:
        self.assertEqual(len(self._uuids(alert_types=[], hosts=[], status=[])), 3)

    def test_combined_filters(self) -> None:
        self.assertEqual(
            self._uuids(alert_types=["PII_DATA_DETECTED"], status=["RESOLVED"]),
            {self.other.uuid},
        )


class TestPagination(AlertQueryTestCase):
    def test_total_ignores_pagination(self) -> None:
        for i in range(5):
            add_alert(self.db, self.ep_a, description=f"d{i}", created_minutes_ago=i)
        self.db.commit()
        alerts, total = get_alerts(self.repository, GetAlertParams(offset=1, limit=2))
        self.assertEqual(total, 5)
        self.assertEqual([a.description for a in alerts], ["d1", "d2"])

    def test_limit_capped(self) -> None:
        for i in range(4):
            add_alert(self.db, self.ep_a, description=f"d{i}")
        self.db.commit()
        alerts, total = get_alerts(self.repository, GetAlertParams(limit=50), max_limit=3)
        self.assertEqual(len(alerts), 3)
        self.assertEqual(total, 4)

    def test_statement_has_no_limit_by_default(self) -> None:
        page_stmt, _ = build_alert_query(GetAlertParams())
        self.assertNotIn("LIMIT", str(page_stmt))


class TestProjection(AlertQueryTestCase):
    def test_endpoint_and_spec_context_loaded(self) -> None:
        add_alert(self.db, self.ep_a, description="x")
        self.db.commit()
        self.db.expunge_all()
        alerts, _ = get_alerts(self.repository, GetAlertParams())
        endpoint = alerts[0].api_endpoint
        self.assertEqual(endpoint.host, "a.example.com")
        self.assertEqual(endpoint.openapi_spec.extension, "JSON")
        self.assertIn("paths", endpoint.openapi_spec.minimized_spec_context)


class TestGetAlertAndTop(AlertQueryTestCase):
    def test_get_alert(self) -> None:
        alert = add_alert(self.db, self.ep_a, description="x")
        self.db.commit()
        self.assertEqual(get_alert(self.repository, alert.uuid).uuid, alert.uuid)
        self.assertIsNone(get_alert(self.repository, "missing"))

    def test_top_alerts_are_open_and_highest_risk(self) -> None:
        add_alert(self.db, self.ep_a, description="ignored", status="IGNORED", risk_score=3)
        medium = add_alert(self.db, self.ep_a, description="medium", risk_score=2)
        high = add_alert(self.db, self.ep_a, description="high", risk_score=3)
        add_alert(self.db, self.ep_a, description="low", risk_score=1)
        self.db.commit()
        top = get_top_alerts(self.repository, limit=2)
        self.assertEqual([a.uuid for a in top], [high.uuid, medium.uuid])


if __name__ == "__main__":
    unittest.main()
