"""Test doubles and payload builders shared by the test modules."""

import json

import httpx

_DEFAULT = object()


class FakeVictorOps:
    """Records POSTed alerts and replays queued responses.

    When the queue is empty a ``200 success`` envelope echoing the
    entity id is returned.  Queued exceptions are raised instead of
    answering, simulating transport failures.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        body = json.loads(request.content)
        return httpx.Response(
            200, json={"result": "success", "entity_id": body.get("entity_id", "")}
        )

    @property
    def bodies(self) -> list[dict]:
        """Decoded JSON bodies of every recorded request."""
        return [json.loads(r.content) for r in self.requests]


def make_alert(labels=None, annotations=None, **overrides):
    """Build one alert entry of an Alertmanager webhook."""
    alert = {
        "status": "firing",
        "labels": {"alertname": "HighLatency", "job": "api"} if labels is None else labels,
        "annotations": {"summary": "p99 above 1s"} if annotations is None else annotations,
        "startsAt": "2024-01-01T00:00:00Z",
        "endsAt": "0001-01-01T00:00:00Z",
        "generatorURL": "http://prometheus:9090/graph?g0.expr=latency",
    }
    alert.update(overrides)
    return alert


def make_payload(status="firing", alerts=_DEFAULT, **overrides):
    """Build an Alertmanager webhook body.

    Args:
        status: Group status.
        alerts: Alert list, ``None`` for a JSON ``null``. Defaults to a
            single firing alert.
        **overrides: Top-level fields to replace.
    """
    payload = {
        "version": "4",
        "receiver": "victorops",
        "status": status,
        "groupKey": 12345,
        "groupLabels": {"job": "api", "alertname": "HighLatency"},
        "commonLabels": {},
        "commonAnnotations": {},
        "externalURL": "http://alertmanager:9093",
        "alerts": [make_alert()] if alerts is _DEFAULT else alerts,
    }
    payload.update(overrides)
    return payload
