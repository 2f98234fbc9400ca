"""Tests for the Alertmanager and VictorOps pydantic models."""

import pytest
from pydantic import ValidationError

from amtranslator.alertmanager.models import InboundAlert, InboundMessage
from amtranslator.victorops.models import MessageType, VictorOpsAlert, VictorOpsResponse
from helpers import make_alert, make_payload


class TestInboundMessage:
    """Decoding of Alertmanager webhook bodies."""

    def test_camel_case_fields(self):
        """Wire names map onto snake_case attributes."""
        msg = InboundMessage.model_validate(make_payload())
        assert msg.status == "firing"
        assert msg.group_key == 12345
        assert msg.external_url == "http://alertmanager:9093"
        assert msg.alerts[0].generator_url.startswith("http://prometheus:9090")

    def test_integer_group_key_entity_id(self):
        """A numeric group key becomes its decimal string."""
        msg = InboundMessage.model_validate(make_payload(groupKey=18446744073709551615))
        assert msg.entity_id == "18446744073709551615"

    def test_string_group_key_entity_id(self):
        """Modern string group keys are passed through unchanged."""
        msg = InboundMessage.model_validate(make_payload(groupKey='{}:{alertname="X"}'))
        assert msg.entity_id == '{}:{alertname="X"}'

    def test_missing_group_key(self):
        """Without a group key there is no entity id."""
        payload = make_payload()
        del payload["groupKey"]
        assert InboundMessage.model_validate(payload).entity_id is None

    def test_display_name_sorted_by_label_name(self):
        """Group-label values are joined with ':' in label-name order."""
        msg = InboundMessage.model_validate(make_payload())
        assert msg.display_name == "HighLatency:api"

    def test_display_name_empty(self):
        """No group labels yields an empty display name."""
        msg = InboundMessage.model_validate(make_payload(groupLabels={}))
        assert msg.display_name == ""

    def test_null_alerts_accepted_by_schema(self):
        """A null alert list is left for validation to reject."""
        msg = InboundMessage.model_validate(make_payload(alerts=None))
        assert msg.alerts is None

    def test_null_maps_read_as_empty(self):
        """JSON null label and annotation maps decode as empty maps."""
        payload = make_payload(
            groupLabels=None,
            commonLabels=None,
            commonAnnotations=None,
            alerts=[make_alert(labels=None, annotations=None)],
        )
        payload["alerts"][0]["labels"] = None
        payload["alerts"][0]["annotations"] = None
        msg = InboundMessage.model_validate(payload)
        assert msg.group_labels == {}
        assert msg.common_labels == {}
        assert msg.display_name == ""
        assert msg.alerts[0].labels == {}
        assert msg.alerts[0].annotations == {}

    def test_status_required(self):
        """A body without a status fails validation."""
        payload = make_payload()
        del payload["status"]
        with pytest.raises(ValidationError):
            InboundMessage.model_validate(payload)

    def test_immutable(self):
        """Received messages cannot be modified."""
        msg = InboundMessage.model_validate(make_payload())
        with pytest.raises(ValidationError):
            msg.status = "resolved"


class TestInboundAlert:
    """Per-alert helpers."""

    def test_start_epoch(self):
        """startsAt converts to whole epoch seconds."""
        alert = InboundAlert.model_validate(make_alert())
        assert alert.start_epoch() == 1704067200

    def test_start_epoch_naive_is_utc(self):
        """Timestamps without an offset are read as UTC."""
        alert = InboundAlert.model_validate(make_alert(startsAt="2024-01-01T00:00:00"))
        assert alert.start_epoch() == 1704067200

    def test_start_epoch_with_offset(self):
        """Offsets are honoured."""
        alert = InboundAlert.model_validate(make_alert(startsAt="2024-01-01T02:00:00+02:00"))
        assert alert.start_epoch() == 1704067200

    def test_start_epoch_missing(self):
        """No startsAt means no start time."""
        alert = InboundAlert.model_validate({"labels": {}})
        assert alert.start_epoch() is None


class TestMessageType:
    """Parsing of message-type names."""

    def test_parse_case_insensitive(self):
        """Lower-case names are accepted."""
        assert MessageType.parse("warning") is MessageType.WARNING

    def test_parse_strips_whitespace(self):
        """Surrounding whitespace is ignored."""
        assert MessageType.parse(" INFO ") is MessageType.INFO

    def test_parse_unknown(self):
        """Unknown names return None."""
        assert MessageType.parse("PAGE") is None


class TestVictorOpsAlert:
    """Wire form of outbound messages."""

    def test_unset_fields_omitted(self):
        """None-valued fields are left out of the wire form."""
        alert = VictorOpsAlert(message_type=MessageType.RECOVERY, entity_id="1")
        assert alert.to_wire() == {"message_type": "RECOVERY", "entity_id": "1"}

    def test_round_trip(self):
        """Encoding then decoding yields an equal message."""
        alert = VictorOpsAlert(
            message_type=MessageType.CRITICAL,
            entity_id="12345",
            timestamp=1_700_000_000,
            state_start_time=1_699_999_000,
            state_message="summary: down",
            monitoring_tool="Prometheus Alertmanager",
            entity_display_name="HighLatency:api",
        )
        assert VictorOpsAlert.model_validate(alert.to_wire()) == alert

    def test_message_type_required(self):
        """message_type is the only required field."""
        with pytest.raises(ValidationError):
            VictorOpsAlert(entity_id="1")


class TestVictorOpsResponse:
    """Decoding of the VictorOps response envelope."""

    def test_decode(self):
        """All three fields are read."""
        resp = VictorOpsResponse.model_validate_json(
            '{"result": "failure", "entity_id": "1", "message": "bad routing key"}'
        )
        assert resp.result == "failure"
        assert resp.message == "bad routing key"

    def test_message_optional(self):
        """Successful responses may omit the message."""
        resp = VictorOpsResponse.model_validate_json('{"result": "success", "entity_id": "1"}')
        assert resp.message is None

    def test_invalid_json(self):
        """Non-JSON bodies fail validation."""
        with pytest.raises(ValidationError):
            VictorOpsResponse.model_validate_json(b"<html>502</html>")
