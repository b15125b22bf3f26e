"""
Tests for F5OS Client data models.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from f5os_client.core.exceptions import DecodeError
from f5os_client.core.models import (
    F5OSConfig,
    FileExport,
    PartitionState,
    PlatformComponents,
    RestconfErrorBody,
    SwitchedVlan,
    TenantState,
    TransferOperation,
    TransferOperations,
    parse_response,
    rpc_output,
)


class TestF5OSConfig:
    """Test the connection configuration model."""

    def test_defaults(self):
        config = F5OSConfig(host="10.1.1.10", username="admin", password="secret")

        assert config.port is None
        assert config.verify_ssl is True
        assert config.api_timeout == 60.0
        assert config.teem_disabled is False

    def test_host_is_trimmed(self):
        config = F5OSConfig(host="  https://10.1.1.10/ ", username="admin", password="secret")
        assert config.host == "https://10.1.1.10"

    def test_empty_host_rejected(self):
        with pytest.raises(PydanticValidationError):
            F5OSConfig(host="   ", username="admin", password="secret")

    @pytest.mark.parametrize("port", [0, 65536])
    def test_port_range(self, port):
        with pytest.raises(PydanticValidationError):
            F5OSConfig(host="h", username="admin", password="secret", port=port)

    def test_password_hidden_from_repr(self):
        config = F5OSConfig(host="h", username="admin", password="topsecret")
        assert "topsecret" not in repr(config)


class TestRestconfErrorBody:
    """Test decoding of the RESTCONF error envelope."""

    def test_first_entry(self):
        body = RestconfErrorBody.model_validate({
            "ietf-restconf:errors": {"error": [
                {"error-type": "application", "error-tag": "invalid-value",
                 "error-path": "/vlan", "error-message": "bad vlan"},
                {"error-message": "second"},
            ]}
        })
        entry = body.first()
        assert entry.error_tag == "invalid-value"
        assert entry.error_path == "/vlan"
        assert entry.error_message == "bad vlan"

    def test_no_entries(self):
        assert RestconfErrorBody.model_validate({}).first() is None
        assert RestconfErrorBody.model_validate({"ietf-restconf:errors": {"error": []}}).first() is None


class TestResponseShapes:
    """Test the response models inspected by the session and poller."""

    def test_components_ignore_unknown_fields(self):
        components = PlatformComponents.model_validate({
            "openconfig-platform:component": [{"name": "platform", "state": {"description": "R5R10"}, "extra": 1}]
        })
        assert components.component[0].name == "platform"
        assert components.component[0].state.description == "R5R10"

    def test_tenant_state(self):
        state = TenantState.model_validate({"f5-tenants:state": {"status": "Running", "running-state": "deployed"}})
        assert state.state.status == "Running"
        assert state.state.running_state == "deployed"
        assert state.state.instances is None

    def test_partition_state_with_missing_controllers(self):
        assert PartitionState.model_validate({}).state is None

    def test_transfer_operation_key(self):
        operation = TransferOperation.model_validate({
            "operation-id": "op-1", "local-file-path": "configs/b1",
            "remote-file-path": "/upload/b1", "status": "Completed",
        })
        assert operation.key("operation-id") == "op-1"
        assert operation.key("local-file-path") == "configs/b1"
        assert operation.key("remote-file-path") == "/upload/b1"
        assert operation.key("unknown") is None

    def test_transfer_operations(self):
        operations = TransferOperations.model_validate({
            "f5-utils-file-transfer:transfer-operation": [{"status": "In Progress"}]
        })
        assert operations.operations[0].status == "In Progress"

    def test_rpc_output(self):
        output = rpc_output({"f5-utils-file-transfer:output": {"result": "ok", "operation-id": "op-9"}},
                            "f5-utils-file-transfer:output")
        assert output.result == "ok"
        assert output.operation_id == "op-9"
        assert output.upload_id is None

    @pytest.mark.parametrize("data", [None, {}, {"other": {}}, {"f5-utils-file-transfer:output": "text"}])
    def test_rpc_output_missing(self, data):
        output = rpc_output(data, "f5-utils-file-transfer:output")
        assert output.result is None

    def test_switched_vlan_settings(self):
        vlan = SwitchedVlan.model_validate({
            "openconfig-vlan:switched-vlan": {"config": {"native-vlan": 10, "trunk-vlans": [20, 30]}}
        })
        assert vlan.settings.native_vlan == 10
        assert vlan.settings.trunk_vlans == [20, 30]

    def test_switched_vlan_settings_empty(self):
        settings = SwitchedVlan.model_validate({}).settings
        assert settings.native_vlan is None
        assert settings.trunk_vlans == []

    def test_switched_vlan_keeps_ranges(self):
        vlan = SwitchedVlan.model_validate({
            "openconfig-vlan:switched-vlan": {"config": {"trunk-vlans": [20, "100..110"]}}
        })
        assert vlan.settings.trunk_vlans == [20, "100..110"]

    def test_rpc_output_wrong_type(self):
        with pytest.raises(DecodeError) as exc_info:
            rpc_output({"f5-utils-file-transfer:output": {"result": {"nested": 1}}},
                       "f5-utils-file-transfer:output")
        assert exc_info.value.context["source"] == "f5-utils-file-transfer:output"


class TestParseResponse:
    """Test decoding of device data into response models."""

    def test_valid(self):
        state = parse_response(TenantState, {"f5-tenants:state": {"status": "Running"}})
        assert state.state.status == "Running"

    def test_none_is_empty(self):
        assert parse_response(PartitionState, None).state is None

    @pytest.mark.parametrize("data", [
        {"f5-tenants:state": "bad"},
        {"f5-tenants:state": {"status": ["Running"]}},
        ["not", "a", "mapping"],
    ])
    def test_wrong_shape_raises_decode_error(self, data):
        with pytest.raises(DecodeError) as exc_info:
            parse_response(TenantState, data, "get_tenant_state")

        assert "get_tenant_state" in str(exc_info.value)
        assert exc_info.value.context == {"source": "get_tenant_state", "model": "TenantState"}


class TestFileExport:
    """Test the export target model."""

    def test_dump_uses_wire_names(self):
        export = FileExport(
            remote_host="10.2.2.2", remote_file="/upload/backup1",
            local_file="configs/backup1", username="corpuser", password="pw",
        )
        data = export.model_dump(by_alias=True)

        assert data["remote-host"] == "10.2.2.2"
        assert data["remote-file"] == "/upload/backup1"
        assert data["local-file"] == "configs/backup1"
        assert data["protocol"] == "https"
        assert data["insecure"] == ""

    def test_accepts_wire_names(self):
        export = FileExport.model_validate({
            "remote-host": "h", "remote-file": "r", "local-file": "l"
        })
        assert export.remote_host == "h"
        assert "pw" not in repr(FileExport(remote_host="h", remote_file="r", local_file="l", password="pw"))
