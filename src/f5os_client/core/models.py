"""
F5OS Client - Data Models

This module contains Pydantic models for configuration, the RESTCONF error
envelope and the handful of response shapes the session has to inspect.
Every response field is optional so that an unexpected firmware shape yields
missing values instead of an exception.
"""

from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import DecodeError


class F5OSConfig(BaseModel):
    """Configuration for an F5OS connection."""

    model_config = ConfigDict(validate_assignment=True)

    host: str = Field(..., description="Device hostname, IP or URL")
    username: str = Field(..., description="Login user")
    password: str = Field(..., description="Login password", repr=False)  # Hide in logs
    port: int | None = Field(default=None, ge=1, le=65535, description="API port")
    verify_ssl: bool = Field(default=True, description="Whether to verify SSL certificates")
    api_timeout: float = Field(default=60.0, gt=0, description="Per-call timeout in seconds")
    teem_disabled: bool = Field(default=False, description="Disable telemetry reporting")

    @field_validator("host")
    @classmethod
    def validate_host(cls, v):
        """Validate host is present."""
        v = v.strip()
        if not v:
            raise ValueError("host must not be empty")
        return v.rstrip("/")


class PlatformKind(str, Enum):
    """Platform classes recognised by the detection cascade."""
    RSERIES_PLATFORM = "rSeries Platform"
    VELOS_PARTITION = "Velos Partition"
    VELOS_CONTROLLER = "Velos Controller"
    UNKNOWN = "unknown"


class PlatformInfo(BaseModel):
    """Result of platform detection."""

    kind: PlatformKind = PlatformKind.UNKNOWN
    description: str | None = None
    version: str | None = None


class _Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


ResponseT = TypeVar("ResponseT", bound=BaseModel)


def parse_response(model: type[ResponseT], data: Any, source: str = "response") -> ResponseT:
    """Validate device data against ``model``.

    Raises:
        DecodeError: If the data does not have the shape ``model`` describes
    """
    try:
        return model.model_validate(data if data is not None else {})
    except (PydanticValidationError, TypeError, ValueError) as e:
        raise DecodeError(
            f"Unexpected response shape from {source}: {e}",
            context={"source": source, "model": model.__name__},
        ) from e


# ========== RESTCONF error envelope ==========


class RestconfErrorEntry(_Response):
    error_type: str | None = Field(default=None, alias="error-type")
    error_tag: str | None = Field(default=None, alias="error-tag")
    error_path: str | None = Field(default=None, alias="error-path")
    error_message: str | None = Field(default=None, alias="error-message")


class RestconfErrors(_Response):
    error: list[RestconfErrorEntry] = Field(default_factory=list)


class RestconfErrorBody(_Response):
    errors: RestconfErrors | None = Field(default=None, alias="ietf-restconf:errors")

    def first(self) -> RestconfErrorEntry | None:
        """Return the first error entry, if any."""
        if self.errors and self.errors.error:
            return self.errors.error[0]
        return None


class ErrorEnvelope(str, Enum):
    """How a failing response body is turned into a DeviceError."""
    STANDARD = "standard"
    TENANT = "tenant"


# ========== Platform components ==========


class ComponentState(_Response):
    description: str | None = None


class SoftwareComponentState(_Response):
    version: str | None = None


class SoftwareComponent(_Response):
    software_index: str | None = Field(default=None, alias="software-index")
    state: SoftwareComponentState | None = None


class SoftwareComponents(_Response):
    software_component: list[SoftwareComponent] = Field(default_factory=list, alias="software-component")


class SoftwareState(_Response):
    software_components: SoftwareComponents | None = Field(default=None, alias="software-components")


class Software(_Response):
    state: SoftwareState | None = None


class PlatformComponent(_Response):
    name: str | None = None
    state: ComponentState | None = None
    software: Software | None = Field(default=None, alias="f5-platform:software")


class PlatformComponents(_Response):
    component: list[PlatformComponent] = Field(default_factory=list, alias="openconfig-platform:component")


class ImageInstall(_Response):
    install_os_version: str | None = Field(default=None, alias="install-os-version")
    install_service_version: str | None = Field(default=None, alias="install-service-version")
    install_status: str | None = Field(default=None, alias="install-status")


class ImageInstallState(_Response):
    install: ImageInstall | None = Field(default=None, alias="f5-system-image:install")


class ControllerImage(_Response):
    number: int | None = None
    os_version: str | None = Field(default=None, alias="os-version")
    service_version: str | None = Field(default=None, alias="service-version")
    install_status: str | None = Field(default=None, alias="install-status")


class ControllerList(_Response):
    controller: list[ControllerImage] = Field(default_factory=list)


class ControllerImageStateBody(_Response):
    controllers: ControllerList | None = None


class ControllerImageBody(_Response):
    state: ControllerImageStateBody | None = None


class ControllerImageState(_Response):
    image: ControllerImageBody | None = Field(default=None, alias="f5-system-controller-image:image")


# ========== Long-running operation state ==========


class TenantStateBody(_Response):
    status: str | None = None
    running_state: str | None = Field(default=None, alias="running-state")
    instances: Any = None


class TenantState(_Response):
    state: TenantStateBody | None = Field(default=None, alias="f5-tenants:state")


class PartitionController(_Response):
    controller: int | None = None
    partition_status: str | None = Field(default=None, alias="partition-status")


class PartitionControllers(_Response):
    controller: list[PartitionController | None] = Field(default_factory=list)


class PartitionStateBody(_Response):
    controllers: PartitionControllers | None = None


class PartitionState(_Response):
    state: PartitionStateBody | None = Field(default=None, alias="f5-system-partition:state")


class Slot(_Response):
    slot_num: int = Field(..., alias="slot-num")
    partition: str | None = None


class Slots(_Response):
    slots: list[Slot] = Field(default_factory=list, alias="f5-system-slot:slot")


class TransferOperation(_Response):
    local_file_path: str | None = Field(default=None, alias="local-file-path")
    remote_file_path: str | None = Field(default=None, alias="remote-file-path")
    remote_host: str | None = Field(default=None, alias="remote-host")
    operation: str | None = None
    operation_id: str | None = Field(default=None, alias="operation-id")
    status: str | None = None
    timestamp: str | None = None

    def key(self, field: str) -> str | None:
        """Look up an identifier by its wire name."""
        return {
            "operation-id": self.operation_id,
            "local-file-path": self.local_file_path,
            "remote-file-path": self.remote_file_path,
        }.get(field)


class TransferOperations(_Response):
    operations: list[TransferOperation] = Field(
        default_factory=list, alias="f5-utils-file-transfer:transfer-operation"
    )


class RpcOutput(_Response):
    """Body of an action reply such as ``f5-utils-file-transfer:output``."""

    result: str | None = None
    operation_id: str | None = Field(default=None, alias="operation-id")
    upload_id: str | None = Field(default=None, alias="upload-id")


def rpc_output(data: Any, key: str) -> RpcOutput:
    """Decode the output container ``key`` of an action reply; missing parts stay None."""
    body = data.get(key) if isinstance(data, dict) else None
    return parse_response(RpcOutput, body if isinstance(body, dict) else {}, key)


class FileExport(BaseModel):
    """Remote target of a file export."""

    model_config = ConfigDict(populate_by_name=True)

    remote_host: str = Field(..., alias="remote-host")
    remote_file: str = Field(..., alias="remote-file")
    local_file: str = Field(..., alias="local-file")
    username: str = ""
    password: str = Field(default="", repr=False)
    protocol: str = "https"
    insecure: str = ""


# ========== Switched VLANs ==========


class SwitchedVlanConfig(_Response):
    native_vlan: int | None = Field(default=None, alias="native-vlan")
    # Ranges such as "10..20" stay strings
    trunk_vlans: list[int | str] = Field(default_factory=list, alias="trunk-vlans")


class SwitchedVlanBody(_Response):
    config: SwitchedVlanConfig | None = None


class SwitchedVlan(_Response):
    switched_vlan: SwitchedVlanBody | None = Field(default=None, alias="openconfig-vlan:switched-vlan")

    @property
    def settings(self) -> SwitchedVlanConfig:
        if self.switched_vlan and self.switched_vlan.config:
            return self.switched_vlan.config
        return SwitchedVlanConfig()
