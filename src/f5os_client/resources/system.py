"""
F5OS Client - System Services

DNS, NTP, primary key and TLS certificate management, plus the software
component inventory.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from ..core.exceptions import ValidationError
from ..core.session import Session
from ..shared.constants import (
    API_COMPONENTS,
    API_DNS,
    API_DNS_SEARCH,
    API_DNS_SERVER,
    API_NTP,
    API_NTP_SERVER,
    API_PRIMARY_KEY,
    API_PRIMARY_KEY_SET,
    API_TLS,
    API_TLS_CERTIFICATE,
    API_TLS_CREATE_SELF_SIGNED,
    API_TLS_KEY,
)
from ..shared.error_handlers import validate_name

logger = logging.getLogger("f5os-client")

TLS_PREFIX = "f5-openconfig-aaa-tls:"
TLS_SAN = TLS_PREFIX + "san"
SAN_REQUIRED_FROM = (1, 8)
NTP_KEY_ID = "f5-openconfig-system-ntp:key-id"


# DNS

async def patch_dns_config(session: Session, servers: List[str], domains: List[str]) -> bytes:
    """Merge DNS servers and search domains into the device configuration."""
    payload = {
        "openconfig-system:dns": {
            "servers": {"server": [{"address": server} for server in servers]},
            "config": {"search": list(domains)},
        }
    }
    logger.info(f"Configuring DNS servers {servers} and search domains {domains}")
    return await session.patch(API_DNS, payload, operation="patch_dns_config")


async def get_dns_config(session: Session) -> Dict[str, Any]:
    return await session.get_json(API_DNS, operation="get_dns_config")


async def delete_dns_server(session: Session, address: str) -> None:
    validate_name(address, "address", "delete_dns_server")
    await session.delete(f"{API_DNS_SERVER}={address}", operation="delete_dns_server")


async def delete_search_domain(session: Session, domain: str) -> None:
    validate_name(domain, "domain", "delete_search_domain")
    await session.delete(f"{API_DNS_SEARCH}={domain}", operation="delete_search_domain")


# NTP

def build_ntp_server_payload(
    address: str,
    key_id: Optional[int] = None,
    prefer: bool = False,
    iburst: bool = False,
) -> Dict[str, Any]:
    """Build the ``openconfig-system:server`` entry for one NTP server."""
    validate_name(address, "address", "build_ntp_server_payload")
    config: Dict[str, Any] = {"address": address, "prefer": prefer, "iburst": iburst}
    if key_id is not None:
        config[NTP_KEY_ID] = key_id
    return {"openconfig-system:server": [{"address": address, "config": config}]}


async def create_ntp_server(session: Session, payload: Dict[str, Any]) -> bytes:
    servers = {"openconfig-system:servers": {"server": payload["openconfig-system:server"]}}
    logger.info("Creating NTP server")
    return await session.patch(f"{API_NTP}/servers", servers, operation="create_ntp_server")


async def update_ntp_server(session: Session, address: str, payload: Dict[str, Any]) -> bytes:
    validate_name(address, "address", "update_ntp_server")
    logger.info(f"Updating NTP server {address}")
    return await session.put(f"{API_NTP_SERVER}={address}", payload, operation="update_ntp_server")


async def get_ntp_server(session: Session, address: str) -> Dict[str, Any]:
    validate_name(address, "address", "get_ntp_server")
    return await session.get_json(f"{API_NTP_SERVER}={address}", operation="get_ntp_server")


async def delete_ntp_server(session: Session, address: str) -> None:
    validate_name(address, "address", "delete_ntp_server")
    logger.info(f"Deleting NTP server {address}")
    await session.delete(f"{API_NTP_SERVER}={address}", operation="delete_ntp_server")


# Primary key

async def get_primary_key(session: Session) -> Dict[str, Any]:
    """Primary key state, ``{"f5-primary-key:primary-key": {"f5-primary-key:state": {...}}}``."""
    return await session.get_json(API_PRIMARY_KEY, operation="get_primary_key")


def primary_key_status(data: Dict[str, Any]) -> Optional[str]:
    state = (data.get("f5-primary-key:primary-key") or {}).get("f5-primary-key:state") or {}
    return state.get("f5-primary-key:status")


async def set_primary_key(session: Session, passphrase: str, salt: str) -> bytes:
    """Set the primary key. The device treats this as an upsert."""
    validate_name(passphrase, "passphrase", "set_primary_key")
    validate_name(salt, "salt", "set_primary_key")
    payload = {
        "f5-primary-key:passphrase": passphrase,
        "f5-primary-key:confirm-passphrase": passphrase,
        "f5-primary-key:salt": salt,
        "f5-primary-key:confirm-salt": salt,
    }
    logger.info("Setting primary key")
    return await session.post(API_PRIMARY_KEY_SET, payload, operation="set_primary_key")


# TLS certificate and key

def _major_minor(version: Optional[str]) -> Optional[Tuple[int, int]]:
    match = re.match(r"v?(\d+)\.(\d+)", version or "")
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def tls_payload(name: str, **fields: Any) -> Dict[str, Any]:
    """Prefix self-signed certificate fields with the TLS module name.

    ``tls_payload("web", days_valid=365, san="DNS:a.example")`` yields
    ``{"f5-openconfig-aaa-tls:name": "web", "f5-openconfig-aaa-tls:days-valid": 365, ...}``.
    None values are left out.
    """
    payload = {TLS_PREFIX + "name": name}
    for field, value in fields.items():
        if value is not None:
            payload[TLS_PREFIX + field.replace("_", "-")] = value
    return payload


async def create_tls_cert_key(session: Session, payload: Dict[str, Any]) -> bytes:
    """Create a self-signed certificate and key.

    F5OS 1.8 and later require a subject alternative name; earlier
    versions reject one.

    Raises:
        ValidationError: If the SAN does not match what the platform version expects
    """
    version = _major_minor(session.platform_version)
    if version is not None:
        if version >= SAN_REQUIRED_FROM and not payload.get(TLS_SAN):
            raise ValidationError("subject alternative name is required for platform version v1.8 and above",
                                  context={"platform_version": session.platform_version})
        if version < SAN_REQUIRED_FROM and payload.get(TLS_SAN):
            raise ValidationError("subject alternative name is not supported for platform version below v1.8",
                                  context={"platform_version": session.platform_version})

    logger.info(f"Creating TLS certificate {payload.get(TLS_PREFIX + 'name')}")
    return await session.post(API_TLS_CREATE_SELF_SIGNED, payload, operation="create_tls_cert_key")


async def get_tls_cert_key(session: Session) -> Dict[str, Any]:
    return await session.get_json(API_TLS, operation="get_tls_cert_key")


async def delete_tls_cert_key(session: Session, name: str) -> None:
    """Remove the installed TLS certificate and its key.

    The device holds a single certificate and key pair, so ``name`` only
    identifies the pair in the log.
    """
    logger.info(f"Deleting TLS certificate {name}")
    await session.delete(API_TLS_CERTIFICATE, operation="delete_tls_cert_key")
    await session.delete(API_TLS_KEY, operation="delete_tls_cert_key")


async def get_software_versions(session: Session) -> Dict[str, Any]:
    """Raw ``openconfig-platform:components`` tree with software versions."""
    return await session.get_json(API_COMPONENTS, operation="get_software_versions")
