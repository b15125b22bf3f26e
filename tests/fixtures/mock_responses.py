"""
Mock API responses for F5OS API endpoints.

This module contains realistic mock responses for the F5OS endpoints used
throughout the test suite.
"""

from typing import Any, Dict, Optional


def restconf_error(message: str, tag: str = "invalid-value", path: Optional[str] = None) -> Dict[str, Any]:
    """Build a RESTCONF error envelope."""
    entry = {"error-type": "application", "error-tag": tag, "error-message": message}
    if path:
        entry["error-path"] = path
    return {"ietf-restconf:errors": {"error": [entry]}}


# ========== Platform Responses ==========

RSERIES_COMPONENTS = {
    "openconfig-platform:component": [
        {"name": "platform", "state": {"description": "R5R10"}},
        {"name": "lcd", "state": {"description": "LCD"}},
    ]
}

RSERIES_IMAGE_INSTALL = {
    "f5-system-image:install": {
        "install-os-version": "1.8.0-3518",
        "install-service-version": "1.8.0-3518",
        "install-status": "success",
    }
}

VELOS_CONTROLLER_COMPONENTS = {
    "openconfig-platform:component": [
        {"name": "chassis", "state": {"description": "CX410"}},
        {"name": "blade-1", "state": {}},
    ]
}

VELOS_CONTROLLER_IMAGE = {
    "f5-system-controller-image:image": {
        "state": {
            "controllers": {
                "controller": [
                    {"number": 1, "os-version": "1.6.1-11066", "install-status": "success"},
                    {"number": 2, "os-version": "1.6.2-12000", "install-status": "success"},
                ]
            }
        }
    }
}

VELOS_PARTITION_COMPONENTS = {
    "openconfig-platform:component": [
        {
            "name": "platform",
            "f5-platform:software": {
                "state": {
                    "software-components": {
                        "software-component": [
                            {"software-index": "blade-os", "state": {"version": "1.6.1-11066"}}
                        ]
                    }
                }
            },
        }
    ]
}


# ========== Long-running Operation Responses ==========

def tenant_state(status: str, instances: Any = None) -> Dict[str, Any]:
    state: Dict[str, Any] = {"status": status, "running-state": "deployed"}
    if instances is not None:
        state["instances"] = instances
    return {"f5-tenants:state": state}


def partition_state(*statuses: str) -> Dict[str, Any]:
    return {
        "f5-system-partition:state": {
            "controllers": {
                "controller": [
                    {"controller": index + 1, "partition-status": status}
                    for index, status in enumerate(statuses)
                ]
            }
        }
    }


def transfer_operations(*operations: Dict[str, str]) -> Dict[str, Any]:
    return {"f5-utils-file-transfer:transfer-operation": list(operations)}


# ========== Action Replies ==========

BACKUP_CREATED = {"f5-database:output": {"result": "Database backup successful."}}

EXPORT_STARTED = {
    "f5-utils-file-transfer:output": {
        "result": "File transfer is initiated.(configs/backup1)",
        "operation-id": "op-42",
    }
}

EXPORT_STARTED_WITHOUT_ID = {
    "f5-utils-file-transfer:output": {"result": "File transfer is initiated.(configs/backup1)"}
}

FILE_DELETED = {"f5-utils-file-transfer:output": {"result": "Deleting the file"}}

UPLOAD_STARTED = {"f5-file-upload-meta-data:output": {"upload-id": "upload-7"}}

IMAGE_REMOVED = {"f5-tenant-images:output": {"result": "Successful."}}

LICENSE_INSTALLED = {"f5-system-licensing-install:output": {"result": "License installed successfully."}}
