"""
F5OS Client - API Endpoint Constants

This module contains the F5OS API paths used throughout the client.
All paths are relative to the API root (``/restconf/data`` or ``/api/data``).
"""

# API roots
ROOT_URI_RESTCONF = "/restconf/data"
ROOT_URI_API = "/api/data"

# Authentication
LOGIN_PATH = "/openconfig-system:system/aaa"

# Platform
API_COMPONENTS = "/openconfig-platform:components"
API_COMPONENTS_COMPONENT = "/openconfig-platform:components/component"
API_SYSTEM_IMAGE_INSTALL = "/openconfig-system:system/f5-system-image:image/state/install"
API_CONTROLLER_IMAGE = "/openconfig-system:system/f5-system-controller-image:image"

# Interfaces and LACP
API_INTERFACES = "/openconfig-interfaces:interfaces"
API_INTERFACE = "/openconfig-interfaces:interfaces/interface"  # Needs ={name}
ETHERNET_CONTAINER = "openconfig-if-ethernet:ethernet"
AGGREGATION_CONTAINER = "openconfig-if-aggregate:aggregation"
SWITCHED_VLAN = "openconfig-vlan:switched-vlan"
NATIVE_VLAN = "openconfig-vlan:config/openconfig-vlan:native-vlan"
TRUNK_VLANS = "openconfig-vlan:config/openconfig-vlan:trunk-vlans"  # Needs ={id}
LAG_MEMBER_AGGREGATE_ID = "openconfig-if-ethernet:ethernet/config/openconfig-if-aggregate:aggregate-id"
API_LACP_INTERFACE = "/openconfig-lacp:lacp/interfaces/interface"  # Needs ={name}

# VLANs
API_VLANS = "/openconfig-vlan:vlans"
API_VLAN = "/openconfig-vlan:vlans/vlan"  # Needs ={id}

# Partitions and slots
API_PARTITIONS = "/f5-system-partition:partitions"
API_PARTITION = "/f5-system-partition:partitions/partition"  # Needs ={name}
API_SLOTS = "/f5-system-slot:slots"
API_SLOTS_SLOT = "/f5-system-slot:slots/slot"

# Tenants and tenant images
API_TENANTS = "/f5-tenants:tenants"
API_TENANT = "/f5-tenants:tenants/tenant"  # Needs ={name}
API_TENANT_IMAGE = "/f5-tenant-images:images/image"  # Needs ={name}
API_TENANT_IMAGE_REMOVE = "/f5-tenant-images:images/remove"

# File transfer
API_FILE_IMPORT = "/f5-utils-file-transfer:file/import"
API_FILE_EXPORT = "/f5-utils-file-transfer:file/export"
API_FILE_LIST = "/f5-utils-file-transfer:file/list"
API_FILE_DELETE = "/f5-utils-file-transfer:file/delete"
API_FILE_TRANSFER_STATUS = "/f5-utils-file-transfer:file/transfer-operations/transfer-operation"
API_FILE_START_UPLOAD = "/f5-utils-file-transfer:file/f5-file-upload-meta-data:upload/start-upload"
API_IMAGE_UPLOAD = "/openconfig-system:system/f5-image-upload:image/upload-image"

# Config backup
API_CONFIG_BACKUP = "/openconfig-system:system/f5-database:database/f5-database:config-backup"
CONFIG_BACKUP_DIR = "configs/"

# Licensing
API_LICENSING = "/openconfig-system:system/f5-system-licensing:licensing"
API_LICENSE_EULA = API_LICENSING + "/f5-system-licensing-install:get-eula"
API_LICENSE_INSTALL = API_LICENSING + "/f5-system-licensing-install:install"

# System services
API_DNS = "/openconfig-system:system/dns"
API_DNS_SERVER = "/openconfig-system:system/dns/servers/server"  # Needs ={address}
API_DNS_SEARCH = "/openconfig-system:system/dns/config/search"  # Needs ={domain}
API_NTP = "/openconfig-system:system/ntp"
API_NTP_SERVER = "/openconfig-system:system/ntp/servers/server"  # Needs ={address}
API_PRIMARY_KEY = "/openconfig-system:system/f5-primary-key:primary-key"
API_PRIMARY_KEY_SET = API_PRIMARY_KEY + "/f5-primary-key:set"
API_TLS = "/openconfig-system:system/aaa/f5-openconfig-aaa-tls:tls"
API_TLS_CREATE_SELF_SIGNED = API_TLS + "/f5-openconfig-aaa-tls:create-self-signed-cert"
API_TLS_CERTIFICATE = API_TLS + "/certificate"
API_TLS_KEY = API_TLS + "/key"

# Device response markers
BACKUP_SUCCESS_PREFIX = "Database backup successful."
TRANSFER_INITIATED_PREFIX = "File transfer is initiated"
IMPORT_ALREADY_EXISTS = "Aborted: local-file already exists"
FILE_DELETE_RESULT = "Deleting the file"
LICENSE_INSTALLED_RESULT = "License installed successfully."
IMAGE_REMOVE_RESULT = "Successful."
