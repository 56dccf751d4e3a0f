"""
CAS Tool is a command line interface and client library for querying
and feeding a Cloud App Security tenant.
Copyright (C) 2026 CAS Tool Authors

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as
published by the Free Software Foundation, either version 3 of the
License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""
from typing import Dict, Final, Tuple

VERSION_STRING: Final = "0.1.0"

CONFIG_FILE = ".cas_settings.yml"

API_PATH_PREFIX = "/api/v1"

# Tenant hosts are bare host names ending in one of these suffixes.
ALLOWED_TENANT_SUFFIXES: Tuple[str, ...] = (
    ".portal.cloudappsecurity.com",
    ".adallom.com",
)

DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_RESULT_SET_SIZE = 100

AZURE_PROVIDER = "azure"
# Inclusive: a file of exactly this size is still sent as a single block blob.
AZURE_BLOCK_BLOB_MAX_BYTES = 64 * 1024 * 1024
UPLOAD_CHUNK_BYTES = 4 * 1024 * 1024


class SortDirections:
    ASC = "asc"
    DESC = "desc"


VALID_SORT_DIRECTIONS = [SortDirections.ASC, SortDirections.DESC]


class AlertActions:
    READ = "read"
    UNREAD = "unread"
    DISMISS = "dismiss"


VALID_ALERT_ACTIONS = [AlertActions.READ, AlertActions.UNREAD, AlertActions.DISMISS]

# Label -> wire ordinal tables for enum valued filters.
AFFILIATIONS: Dict[str, int] = {
    "Internal": 0,
    "External": 1,
}

SEVERITIES: Dict[str, int] = {
    "Low": 0,
    "Medium": 1,
    "High": 2,
}

RESOLUTION_STATUSES: Dict[str, int] = {
    "Open": 0,
    "Dismissed": 1,
    "Resolved": 2,
}

IP_CATEGORIES: Dict[str, int] = {
    "Corporate": 1,
    "Administrative": 2,
    "Risky": 3,
    "VPN": 4,
    "Cloud_Provider": 5,
    "Other": 6,
}

FILE_TYPES: Dict[str, int] = {
    "Other": 0,
    "Document": 1,
    "Spreadsheet": 2,
    "Presentation": 3,
    "Text": 4,
    "Image": 5,
    "Folder": 6,
}

SHARING_LEVELS: Dict[str, int] = {
    "Private": 0,
    "Internal": 1,
    "External": 2,
    "Public": 3,
    "PublicInternet": 4,
}

APP_IDS: Dict[str, int] = {
    "Amazon_Web_Services": 11599,
    "Box": 10489,
    "Dropbox": 11627,
    "Google_Apps": 11770,
    "Microsoft_Azure": 12260,
    "Microsoft_Cloud_App_Security": 20595,
    "Microsoft_Exchange_Online": 20893,
    "Microsoft_OneDrive_for_Business": 15600,
    "Microsoft_Power_BI": 26324,
    "Microsoft_SharePoint_Online": 20892,
    "Microsoft_Skype_for_Business": 25275,
    "Microsoft_Teams": 28375,
    "Microsoft_Yammer": 11522,
    "Office_365": 11161,
    "Okta": 10980,
    "Salesforce": 11114,
    "ServiceNow": 14509,
}

# Device log formats accepted by the discovery upload endpoint.
DISCOVERY_LOG_TYPES: Dict[str, str] = {
    "Barracuda": "BARRACUDA",
    "BlueCoat": "BLUECOAT",
    "CheckPoint": "CHECKPOINT",
    "CiscoAsa": "CISCO_ASA",
    "CiscoIronportProxy": "CISCO_IRONPORT_PROXY",
    "CiscoScanSafe": "CISCO_SCAN_SAFE",
    "FortiGate": "FORTIGATE",
    "GenericCef": "GENERIC_CEF",
    "GenericLeef": "GENERIC_LEEF",
    "GenericW3c": "GENERIC_W3C",
    "JuniperSrx": "JUNIPER_SRX",
    "MachineZoneMeraki": "MACHINE_ZONE_MERAKI",
    "McAfeeSwg": "MCAFEE_SWG",
    "MicrosoftIsaW3c": "MICROSOFT_ISA_W3C",
    "PaloAlto": "PALO_ALTO",
    "SonicwallSyslog": "SONICWALL_SYSLOG",
    "SophosSg": "SOPHOS_SG",
    "Squid": "SQUID",
    "WebsenseSiemCef": "WEBSENSE_SIEM_CEF",
    "Zscaler": "ZSCALER",
}
