"""
netops/connectors package marker.
"""

from netops.connectors.airport_dataset_connector import AirportDatasetConnector
from netops.connectors.airport_lookup_connector import AirportLookupConnector, parse_airport_payload
from netops.connectors.base import RETRYABLE_STATUS_CODES, BaseConnector, ConnectorRequestError

__all__ = [
    "RETRYABLE_STATUS_CODES",
    "AirportDatasetConnector",
    "AirportLookupConnector",
    "BaseConnector",
    "ConnectorRequestError",
    "parse_airport_payload",
]
