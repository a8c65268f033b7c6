"""
Source Column Maps
==================

Maps the header of each source CSV to the engine's column names.
Headers are matched after stripping surrounding whitespace.
"""

from datetime import datetime

# Source header -> engine column
CARRIER_COLUMNS = {
    "TrnspCode": "carrier_id",
    "CarrierName": "carrier_name",
    "TruckType": "truck_type",
}

QUOTE_COLUMNS = {
    "Quote Date": "quote_date",
    "Carrier": "carrier_id",
    "Weight": "weight",
    "Quote": "quote",
    "Amount": "amount",
}

DELIVERY_COLUMNS = {
    "carrier": "carrier_id",
    "pickup": "pickup",
    "delivery": "delivery",
    "expected_delivery": "expected_delivery",
}

# Accepted timestamp layouts, tried in order. Values are read as UTC; a
# trailing "Z" is stripped before matching.
DATE_FORMATS = [
    "%Y-%m-%dT%H:%M:%S%.f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S%.f",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
]

# Fallback for timestamps that match no format
EPOCH = datetime(1970, 1, 1)
