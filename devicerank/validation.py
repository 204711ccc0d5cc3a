"""
Catalog Validation for the DeviceRank Engine.

Turns loosely-typed catalog entries (JSON objects in the catalog's
camelCase shape) into DeviceRecords with explicit optional fields.

Gating model:
    - id and name are required; without them the entry is rejected
    - every other attribute is optional; a value that cannot be read
      becomes "absent" and the scorers treat it as such
"""

from __future__ import annotations

import json
import logging
import math
from datetime import date, datetime
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .domain import DeviceRecord, DeviceRecordError

logger = logging.getLogger(__name__)


# =============================================================================
# FIELD COERCION
# =============================================================================

def coerce_float(value: Any) -> Optional[float]:
    """
    Read a finite float from a number or numeric string.

    Prices arrive as decimal strings from the catalog, so strings are
    accepted. Anything else becomes None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return result if math.isfinite(result) else None


def coerce_int(value: Any) -> Optional[int]:
    number = coerce_float(value)
    if number is None:
        return None
    return int(number)


def coerce_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def coerce_date(value: Any) -> Optional[date]:
    """
    Read a release date from a date, datetime or ISO-8601 string.

    Timestamps like '2024-09-20T00:00:00.000Z' keep only their date part.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def coerce_megapixels(value: Any) -> Optional[float]:
    """
    Read camera megapixels from either a bare number or a camera blob
    such as {"megapixels": 50, "aperture": "f/1.8"}.
    """
    if isinstance(value, Mapping):
        return coerce_float(value.get("megapixels"))
    return coerce_float(value)


def coerce_float_list(value: Any) -> tuple[float, ...]:
    if not isinstance(value, (list, tuple)):
        single = coerce_float(value)
        return (single,) if single is not None else ()
    return tuple(f for f in (coerce_float(v) for v in value) if f is not None)


def coerce_str_list(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(s for s in (coerce_str(v) for v in value) if s is not None)


def coerce_ratings(value: Any) -> tuple[float, ...]:
    """Ratings from either bare numbers or review objects like {"rating": 4}."""
    if not isinstance(value, (list, tuple)):
        return ()
    ratings = []
    for item in value:
        if isinstance(item, Mapping):
            item = item.get("rating")
        rating = coerce_float(item)
        if rating is not None:
            ratings.append(rating)
    return tuple(ratings)


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key present in data (camelCase or snake_case)."""
    for key in keys:
        if key in data:
            return data[key]
    return None


# =============================================================================
# DEVICE RECORD PARSING
# =============================================================================

def device_from_dict(data: Mapping[str, Any]) -> DeviceRecord:
    """
    Build a DeviceRecord from a catalog entry.

    Raises:
        DeviceRecordError: If the entry is not an object or lacks id/name
    """
    if not isinstance(data, Mapping):
        raise DeviceRecordError(f"device entry must be an object, got {type(data).__name__}")

    device_id = coerce_str(data.get("id"))
    if device_id is None:
        raise DeviceRecordError("device id is required")

    name = coerce_str(data.get("name"))
    if name is None:
        raise DeviceRecordError(f"device name is required (id: {device_id})")

    brand = data.get("brand")
    if isinstance(brand, Mapping):
        brand = brand.get("name")

    review_count = _first(data, "reviewCount", "review_count")
    counts = data.get("_count")
    if review_count is None and isinstance(counts, Mapping):
        review_count = counts.get("reviews")

    return DeviceRecord(
        id=device_id,
        name=name,
        brand=coerce_str(brand),
        ram_configurations=coerce_float_list(_first(data, "ramConfigurations", "ram_configurations")),
        chipset=coerce_str(data.get("chipset")),
        battery_capacity=coerce_float(_first(data, "batteryCapacity", "battery_capacity")),
        main_camera_mp=coerce_megapixels(_first(data, "mainCamera", "main_camera_mp")),
        front_camera_mp=coerce_megapixels(_first(data, "frontCamera", "front_camera_mp")),
        display_size=coerce_float(_first(data, "displaySize", "display_size")),
        water_resistance=coerce_str(_first(data, "waterResistance", "water_resistance")),
        weight=coerce_float(data.get("weight")),
        security_features=coerce_str_list(_first(data, "securityFeatures", "security_features")),
        wireless_charging=coerce_float(_first(data, "wirelessCharging", "wireless_charging")),
        current_price=coerce_float(_first(data, "currentPrice", "current_price")),
        launch_price=coerce_float(_first(data, "launchPrice", "launch_price")),
        currency=coerce_str(data.get("currency")),
        release_date=coerce_date(_first(data, "releaseDate", "release_date")),
        review_ratings=coerce_ratings(_first(data, "reviews", "review_ratings")),
        review_count=coerce_int(review_count),
    )


# =============================================================================
# CATALOG LOADING
# =============================================================================

def parse_catalog(entries: Any) -> list[DeviceRecord]:
    """
    Parse a list of catalog entries, preserving their order.

    Accepts either a bare list or an object with a "devices" list.

    Raises:
        DeviceRecordError: If the payload is not a list or an entry is invalid
    """
    if isinstance(entries, Mapping) and "devices" in entries:
        entries = entries["devices"]
    if not isinstance(entries, list):
        raise DeviceRecordError("catalog must be a JSON list of device objects")

    devices = []
    for position, entry in enumerate(entries):
        try:
            devices.append(device_from_dict(entry))
        except DeviceRecordError as e:
            raise DeviceRecordError(f"catalog entry {position}: {e}") from e
    return devices


def load_catalog(path: Union[str, Path]) -> list[DeviceRecord]:
    """
    Load a device catalog from a JSON file.

    Raises:
        DeviceRecordError: If the file is not valid JSON or not a device list
        OSError: If the file cannot be read
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        try:
            payload = json.load(fh)
        except json.JSONDecodeError as e:
            raise DeviceRecordError(f"{path} is not valid JSON: {e}") from e

    devices = parse_catalog(payload)
    logger.info("Loaded %d devices from %s", len(devices), path)
    return devices
