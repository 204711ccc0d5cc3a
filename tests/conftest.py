"""Shared fixtures and factories for DeviceRank tests."""

from datetime import date

import pytest

from devicerank.domain import CATEGORIES, DeviceRecord, WeightVector


REFERENCE_DATE = date(2025, 1, 1)


def make_device(device_id: str = "dev-1", name: str = "Test Phone", **fields) -> DeviceRecord:
    """Helper to create a DeviceRecord for testing."""
    return DeviceRecord(id=device_id, name=name, **fields)


def only(category: str) -> WeightVector:
    """A WeightVector that puts all weight on one category."""
    return WeightVector(**{name: (1.0 if name == category else 0.0) for name in CATEGORIES})


def flagship(device_id: str = "flagship", **overrides) -> DeviceRecord:
    fields = dict(
        brand="Acme",
        ram_configurations=(12, 16),
        chipset="Snapdragon 8 Gen 3",
        battery_capacity=5000,
        main_camera_mp=200,
        front_camera_mp=12,
        display_size=6.8,
        water_resistance="IP68",
        weight=232,
        security_features=("Ultrasonic fingerprint", "Face unlock"),
        wireless_charging=15,
        current_price=1299,
        currency="USD",
        release_date=date(2024, 11, 1),
        review_ratings=(5, 4, 5),
    )
    fields.update(overrides)
    return make_device(device_id, "Acme Ultra", **fields)


def budget_phone(device_id: str = "budget", **overrides) -> DeviceRecord:
    fields = dict(
        brand="Valu",
        ram_configurations=(4, 6),
        chipset="Helio G85",
        battery_capacity=6000,
        main_camera_mp=50,
        front_camera_mp=8,
        display_size=6.5,
        weight=190,
        security_features=("Side fingerprint",),
        current_price=26000,
        currency="NPR",
        release_date=date(2023, 6, 1),
    )
    fields.update(overrides)
    return make_device(device_id, "Valu 5", **fields)


@pytest.fixture
def reference_date() -> date:
    return REFERENCE_DATE
