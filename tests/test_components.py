"""
Tests for the eight scoring components.

These tests verify:
1. Bucket thresholds per category
2. Neutral scores for missing data
3. Every component stays within [0, 100] and never raises
4. Chipset tiers and the FX rate come from injected configuration
"""

import itertools
import math
from datetime import date, datetime

import pytest

from devicerank.config import ChipsetRule, EngineConfig
from devicerank.ranking.components import (
    NEUTRAL_DISPLAY_SCORE,
    NEUTRAL_RECENCY_SCORE,
    NEUTRAL_REVIEWS_SCORE,
    ComponentScore,
    chipset_points,
    compute_battery,
    compute_build,
    compute_camera,
    compute_display,
    compute_performance,
    compute_price,
    compute_recency,
    compute_reviews,
    months_since,
)
from devicerank.ranking.scorer import ScoringEngine

from conftest import REFERENCE_DATE, budget_phone, flagship, make_device


CONFIG = EngineConfig()


# =============================================================================
# PERFORMANCE TESTS
# =============================================================================

class TestPerformance:
    """Test RAM and chipset tiers."""

    def test_flagship_performance(self):
        device = make_device(ram_configurations=(8, 12), chipset="Snapdragon 8 Gen 3")
        score = compute_performance(device, CONFIG)

        assert score.score == 90  # 40 RAM + 50 chipset
        assert "snapdragon 8" in score.reason

    def test_max_ram_used(self):
        device = make_device(ram_configurations=(16, 8), chipset="Apple A17 Pro")
        assert compute_performance(device, CONFIG).score == 100

    @pytest.mark.parametrize("ram,expected", [
        (16, 50), (12, 40), (8, 30), (6, 20), (4, 10), (3, 0),
    ])
    def test_ram_tiers(self, ram, expected):
        device = make_device(ram_configurations=(ram,))
        assert compute_performance(device, CONFIG).score == expected

    @pytest.mark.parametrize("chipset,expected", [
        ("Snapdragon 888", 50),
        ("Apple A16 Bionic", 50),
        ("Snapdragon 7 Gen 1", 40),
        ("A14 Bionic", 40),
        ("Snapdragon 6 Gen 1", 30),
        ("MediaTek Dimensity 9300", 30),
        ("Dimensity 8200", 25),
        ("Exynos 2400", 25),
        ("Helio G99", 15),
        ("", 0),
        (None, 0),
    ])
    def test_chipset_tiers(self, chipset, expected):
        points, _ = chipset_points(chipset, CONFIG)
        assert points == expected

    def test_first_rule_wins(self):
        config = EngineConfig(chipset_rules=(
            ChipsetRule("tensor", 45),
            ChipsetRule("g4", 10),
        ))
        points, keyword = chipset_points("Google Tensor G4", config)
        assert (points, keyword) == (45, "tensor")

    def test_injected_fallback_points(self):
        config = EngineConfig(chipset_rules=(), fallback_chipset_points=5)
        assert chipset_points("Snapdragon 8 Gen 3", config) == (5, None)

    def test_no_data_is_zero(self):
        assert compute_performance(make_device(), CONFIG).score == 0


# =============================================================================
# BATTERY TESTS
# =============================================================================

class TestBattery:
    """Test battery capacity buckets."""

    @pytest.mark.parametrize("capacity,expected", [
        (5000, 100), (6000, 100), (4500, 85), (4000, 70),
        (3500, 55), (3000, 40), (2500, 25), (2000, 10),
    ])
    def test_capacity_buckets(self, capacity, expected):
        assert compute_battery(make_device(battery_capacity=capacity)).score == expected

    def test_unknown_capacity_is_zero(self):
        score = compute_battery(make_device())
        assert score.score == 0
        assert "unknown" in score.reason

    def test_zero_capacity_is_absent(self):
        assert compute_battery(make_device(battery_capacity=0)).score == 0


# =============================================================================
# CAMERA TESTS
# =============================================================================

class TestCamera:
    """Test main and front camera scoring."""

    def test_main_and_front(self):
        device = make_device(main_camera_mp=50, front_camera_mp=12)
        assert compute_camera(device).score == 50  # 40 + 10

    def test_top_cameras_reach_100(self):
        device = make_device(main_camera_mp=200, front_camera_mp=50)
        assert compute_camera(device).score == 100

    def test_low_main_only(self):
        assert compute_camera(make_device(main_camera_mp=12)).score == 20

    def test_low_front_only(self):
        assert compute_camera(make_device(front_camera_mp=5)).score == 5

    @pytest.mark.parametrize("mp,expected", [
        (108, 60), (64, 50), (48, 40), (24, 30),
    ])
    def test_main_buckets(self, mp, expected):
        assert compute_camera(make_device(main_camera_mp=mp)).score == expected

    def test_no_cameras_is_zero(self):
        assert compute_camera(make_device()).score == 0


# =============================================================================
# DISPLAY TESTS
# =============================================================================

class TestDisplay:
    """Test display size buckets."""

    @pytest.mark.parametrize("size,expected", [
        (6.9, 95), (6.7, 95), (6.5, 90), (6.3, 85), (6.1, 80),
        (5.8, 75), (5.5, 70), (5.0, 65), (4.7, 50),
    ])
    def test_size_buckets(self, size, expected):
        assert compute_display(make_device(display_size=size)).score == expected

    def test_unknown_size_is_neutral(self):
        score = compute_display(make_device())
        assert score.score == NEUTRAL_DISPLAY_SCORE == 50
        assert "neutral" in score.reason


# =============================================================================
# BUILD TESTS
# =============================================================================

class TestBuild:
    """Test build quality bonuses."""

    def test_base_score(self):
        assert compute_build(make_device()).score == 50

    def test_all_bonuses(self):
        device = make_device(
            water_resistance="IP68",
            weight=187,
            security_features=("In-display fingerprint", "Face ID"),
            wireless_charging=15,
        )
        assert compute_build(device).score == 90  # 50 + 20 + 5 + 5 + 5 + 5

    def test_maximum_is_100(self):
        device = make_device(
            water_resistance="IP68",
            weight=140,
            security_features=("fingerprint", "face unlock"),
            wireless_charging=50,
        )
        assert compute_build(device).score == 100

    @pytest.mark.parametrize("rating,expected", [
        ("IP68", 70), ("IP67", 65), ("IP53", 60), ("Splash resistant", 50),
    ])
    def test_water_resistance(self, rating, expected):
        assert compute_build(make_device(water_resistance=rating)).score == expected

    @pytest.mark.parametrize("weight,expected", [
        (150, 65), (170, 60), (200, 55), (230, 50),
    ])
    def test_weight_bonus(self, weight, expected):
        assert compute_build(make_device(weight=weight)).score == expected

    def test_zero_wireless_charging_is_absent(self):
        assert compute_build(make_device(wireless_charging=0)).score == 50


# =============================================================================
# PRICE TESTS
# =============================================================================

class TestPrice:
    """Test inverse price buckets and currency conversion."""

    @pytest.mark.parametrize("price,expected", [
        (150, 100), (200, 100), (399, 85), (600, 70), (799, 55),
        (1000, 40), (1199, 25), (1500, 10),
    ])
    def test_price_buckets(self, price, expected):
        assert compute_price(make_device(current_price=price, currency="USD"), CONFIG).score == expected

    def test_npr_converted(self):
        device = make_device(current_price=130000, currency="NPR")
        score = compute_price(device, CONFIG)

        assert score.raw_value == pytest.approx(1000)
        assert score.score == 40

    def test_npr_rate_is_configurable(self):
        device = make_device(current_price=130000, currency="NPR")
        assert compute_price(device, EngineConfig(npr_rate=100)).score == 10

    def test_other_currency_not_converted(self):
        device = make_device(current_price=130000, currency="INR")
        assert compute_price(device, CONFIG).score == 10

    def test_launch_price_fallback(self):
        assert compute_price(make_device(launch_price=150), CONFIG).score == 100

    def test_zero_current_price_falls_back(self):
        device = make_device(current_price=0, launch_price=500)
        assert compute_price(device, CONFIG).score == 70

    @pytest.mark.parametrize("current", [float("nan"), -1, float("inf")])
    def test_unusable_current_price_falls_back(self, current):
        device = make_device(current_price=current, launch_price=500)
        assert compute_price(device, CONFIG).score == 70

    def test_unknown_price_is_zero(self):
        assert compute_price(make_device(), CONFIG).score == 0


# =============================================================================
# REVIEWS TESTS
# =============================================================================

class TestReviews:
    """Test review rating and confidence scoring."""

    def test_no_reviews_is_neutral(self):
        score = compute_reviews(make_device())
        assert score.score == NEUTRAL_REVIEWS_SCORE == 50.0

    def test_average_and_count_bonus(self):
        device = make_device(review_ratings=(3, 4))
        assert compute_reviews(device).score == pytest.approx(63.5)  # 62.5 + 1

    def test_count_bonus_capped(self):
        device = make_device(review_ratings=(4,) * 40)
        assert compute_reviews(device).score == pytest.approx(90)  # 75 + 15

    def test_perfect_reviews_clamped(self):
        device = make_device(review_ratings=(5, 5, 5, 5))
        assert compute_reviews(device).score == 100

    def test_single_one_star(self):
        assert compute_reviews(make_device(review_ratings=(1,))).score == pytest.approx(0.5)

    def test_count_without_ratings_is_neutral(self):
        device = make_device(review_count=5)
        assert compute_reviews(device).score == NEUTRAL_REVIEWS_SCORE

    def test_explicit_zero_count_is_neutral(self):
        device = make_device(review_ratings=(5, 5), review_count=0)
        assert compute_reviews(device).score == NEUTRAL_REVIEWS_SCORE


# =============================================================================
# RECENCY TESTS
# =============================================================================

class TestRecency:
    """Test months-since-release buckets."""

    @pytest.mark.parametrize("release,expected", [
        (date(2024, 12, 1), 100),
        (date(2024, 7, 1), 80),
        (date(2024, 1, 1), 70),
        (date(2023, 3, 1), 60),
        (date(2022, 6, 1), 45),
        (date(2021, 3, 1), 30),
        (date(2020, 1, 1), 15),
    ])
    def test_recency_buckets(self, release, expected):
        device = make_device(release_date=release)
        assert compute_recency(device, REFERENCE_DATE).score == expected

    def test_unknown_release_is_neutral(self):
        assert compute_recency(make_device(), REFERENCE_DATE).score == NEUTRAL_RECENCY_SCORE == 25

    def test_future_release_is_newest(self):
        device = make_device(release_date=date(2025, 3, 1))
        assert compute_recency(device, REFERENCE_DATE).score == 100

    def test_release_timestamp_counts_by_day(self):
        stamped = make_device(release_date=datetime(2024, 11, 1, 12, 30))
        plain = make_device(release_date=date(2024, 11, 1))

        score = compute_recency(stamped, REFERENCE_DATE)
        assert score == compute_recency(plain, REFERENCE_DATE)
        assert "2024-11-01 " in score.reason

    def test_timestamp_reference_date(self):
        assert months_since(date(2024, 1, 1), datetime(2024, 1, 31, 23, 59)) == 1

    def test_month_is_thirty_days(self):
        assert months_since(date(2024, 1, 1), date(2024, 1, 31)) == 1


# =============================================================================
# BOUNDS TESTS
# =============================================================================

ODD_NUMBERS = [None, 0, -5, float("nan"), float("inf"), 1e12]


class TestComponentBounds:
    """Every component stays within [0, 100] for messy input."""

    def test_realistic_devices(self):
        engine = ScoringEngine(reference_date=REFERENCE_DATE)
        for device in (flagship(), budget_phone()):
            for component in engine.components(device):
                assert isinstance(component, ComponentScore)
                assert 0 <= component.score <= 100

    @pytest.mark.parametrize("number,text", list(itertools.product(
        ODD_NUMBERS, [None, "", "IP68 snapdragon 8 fingerprint face"],
    )))
    def test_odd_values(self, number, text):
        device = make_device(
            ram_configurations=(number,) if number is not None else (),
            chipset=text,
            battery_capacity=number,
            main_camera_mp=number,
            front_camera_mp=number,
            display_size=number,
            water_resistance=text,
            weight=number,
            security_features=(text,) if text else (),
            wireless_charging=number,
            current_price=number,
            launch_price=number,
            currency="NPR",
            review_ratings=(number,) if number is not None else (),
            review_count=7,
        )
        engine = ScoringEngine(reference_date=REFERENCE_DATE)

        breakdown = engine.score(device)
        for value in breakdown.as_dict().values():
            assert math.isfinite(value)
            assert 0 <= value <= 100

    def test_out_of_range_ratings_clamped(self):
        device = make_device(review_ratings=(50, 99))
        assert compute_reviews(device).score == 100
        device = make_device(review_ratings=(-10,))
        assert compute_reviews(device).score == 0
