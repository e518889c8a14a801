"""Unit tests for position size validation."""
import pytest

from sizingkit.core.exceptions import DataValidationError
from sizingkit.core.models import PositionSizeRequest, SizingMethod, SizingResult
from sizingkit.risk.controls import validate_position_size
from sizingkit.risk.sizing import calculate_atr_size, calculate_fixed_risk_size


def make_result(**overrides) -> SizingResult:
    fields = dict(
        method=SizingMethod.FIXED_RISK,
        shares=100,
        position_size=5000.0,
        portfolio_weight=0.05,
        risk_amount=1000.0,
        risk_reward_ratio=None,
        stop_loss=40.0,
        target_price=None,
    )
    fields.update(overrides)
    return SizingResult(**fields)


class TestValidatePositionSize:
    """Test checks against portfolio limits."""

    def test_within_limits_is_valid(self):
        report = validate_position_size(make_result(), 100000)
        assert report.is_valid
        assert report.warnings == []

    def test_weight_violation(self):
        """Weight above the 10% default flags one warning."""
        report = validate_position_size(make_result(portfolio_weight=0.15), 100000)

        assert not report.is_valid
        assert report.warnings == ["Position size (15.0%) exceeds maximum allowed (10%)"]

    def test_risk_violation(self):
        """Risk above the 5% default flags one warning."""
        report = validate_position_size(make_result(risk_amount=6000.0), 100000)

        assert not report.is_valid
        assert report.warnings == ["Risk amount (6.00%) exceeds maximum allowed (5%)"]

    def test_zero_shares_always_invalid(self):
        """Zero shares is invalid even when weight and risk pass."""
        report = validate_position_size(
            make_result(shares=0, position_size=0.0, portfolio_weight=0.0, risk_amount=0.0),
            100000
        )

        assert not report.is_valid
        assert report.warnings == ["Calculated position size is zero"]

    def test_low_reward_is_advisory(self):
        """Risk/reward below 1:1 warns without invalidating."""
        report = validate_position_size(make_result(risk_reward_ratio=0.5), 100000)

        assert report.is_valid
        assert report.warnings == ["Risk/reward ratio (0.50) is less than 1:1"]

    def test_reward_of_one_is_not_flagged(self):
        report = validate_position_size(make_result(risk_reward_ratio=1.0), 100000)
        assert report.warnings == []

    def test_limits_at_threshold_pass(self):
        """Limits are exceeded only strictly above the threshold."""
        report = validate_position_size(
            make_result(portfolio_weight=0.10, risk_amount=5000.0),
            100000
        )
        assert report.is_valid

    def test_custom_limits(self):
        """Custom limits change the thresholds and the messages."""
        report = validate_position_size(
            make_result(portfolio_weight=0.15, risk_amount=3000.0),
            100000,
            max_position_weight=0.25,
            max_risk_percent=0.02
        )

        assert not report.is_valid
        assert report.warnings == ["Risk amount (3.00%) exceeds maximum allowed (2%)"]

    @pytest.mark.parametrize("portfolio_value", [0, -100000])
    def test_non_positive_portfolio_rejected(self, portfolio_value):
        """Risk percentage is undefined without a positive portfolio."""
        with pytest.raises(DataValidationError, match="portfolio_value"):
            validate_position_size(make_result(), portfolio_value)

    def test_all_warnings_in_order(self):
        """Every violation is reported, weight then risk then zero then reward."""
        report = validate_position_size(
            make_result(shares=0, portfolio_weight=0.2, risk_amount=8000.0, risk_reward_ratio=0.25),
            100000
        )

        assert not report.is_valid
        assert report.warnings == [
            "Position size (20.0%) exceeds maximum allowed (10%)",
            "Risk amount (8.00%) exceeds maximum allowed (5%)",
            "Calculated position size is zero",
            "Risk/reward ratio (0.25) is less than 1:1",
        ]


@pytest.mark.unit
class TestValidationWithStrategies:
    """Validate results produced by the sizing strategies."""

    def test_fixed_risk_example_exceeds_weight(self, base_request):
        """1000 shares at $50 is half the portfolio."""
        result = calculate_fixed_risk_size(base_request)
        report = validate_position_size(result, base_request.portfolio_value)

        assert not report.is_valid
        assert report.warnings == ["Position size (50.0%) exceeds maximum allowed (10%)"]

    def test_degenerate_atr_result_is_invalid(self):
        result = calculate_atr_size(PositionSizeRequest(
            portfolio_value=100000,
            entry_price=50.0,
            stop_loss=50.0,
            risk_percent=0.01
        ))
        report = validate_position_size(result, 100000)

        assert not report.is_valid
        assert "Calculated position size is zero" in report.warnings
