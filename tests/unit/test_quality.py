"""
Unit Tests - Data Quality
"""
import pytest
import polars as pl

from sales_analytics.quality.validators import (
    OrderValidator,
    ValidationSeverity,
    ValidationStatus,
    count_excluded,
    create_order_validator,
)


class TestOrderValidator:
    """Tests for OrderValidator"""

    def test_not_null_check_passes(self):
        """Test not null check with valid data"""
        df = pl.DataFrame({"order_id": ["a", "b", "c"]})

        result = OrderValidator().add_not_null_check("order_id").validate(df)

        assert result.status == ValidationStatus.PASSED
        assert result.passed_checks == 1

    def test_not_null_check_fails(self):
        """Test not null check with null values"""
        df = pl.DataFrame({"order_id": ["a", None, "c"]})

        result = OrderValidator().add_not_null_check("order_id").validate(df)

        assert result.status == ValidationStatus.FAILED
        assert result.failed_checks == 1
        assert result.get_check("not_null_order_id").failed_rows == 1

    def test_missing_column_fails_check(self):
        """Test check against a column that does not exist"""
        df = pl.DataFrame({"region": ["NA"]})

        result = OrderValidator().add_not_null_check("order_id").validate(df)

        assert result.status == ValidationStatus.FAILED
        assert "not found" in result.get_check("not_null_order_id").message

    def test_unique_check_ignores_nulls(self):
        """Test unique check counts duplicates among non-null values only"""
        df = pl.DataFrame({"order_id": ["a", None, None, "b"]})

        result = OrderValidator().add_unique_check("order_id").validate(df)

        assert result.status == ValidationStatus.PASSED

    def test_unique_check_fails(self):
        """Test unique check with duplicates"""
        df = pl.DataFrame({"order_id": ["a", "b", "a"]})

        result = OrderValidator().add_unique_check("order_id").validate(df)

        assert result.status == ValidationStatus.FAILED
        assert result.get_check("unique_order_id").failed_rows == 1

    def test_range_check(self):
        """Test range check"""
        df = pl.DataFrame({"discount_rate": [0.1, 0.5, -0.05, 1.2]})

        result = (
            OrderValidator()
            .add_range_check("discount_rate", min_value=0, max_value=1)
            .validate(df)
        )

        assert result.status == ValidationStatus.FAILED
        assert result.checks[0].failed_rows == 2

    def test_positive_check(self):
        """Test positive check with zero allowed"""
        df = pl.DataFrame({"units_sold": [0, 1, 5]})

        result = OrderValidator().add_positive_check("units_sold").validate(df)

        assert result.status == ValidationStatus.PASSED

    def test_enum_check(self):
        """Test allowed value check"""
        df = pl.DataFrame({"prime_member": [0, 1, 2, None]})

        result = OrderValidator().add_enum_check("prime_member", [0, 1]).validate(df)

        assert result.status == ValidationStatus.FAILED
        assert result.checks[0].failed_rows == 1

    def test_warning_severity(self):
        """Test warning severity gives partial status"""
        df = pl.DataFrame({"region": ["NA", None]})

        result = (
            OrderValidator()
            .add_not_null_check("region", severity=ValidationSeverity.WARNING)
            .validate(df)
        )

        assert result.status == ValidationStatus.PARTIAL
        assert result.warning_count == 1

    def test_strict_mode_fails_on_warning(self):
        """Test strict mode treats warnings as failures"""
        df = pl.DataFrame({"region": ["NA", None]})

        result = (
            OrderValidator(strict_mode=True)
            .add_not_null_check("region", severity=ValidationSeverity.WARNING)
            .validate(df)
        )

        assert result.status == ValidationStatus.FAILED

    def test_success_rate(self):
        """Test success rate calculation"""
        df = pl.DataFrame({"order_id": ["a", "b", None], "region": ["NA", "EU", "EU"]})

        result = (
            OrderValidator()
            .add_not_null_check("order_id")
            .add_not_null_check("region")
            .validate(df)
        )

        assert result.success_rate == 50.0

    def test_get_unknown_check(self):
        result = OrderValidator().validate(pl.DataFrame({"order_id": ["a"]}))

        with pytest.raises(KeyError):
            result.get_check("not_null_order_id")


class TestOrderValidatorPreset:
    """Tests for the preconfigured order validator"""

    def test_generated_orders_pass(self, generated_orders):
        result = create_order_validator().validate(generated_orders)

        assert result.failed_checks == 0
        assert result.status in (ValidationStatus.PASSED, ValidationStatus.PARTIAL)

    def test_missing_region_is_a_warning(self, sample_orders_df):
        result = create_order_validator().validate(sample_orders_df)

        assert result.status == ValidationStatus.PARTIAL
        assert not result.get_check("not_null_region").passed

    def test_out_of_range_discount_fails(self, order_factory):
        df = order_factory([{"discount_rate": 1.5}])

        result = create_order_validator().validate(df)

        assert result.status == ValidationStatus.FAILED
        assert not result.get_check("range_discount_rate").passed


class TestCountExcluded:
    """Tests for report exclusion counts"""

    def test_counts_completed_rows_with_missing_values(self, order_factory):
        df = order_factory([
            {"region": None},
            {"order_date": None},
            {"region": None, "order_status": "Cancelled"},
            {},
        ])

        assert count_excluded(df, ["region", "order_date"]) == 2
        assert count_excluded(df, ["region"]) == 1

    def test_no_required_columns(self, order_factory):
        df = order_factory([{"region": None}])

        assert count_excluded(df, []) == 0

    def test_custom_completed_status(self, order_factory):
        df = order_factory([{"region": None, "order_status": "Shipped"}])

        assert count_excluded(df, ["region"], completed_status="Shipped") == 1
        assert count_excluded(df, ["region"]) == 0
