"""
Unit tests for the document totals pipeline.

No database access: totals are pure Decimal arithmetic.
"""

from decimal import Decimal

import pytest

from apps.invoicing.services import (
    InvalidPercentageError,
    calculate_line_total,
    calculate_totals,
    validate_percentage,
)


class TestLineTotal:

    def test_quantity_times_price(self):
        assert calculate_line_total(3, Decimal('19.99')) == Decimal('59.97')

    def test_accepts_strings(self):
        assert calculate_line_total('2', '0.50') == Decimal('1.00')

    def test_rounds_half_up_to_cents(self):
        assert calculate_line_total(1, Decimal('0.125')) == Decimal('0.13')


class TestCalculateTotals:

    def test_full_pipeline(self):
        totals = calculate_totals(
            [Decimal('30.00'), Decimal('300.00')],
            discount_percentage=Decimal('10'),
            tax_percentage=Decimal('20'),
        )

        assert totals.subtotal == Decimal('330.00')
        assert totals.discount == Decimal('33.00')
        # tax applies to the discounted amount: 297.00 * 20%
        assert totals.tax == Decimal('59.40')
        assert totals.total == Decimal('356.40')

    def test_tax_rounds_half_up(self):
        totals = calculate_totals([Decimal('1.00')], tax_percentage=Decimal('7.5'))

        assert totals.tax == Decimal('0.08')
        assert totals.total == Decimal('1.08')

    def test_stored_amounts_reconcile_exactly(self):
        totals = calculate_totals(
            [Decimal('33.33'), Decimal('33.33'), Decimal('33.34')],
            discount_percentage=Decimal('33.33'),
            tax_percentage=Decimal('17.5'),
        )

        assert totals.subtotal == Decimal('100.00')
        assert totals.discount == Decimal('33.33')
        assert totals.tax == Decimal('11.67')
        assert totals.total == Decimal('78.34')
        assert totals.total == totals.subtotal - totals.discount + totals.tax

    def test_subtotal_equals_sum_of_rounded_lines(self):
        lines = [calculate_line_total(3, '0.335'), calculate_line_total(7, '1.115')]

        totals = calculate_totals(lines)

        assert totals.subtotal == sum(lines)

    def test_without_discount_reduces_to_subtotal_plus_tax(self):
        totals = calculate_totals([Decimal('250.00')], tax_percentage=Decimal('8.25'))

        assert totals.discount == Decimal('0.00')
        assert totals.total == totals.subtotal + totals.tax == Decimal('270.63')

    def test_full_discount_zeroes_total(self):
        totals = calculate_totals([Decimal('99.99')], discount_percentage=100, tax_percentage=20)

        assert totals.total == Decimal('0.00')

    def test_no_lines(self):
        totals = calculate_totals([])

        assert totals.subtotal == totals.total == Decimal('0.00')

    def test_as_model_fields(self):
        fields = calculate_totals([Decimal('10')], tax_percentage=10).as_model_fields()

        assert fields == {
            'subtotal_amount': Decimal('10.00'),
            'discount_amount': Decimal('0.00'),
            'tax_amount': Decimal('1.00'),
            'total_amount': Decimal('11.00'),
        }


class TestPercentageValidation:

    @pytest.mark.parametrize('value', ['0', '100', '12.5'])
    def test_bounds_are_inclusive(self, value):
        assert validate_percentage(value) == Decimal(value)

    @pytest.mark.parametrize('value', ['-0.01', '100.01', '250'])
    def test_out_of_range(self, value):
        with pytest.raises(InvalidPercentageError):
            validate_percentage(value)

    def test_pipeline_rejects_bad_tax(self):
        with pytest.raises(InvalidPercentageError):
            calculate_totals([Decimal('10')], tax_percentage=Decimal('101'))

    def test_none_means_zero(self):
        assert validate_percentage(None) == Decimal('0')
