"""Unit tests for refund calculators"""

import pytest

from rimborsami_engine.domain.models import BankAnalysis
from rimborsami_engine.domain.refunds import (
    USURY_THRESHOLDS,
    UsuriousRate,
    calculate_bank_usury,
    calculate_condominium_refund,
    calculate_fine_refund,
    calculate_flight_compensation,
    calculate_refund_from_bank_analysis,
    calculate_work_refund,
    estimate_bank_document_refund,
    get_usury_threshold,
)


class TestUsury:
    """Test interest refunds above the usury threshold"""

    @pytest.mark.parametrize(
        "product, key",
        [
            ("mutuo fisso", "mutuo_fisso"),
            ("Carta Revolving", "carta_revolving"),
            ("leasing auto", "leasing"),
            ("prestito personale", "prestito"),
            ("finanziamento auto", "credito_personale"),
        ],
    )
    def test_threshold_lookup(self, product, key):
        assert get_usury_threshold(product) == USURY_THRESHOLDS[key]

    def test_threshold_lookup_unknown(self):
        assert get_usury_threshold("") is None
        assert get_usury_threshold("conto deposito") is None

    def test_within_threshold_is_zero(self):
        estimate = calculate_bank_usury(15, "credito_personale", 1000)

        assert estimate.amount == 0
        assert estimate.confidence == "high"
        assert estimate.breakdown[-1].value == "Non usurario"

    def test_above_threshold(self):
        """Test refund = interest x excess share of the TAEG"""
        estimate = calculate_bank_usury(20, "credito_personale", 1000)

        assert estimate.amount == pytest.approx(118.75)
        assert estimate.formula == "€1.000 × ((20% - 17.625%) / 20%)"
        assert estimate.valid_period is not None

    def test_unknown_product_uses_personal_credit(self):
        assert calculate_bank_usury(20, "conto deposito", 1000).amount == pytest.approx(118.75)


class TestFlight:
    """Test EU 261/2004 compensation bands"""

    @pytest.mark.parametrize(
        "distance, amount",
        [
            (800, 250),
            (1500, 250),
            (2000, 400),
            (3500, 400),
            (6000, 600),
        ],
    )
    def test_distance_bands(self, distance, amount):
        assert calculate_flight_compensation(distance, delay_hours=5, cancelled=False).amount == amount

    def test_short_delay_not_compensable(self):
        estimate = calculate_flight_compensation(2000, delay_hours=2.5, cancelled=False)
        assert estimate.amount == 0
        assert estimate.confidence == "high"

    def test_long_haul_short_delay_halved(self):
        assert calculate_flight_compensation(6000, delay_hours=3.5, cancelled=False).amount == 300

    def test_cancellation_with_notice_exempt(self):
        assert calculate_flight_compensation(2000, 0, cancelled=True, notice_days=14).amount == 0

    def test_cancellation_with_short_notice(self):
        assert calculate_flight_compensation(6000, 0, cancelled=True, notice_days=3).amount == 600

    def test_formula_uses_italian_number_format(self):
        estimate = calculate_flight_compensation(2300, delay_hours=4, cancelled=False)
        assert estimate.formula == "Distanza 2.300 km → Compensazione €400"


@pytest.mark.parametrize(
    "probability, amount, confidence",
    [
        ("alta", 115, "high"),
        ("media", 57.5, "medium"),
        ("bassa", 34.5, "low"),
        ("sconosciuta", 34.5, "low"),
    ],
)
def test_fine_refund(probability, amount, confidence):
    """Test fine + notification fees weighted by appeal probability"""
    estimate = calculate_fine_refund(100, probability)

    assert estimate.amount == pytest.approx(amount)
    assert estimate.confidence == confidence


def test_fine_refund_custom_fees():
    assert calculate_fine_refund(100, "alta", notification_fees=20).amount == 120


class TestWork:
    def test_overtime(self):
        """Test unpaid overtime at +25%"""
        estimate = calculate_work_refund("straordinario", 1730, overtime_hours=8, hourly_pay=10)
        assert estimate.amount == 100

    def test_overtime_hourly_from_salary(self):
        estimate = calculate_work_refund("straordinario", 1730, overtime_hours=10)
        assert estimate.amount == 125

    def test_tfr(self):
        estimate = calculate_work_refund("tfr", 1350, years_of_service=2)

        assert estimate.amount == pytest.approx(2600)
        assert estimate.confidence == "high"

    def test_pay_differences(self):
        estimate = calculate_work_refund(
            "differenze_retributive", 1500, contested_months=6, contested_monthly_amount=200
        )
        assert estimate.amount == 1200

    def test_unknown_kind_is_zero(self):
        estimate = calculate_work_refund("ferie", 1500)

        assert estimate.amount == 0
        assert estimate.confidence == "low"


class TestCondominium:
    @pytest.mark.parametrize(
        "complexity, amount",
        [("semplice", 750), ("media", 1250), ("complessa", 2000), ("ignota", 1250)],
    )
    def test_resolution_appeal_legal_costs(self, complexity, amount):
        assert calculate_condominium_refund("impugnazione_delibera", complexity=complexity).amount == amount

    def test_illegitimate_expenses_fully_recoverable(self):
        estimate = calculate_condominium_refund("spese_illegittime", contested_amount=300)

        assert estimate.amount == 300
        assert estimate.confidence == "high"

    def test_administrator_recourse(self):
        assert calculate_condominium_refund("rivalsa_amministratore", contested_amount=400).amount == 400


class TestBankAnalysisRefund:
    """Test the priority between detected rates, TAEG and parser estimate"""

    def test_detected_usurious_rate_first(self):
        estimate = calculate_refund_from_bank_analysis(
            taeg=30,
            account_type="prestito",
            total_interest=1000,
            usurious_rates=[UsuriousRate("Tasso applicato", 25, 20)],
        )
        assert estimate.amount == 200

    def test_taeg_against_product_threshold(self):
        estimate = calculate_refund_from_bank_analysis(taeg=20, account_type="prestito personale", total_interest=1000)
        assert estimate.amount == pytest.approx(118.75)

    def test_parser_estimate_last(self):
        estimate = calculate_refund_from_bank_analysis(taeg=10, account_type="prestito", estimated_refund=250)

        assert estimate.amount == 250
        assert estimate.confidence == "medium"

    def test_insufficient_data(self):
        estimate = calculate_refund_from_bank_analysis()

        assert estimate.amount == 0
        assert estimate.confidence == "low"

    def test_from_parsed_bank_analysis(self):
        bank = BankAnalysis(effective_rate=25, usury_threshold=20, is_usurious=True, estimated_refund=500)
        assert estimate_bank_document_refund(bank).amount == 100

    def test_without_bank_analysis(self):
        assert estimate_bank_document_refund(None).amount == 0
