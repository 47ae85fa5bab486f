"""Refund calculators - statutory formulas behind the refund estimates shown to users.

Labels and formulas stay in Italian since they are rendered as-is in reports.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from rimborsami_engine.domain.models import BankAnalysis, BreakdownItem, RefundEstimate


@dataclass(frozen=True)
class UsuryThreshold:
    tegm: float  # average effective rate
    threshold: float  # TEGM x 1.25 + 4%
    label: str


# Banca d'Italia usury thresholds, Q2 2025 (D.M. 31/03/2025)
USURY_THRESHOLDS = {
    "mutuo_fisso": UsuryThreshold(3.35, 8.1875, "Mutuo a tasso fisso"),
    "mutuo_variabile": UsuryThreshold(4.92, 10.15, "Mutuo a tasso variabile"),
    "credito_personale": UsuryThreshold(10.90, 17.625, "Credito personale"),
    "carta_revolving": UsuryThreshold(15.36, 23.20, "Carta di credito revolving"),
    "fido_5000": UsuryThreshold(10.35, 16.9375, "Apertura credito fino a €5.000"),
    "fido_oltre_5000": UsuryThreshold(9.24, 15.55, "Apertura credito oltre €5.000"),
    "credito_finalizzato": UsuryThreshold(10.36, 16.95, "Credito finalizzato"),
    "cessione_quinto": UsuryThreshold(9.89, 16.3625, "Cessione del quinto"),
    "leasing": UsuryThreshold(5.67, 11.0875, "Leasing"),
    "factoring": UsuryThreshold(5.88, 11.35, "Factoring"),
    "prestito": UsuryThreshold(10.90, 17.625, "Prestito"),
}

DEFAULT_USURY_PRODUCT = "credito_personale"
USURY_SOURCE = "Banca d'Italia - D.M. 31/03/2025"
USURY_VALID_PERIOD = "Q2 2025 (1 aprile - 30 giugno)"

# EU Regulation 261/2004 compensation bands: (max km, amount, label)
FLIGHT_COMPENSATION = (
    (1500, 250, "Tratta breve (fino a 1.500 km)"),
    (3500, 400, "Tratta media (1.500-3.500 km)"),
    (float("inf"), 600, "Tratta lunga (oltre 3.500 km)"),
)

FINE_PROBABILITY = {
    "alta": (1.0, "Alta (>70%)", "high"),
    "media": (0.5, "Media (40-70%)", "medium"),
    "bassa": (0.3, "Bassa (<40%)", "low"),
}

CONDOMINIUM_LEGAL_COSTS = {
    "semplice": (500, 1000),
    "media": (1000, 1500),
    "complessa": (1500, 2500),
}

MONTHLY_WORK_HOURS = 173  # 40h/week x 4.33
OVERTIME_PREMIUM = 1.25
TFR_DIVISOR = 13.5
DEFAULT_NOTIFICATION_FEES = 15


def _cents(value: float) -> float:
    return round(value * 100) / 100


def _it_number(value: float, decimals: Optional[int] = None) -> str:
    """Italian number formatting: thousands with '.', decimals with ','"""
    if decimals is None:
        decimals = 2 if value % 1 else 0
    text = f"{value:,.{decimals}f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def _eur(value: float, decimals: Optional[int] = None) -> str:
    return "€" + _it_number(value, decimals)


def _num(value: float) -> str:
    return f"{value:g}"


def _zero(formula: str, legal_reference: str = "", confidence: str = "low",
          breakdown: Optional[List[BreakdownItem]] = None) -> RefundEstimate:
    return RefundEstimate(
        amount=0,
        formula=formula,
        legal_reference=legal_reference,
        confidence=confidence,
        breakdown=breakdown or [],
    )


def get_usury_threshold(product_type: str) -> Optional[UsuryThreshold]:
    """Look up the threshold for a product, tolerating free-form product names"""
    normalized = re.sub(r"[^a-z0-9]", "_", (product_type or "").lower())
    if not normalized:
        return None

    for key, threshold in USURY_THRESHOLDS.items():
        if key in normalized or normalized in key:
            return threshold

    if any(token in normalized for token in ("credit", "prest", "finanziament")):
        return USURY_THRESHOLDS[DEFAULT_USURY_PRODUCT]

    return None


def calculate_bank_usury(
    applied_taeg: float,
    product_type: str,
    total_interest: float,
) -> RefundEstimate:
    """
    Refund of the interest share above the usury threshold.

    Formula: refund = interest x ((TAEG - threshold) / TAEG)
    Unknown products are checked against the personal-credit threshold.
    """
    threshold = get_usury_threshold(product_type) or USURY_THRESHOLDS[DEFAULT_USURY_PRODUCT]

    if applied_taeg <= threshold.threshold:
        return RefundEstimate(
            amount=0,
            formula=f"TAEG {_num(applied_taeg)}% ≤ Soglia usura {_num(threshold.threshold)}%",
            legal_reference="Art. 1815 c.c., L. 108/1996",
            confidence="high",
            breakdown=[
                BreakdownItem("TAEG applicato", _num(applied_taeg), "%"),
                BreakdownItem("TEGM di riferimento", _num(threshold.tegm), "%"),
                BreakdownItem("Soglia usura", _num(threshold.threshold), "%"),
                BreakdownItem("Esito", "Non usurario"),
            ],
            source=USURY_SOURCE,
            valid_period=USURY_VALID_PERIOD,
        )

    excess = (applied_taeg - threshold.threshold) / applied_taeg
    refund = total_interest * excess

    return RefundEstimate(
        amount=_cents(refund),
        formula=(
            f"{_eur(total_interest)} × (({_num(applied_taeg)}% - {_num(threshold.threshold)}%) "
            f"/ {_num(applied_taeg)}%)"
        ),
        legal_reference="Art. 1815 c.c. - In caso di usura, non sono dovuti interessi",
        confidence="high",
        breakdown=[
            BreakdownItem("Tipo prodotto", threshold.label),
            BreakdownItem("TAEG applicato", _num(applied_taeg), "%"),
            BreakdownItem("TEGM di riferimento", _num(threshold.tegm), "%"),
            BreakdownItem("Soglia usura (TEGM × 1.25 + 4%)", _num(threshold.threshold), "%"),
            BreakdownItem("Eccedenza", f"{excess * 100:.2f}%"),
            BreakdownItem("Interessi pagati", _eur(total_interest)),
            BreakdownItem("Rimborso calcolato", _eur(refund, 2)),
        ],
        source=USURY_SOURCE,
        valid_period=USURY_VALID_PERIOD,
    )


def calculate_flight_compensation(
    distance_km: float,
    delay_hours: float,
    cancelled: bool,
    notice_days: Optional[int] = None,
) -> RefundEstimate:
    """
    Compensation under EU Regulation 261/2004.

    - Not cancelled and delayed less than 3h: nothing due
    - Cancelled with 14+ days notice: airline exempt
    - 250 / 400 / 600 by distance band, halved for a 3-4h delay on long haul
    """
    if not cancelled and delay_hours < 3:
        return _zero(
            "Ritardo inferiore a 3 ore",
            "Reg. CE 261/2004 - Art. 7",
            "high",
            [
                BreakdownItem("Ritardo", _num(delay_hours), "ore"),
                BreakdownItem("Soglia minima", "3", "ore"),
                BreakdownItem("Esito", "Non compensabile"),
            ],
        )

    if cancelled and notice_days is not None and notice_days >= 14:
        return _zero(
            "Preavviso superiore a 14 giorni",
            "Reg. CE 261/2004 - Art. 5(1)(c)",
            "high",
            [
                BreakdownItem("Preavviso ricevuto", str(notice_days), "giorni"),
                BreakdownItem("Soglia esenzione", "14", "giorni"),
                BreakdownItem("Esito", "Compagnia esente"),
            ],
        )

    max_km, base_amount, band_label = next(band for band in FLIGHT_COMPENSATION if distance_km <= band[0])
    amount = float(base_amount)

    if not cancelled and 3 <= delay_hours < 4 and distance_km > 3500:
        amount = amount * 0.5

    return RefundEstimate(
        amount=amount,
        formula=f"Distanza {_it_number(distance_km)} km → Compensazione {_eur(amount)}",
        legal_reference="Reg. CE 261/2004 - Art. 7",
        confidence="high",
        breakdown=[
            BreakdownItem("Distanza volo", _it_number(distance_km), "km"),
            BreakdownItem("Fascia", band_label),
            BreakdownItem(
                "Volo cancellato" if cancelled else "Ritardo all'arrivo",
                "Sì" if cancelled else f"{_num(delay_hours)} ore",
            ),
            BreakdownItem("Compensazione base", _eur(base_amount)),
            BreakdownItem("Compensazione finale", _eur(amount)),
        ],
        source="Regolamento CE 261/2004",
    )


def calculate_fine_refund(
    fine_amount: float,
    appeal_probability: str,
    notification_fees: Optional[float] = None,
) -> RefundEstimate:
    """Expected refund of a traffic fine appeal, weighted by its chance of success"""
    fees = notification_fees or DEFAULT_NOTIFICATION_FEES
    potential = fine_amount + fees
    factor, probability_label, confidence = FINE_PROBABILITY.get(appeal_probability, FINE_PROBABILITY["bassa"])
    estimate = potential * factor

    return RefundEstimate(
        amount=_cents(estimate),
        formula=f"({_eur(fine_amount)} + {_eur(fees)}) × {_num(factor * 100)}%",
        legal_reference="Art. 203 CdS, L. 689/1981",
        confidence=confidence,
        breakdown=[
            BreakdownItem("Importo multa", _eur(fine_amount)),
            BreakdownItem("Spese notifica", _eur(fees)),
            BreakdownItem("Totale potenziale", _eur(potential)),
            BreakdownItem("Probabilità accoglimento", probability_label),
            BreakdownItem("Stima rimborso ponderata", _eur(estimate, 2)),
        ],
    )


def calculate_work_refund(
    kind: str,
    monthly_salary: float,
    overtime_hours: Optional[float] = None,
    hourly_pay: Optional[float] = None,
    years_of_service: Optional[float] = None,
    contested_months: Optional[int] = None,
    contested_monthly_amount: Optional[float] = None,
) -> RefundEstimate:
    """
    Amounts owed by an employer.

    kind is one of:
    - "straordinario": unpaid overtime at +25%
    - "tfr": severance pay accrued, (monthly x 13) / 13.5 per year
    - "differenze_retributive": pay differences, monthly x months
    """
    if kind == "straordinario":
        base_hourly = hourly_pay or (monthly_salary / MONTHLY_WORK_HOURS)
        overtime_hourly = base_hourly * OVERTIME_PREMIUM
        hours = overtime_hours or 0
        total = overtime_hourly * hours
        return RefundEstimate(
            amount=_cents(total),
            formula=f"€{base_hourly:.2f}/h × 1.25 × {_num(hours)} ore",
            legal_reference="CCNL di riferimento, Art. 2108 c.c.",
            confidence="medium",
            breakdown=[
                BreakdownItem("Paga oraria base", f"€{base_hourly:.2f}"),
                BreakdownItem("Maggiorazione straordinario", "25%"),
                BreakdownItem("Paga oraria straordinario", f"€{overtime_hourly:.2f}"),
                BreakdownItem("Ore non pagate", _num(hours), "ore"),
                BreakdownItem("Totale dovuto", _eur(total, 2)),
            ],
        )

    if kind == "tfr":
        years = years_of_service or 1
        yearly_salary = monthly_salary * 13
        tfr = (yearly_salary / TFR_DIVISOR) * years
        return RefundEstimate(
            amount=_cents(tfr),
            formula=f"({_eur(monthly_salary)} × 13) / 13.5 × {_num(years)} anni",
            legal_reference="Art. 2120 c.c.",
            confidence="high",
            breakdown=[
                BreakdownItem("Retribuzione mensile", _eur(monthly_salary)),
                BreakdownItem("Retribuzione annua (con 13ª)", _eur(yearly_salary)),
                BreakdownItem("Divisore TFR", _num(TFR_DIVISOR)),
                BreakdownItem("Anni di servizio", _num(years)),
                BreakdownItem("TFR maturato", _eur(tfr, 2)),
            ],
        )

    if kind == "differenze_retributive":
        monthly = contested_monthly_amount or 0
        months = contested_months or 1
        total = monthly * months
        return RefundEstimate(
            amount=_cents(total),
            formula=f"{_eur(monthly)}/mese × {months} mesi",
            legal_reference="CCNL di riferimento, Art. 2103 c.c.",
            confidence="medium",
            breakdown=[
                BreakdownItem("Differenza mensile", _eur(monthly)),
                BreakdownItem("Mesi contestati", str(months)),
                BreakdownItem("Totale differenze", _eur(total, 2)),
            ],
        )

    return _zero("Tipo non riconosciuto")


def calculate_condominium_refund(
    kind: str,
    contested_amount: Optional[float] = None,
    complexity: str = "media",
) -> RefundEstimate:
    """
    Condominium disputes.

    kind is one of "impugnazione_delibera" (legal costs of appealing a
    resolution), "spese_illegittime" (illegitimate expenses, fully
    recoverable) or "rivalsa_amministratore" (recourse against the
    administrator).
    """
    amount = contested_amount or 0

    if kind == "impugnazione_delibera":
        level = complexity if complexity in CONDOMINIUM_LEGAL_COSTS else "media"
        low, high = CONDOMINIUM_LEGAL_COSTS[level]
        return RefundEstimate(
            amount=(low + high) / 2,
            formula=f"Spese legali impugnazione: €{low}-{high}",
            legal_reference="Art. 1137 c.c., D.M. 55/2014 (Parametri forensi)",
            confidence="medium",
            breakdown=[
                BreakdownItem("Tipo procedura", "Impugnazione delibera"),
                BreakdownItem("Complessità", level.capitalize()),
                BreakdownItem("Spese legali minime", _eur(low)),
                BreakdownItem("Spese legali massime", _eur(high)),
                BreakdownItem("Termine per impugnazione", "30 giorni", "dalla delibera"),
            ],
        )

    if kind == "spese_illegittime":
        return RefundEstimate(
            amount=amount,
            formula=f"Rimborso 100% spese illegittime: {_eur(amount)}",
            legal_reference="Art. 1130-bis c.c., Art. 1135 c.c.",
            confidence="high",
            breakdown=[
                BreakdownItem("Importo contestato", _eur(amount)),
                BreakdownItem("Percentuale recuperabile", "100%"),
                BreakdownItem("Rimborso", _eur(amount)),
            ],
        )

    return RefundEstimate(
        amount=amount,
        formula=f"Rivalsa su amministratore: {_eur(amount)}",
        legal_reference="Art. 1218 c.c., Art. 1129 c.c.",
        confidence="medium",
        breakdown=[BreakdownItem("Danni documentati", _eur(amount))],
    )


@dataclass(frozen=True)
class UsuriousRate:
    description: str
    value: float
    threshold: float


def calculate_refund_from_bank_analysis(
    taeg: Optional[float] = None,
    account_type: Optional[str] = None,
    total_interest: Optional[float] = None,
    usurious_rates: Sequence[UsuriousRate] = (),
    estimated_refund: Optional[float] = None,
) -> RefundEstimate:
    """
    Best refund estimate from a bank document.

    Priority:
    1. First detected usurious rate against its own threshold
    2. TAEG against the product's published threshold
    3. The parser's own estimate, at medium confidence
    """
    interest = total_interest or estimated_refund or 0

    if usurious_rates:
        usury = usurious_rates[0]
        if interest > 0 and usury.value > usury.threshold:
            excess = (usury.value - usury.threshold) / usury.value
            refund = interest * excess
            return RefundEstimate(
                amount=_cents(refund),
                formula=(
                    f"{_eur(interest)} × (({_num(usury.value)}% - {_num(usury.threshold)}%) "
                    f"/ {_num(usury.value)}%)"
                ),
                legal_reference="Art. 1815 c.c. - Interessi usurari nulli",
                confidence="high",
                breakdown=[
                    BreakdownItem("Tasso applicato", _num(usury.value), "%"),
                    BreakdownItem("Soglia usura", _num(usury.threshold), "%"),
                    BreakdownItem("Eccedenza percentuale", f"{excess * 100:.2f}%"),
                    BreakdownItem("Interessi totali pagati", _eur(interest)),
                    BreakdownItem("Rimborso calcolato", _eur(refund, 2)),
                ],
                source="Banca d'Italia - Tassi soglia usura",
            )

    if taeg:
        product = account_type or DEFAULT_USURY_PRODUCT
        threshold = get_usury_threshold(product)
        if threshold is not None and taeg > threshold.threshold:
            return calculate_bank_usury(taeg, product, interest)

    if estimated_refund and estimated_refund > 0:
        return RefundEstimate(
            amount=estimated_refund,
            formula="Stima basata su analisi documento",
            legal_reference="Art. 1815 c.c., L. 108/1996",
            confidence="medium",
            breakdown=[
                BreakdownItem("Stima AI", _eur(estimated_refund)),
                BreakdownItem("Nota", "Verificare con documenti originali"),
            ],
        )

    return _zero("Dati insufficienti per il calcolo")


def estimate_bank_document_refund(bank: Optional[BankAnalysis]) -> RefundEstimate:
    """Feed a parsed bank analysis through calculate_refund_from_bank_analysis"""
    if bank is None:
        return _zero("Dati insufficienti per il calcolo")

    taeg = bank.effective_rate or bank.nominal_rate
    usurious_rates = []
    if bank.is_usurious and taeg and bank.usury_threshold:
        usurious_rates.append(UsuriousRate("Tasso applicato", taeg, bank.usury_threshold))

    return calculate_refund_from_bank_analysis(
        taeg=taeg,
        account_type=bank.account_type,
        usurious_rates=usurious_rates,
        estimated_refund=bank.estimated_refund,
    )
