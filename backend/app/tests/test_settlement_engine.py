"""
Tests for the settlement engine.
"""
import math
import pytest
from app.schemas.settlement import SettlementParticipant, SettlementReceipt, HouseholdExpense
from app.services.settlement_engine import (
    calculate_settlement, generate_transfers, headcount_from_weight
)


def participant(household_id, weight=1.0, name=None):
    return SettlementParticipant(
        household_id=household_id,
        household_name=name or household_id.upper(),
        weight=weight
    )


def receipt(receipt_id, total, paid_by, participants, category="Food"):
    return SettlementReceipt(
        id=receipt_id,
        grand_total=total,
        category=category,
        paid_by=paid_by,
        participants=participants
    )


def ledger(data):
    return {h.household_id: h for h in data.households}


def test_no_receipts_gives_zero_ledger():
    """Test that an empty receipt list yields zeros and no transfers."""
    data = calculate_settlement([], [participant("a"), participant("b", 0.5)])

    assert data.total_weight == 1.5
    assert data.transfers == []
    assert data.categories == []
    for household in data.households:
        assert household.should_pay == 0
        assert household.paid == 0
        assert household.net_amount == 0


def test_shared_receipt_conserves_money():
    """Test that a fully shared receipt paid by a participant nets to zero."""
    participants = [participant("a"), participant("b"), participant("c", 0.5)]
    data = calculate_settlement(
        [receipt("r1", 100, "a", ["a", "b", "c"])],
        participants
    )

    assert abs(sum(h.net_amount for h in data.households)) <= 0.02


def test_weight_proportionality():
    """Test that shares follow participant weights."""
    data = calculate_settlement(
        [receipt("r1", 150, "a", ["a", "b"])],
        [participant("a", 1), participant("b", 0.5)]
    )
    rows = ledger(data)

    assert rows["a"].should_pay == 100.00
    assert rows["b"].should_pay == 50.00
    assert rows["a"].paid == 150.00
    assert rows["a"].net_amount == 50.00
    assert rows["b"].net_amount == -50.00


def test_receipt_with_no_matching_participant_is_ignored():
    """Test that a receipt nobody in the trip shares credits nobody."""
    data = calculate_settlement(
        [receipt("r1", 80, "a", ["stranger"])],
        [participant("a"), participant("b")]
    )
    rows = ledger(data)

    assert rows["a"].should_pay == 0
    assert rows["a"].paid == 0
    assert rows["b"].should_pay == 0
    assert data.categories == []
    assert data.transfers == []


def test_receipt_with_only_zero_weight_participants_is_ignored():
    """Test that zero participating weight skips the receipt, payer included."""
    data = calculate_settlement(
        [receipt("r1", 40, "a", ["b"])],
        [participant("a"), participant("b", 0)]
    )
    rows = ledger(data)

    assert rows["a"].paid == 0
    assert rows["b"].should_pay == 0


def test_zero_weight_household_pays_nothing():
    """Test that a zero-weight participant gets a zero share without errors."""
    data = calculate_settlement(
        [receipt("r1", 90, "a", ["a", "b", "c"])],
        [participant("a"), participant("b"), participant("c", 0)]
    )
    rows = ledger(data)

    assert rows["c"].should_pay == 0
    assert rows["a"].should_pay == 45.00
    assert rows["b"].should_pay == 45.00
    assert data.categories[0].expenses["c"] == 0


def test_payer_outside_participants_is_credited():
    """Test that a household can pay for an expense it does not share."""
    data = calculate_settlement(
        [receipt("r1", 60, "a", ["b", "c"])],
        [participant("a"), participant("b"), participant("c")]
    )
    rows = ledger(data)

    assert rows["a"].should_pay == 0
    assert rows["a"].paid == 60
    assert rows["a"].net_amount == 60
    assert rows["b"].net_amount == -30
    assert rows["c"].net_amount == -30


def test_unknown_payer_is_not_credited():
    """Test that payment by an unknown household is dropped."""
    data = calculate_settlement(
        [receipt("r1", 50, "ghost", ["a", "b"])],
        [participant("a"), participant("b")]
    )
    rows = ledger(data)

    assert rows["a"].paid == 0
    assert rows["b"].paid == 0
    assert rows["a"].should_pay == 25
    assert sum(h.net_amount for h in data.households) == -50


def test_rounding_to_cents():
    """Test that a third of 100 rounds to 33.33."""
    data = calculate_settlement(
        [receipt("r1", 100, "c", ["a", "b", "c"])],
        [participant("a"), participant("b"), participant("c")]
    )
    rows = ledger(data)

    assert rows["a"].should_pay == 33.33
    assert rows["a"].net_amount == -33.33
    assert rows["c"].net_amount == 66.67


def test_net_amount_rounded_from_raw_values():
    """Test that net amount is rounded independently of the other fields."""
    # a: should_pay 1.006 raw, paid 0.004 raw, net -1.002 raw
    data = calculate_settlement(
        [
            receipt("r1", 1.006, "b", ["a"]),
            receipt("r2", 0.004, "a", ["b"]),
        ],
        [participant("a"), participant("b")]
    )
    rows = ledger(data)

    assert rows["a"].should_pay == 1.01
    assert rows["a"].paid == 0.0
    assert rows["a"].net_amount == -1.0
    assert rows["b"].net_amount == 1.0
    assert [t.amount for t in data.transfers] == [1.0]


def test_categories_keep_first_seen_order_and_case():
    """Test category accumulation order and case sensitivity."""
    participants = [participant("a"), participant("b")]
    data = calculate_settlement(
        [
            receipt("r1", 20, "a", ["a", "b"], category="Lodging"),
            receipt("r2", 10, "b", ["a", "b"], category="Food"),
            receipt("r3", 30, "a", ["a"], category="Lodging"),
            receipt("r4", 4, "a", ["b"], category="food"),
        ],
        participants
    )

    assert [c.category for c in data.categories] == ["Lodging", "Food", "food"]
    lodging = data.categories[0].expenses
    assert lodging == {"a": 40, "b": 10}
    assert data.categories[2].expenses == {"b": 4}


def test_headcount_heuristic():
    """Test adults/kids derived from weight."""
    assert headcount_from_weight(1) == (1, 0)
    assert headcount_from_weight(1.0) == (1, 0)
    assert headcount_from_weight(0.5) == (0, 1)
    assert headcount_from_weight(2) == (0, 0)
    assert headcount_from_weight(1.5) == (0, 0)
    assert headcount_from_weight(0) == (0, 0)


def test_transfers_settle_largest_creditor_first():
    """Test the +30, +20, -50 case produces exactly two transfers."""
    data = calculate_settlement(
        [
            receipt("r1", 30, "a", ["c"]),
            receipt("r2", 20, "b", ["c"]),
        ],
        [participant("a"), participant("b"), participant("c")]
    )

    assert [(t.from_household_id, t.to_household_id, t.amount) for t in data.transfers] == [
        ("c", "a", 30.0),
        ("c", "b", 20.0),
    ]
    assert data.transfers[0].from_name == "C"
    assert data.transfers[0].to_name == "A"


def test_transfer_count_is_bounded():
    """Test that transfers never exceed creditors + debtors - 1."""
    participants = [participant(hid) for hid in "abcde"]
    receipts = [
        receipt("r1", 100, "a", list("abcde")),
        receipt("r2", 37.5, "b", list("cde")),
        receipt("r3", 12.25, "c", list("ab")),
    ]
    data = calculate_settlement(receipts, participants)

    creditors = [h for h in data.households if h.net_amount > 0.01]
    debtors = [h for h in data.households if h.net_amount < -0.01]
    assert len(data.transfers) <= len(creditors) + len(debtors) - 1
    assert all(t.amount > 0 for t in data.transfers)

    received = {}
    for t in data.transfers:
        received[t.to_household_id] = received.get(t.to_household_id, 0) + t.amount
        received[t.from_household_id] = received.get(t.from_household_id, 0) - t.amount
    for h in data.households:
        assert received.get(h.household_id, 0) == pytest.approx(h.net_amount, abs=0.02)


def test_generate_transfers_ignores_dust():
    """Test that balances within one cent produce no transfers."""
    rows = [
        HouseholdExpense(
            household_id="a", household_name="A", adults=1, kids=0, weight=1,
            should_pay=0, paid=0, net_amount=0.01
        ),
        HouseholdExpense(
            household_id="b", household_name="B", adults=1, kids=0, weight=1,
            should_pay=0, paid=0, net_amount=-0.01
        ),
    ]

    assert generate_transfers(rows) == []
    assert rows[0].net_amount == 0.01


def test_generate_transfers_one_creditor_many_debtors():
    """Test that debtors are processed most negative first."""
    rows = [
        HouseholdExpense(
            household_id=hid, household_name=hid, adults=1, kids=0, weight=1,
            should_pay=0, paid=0, net_amount=net
        )
        for hid, net in [("a", -10.0), ("b", 45.0), ("c", -35.0)]
    ]

    transfers = generate_transfers(rows)

    assert [(t.from_household_id, t.to_household_id, t.amount) for t in transfers] == [
        ("c", "b", 35.0),
        ("a", "b", 10.0),
    ]


def test_calculation_is_deterministic():
    """Test that identical inputs give identical output."""
    participants = [participant("a"), participant("b", 0.5), participant("c", 2)]
    receipts = [
        receipt("r1", 123.45, "a", ["a", "b", "c"], category="Food"),
        receipt("r2", 67.8, "c", ["b", "c"], category="Fuel"),
    ]

    first = calculate_settlement(receipts, participants)
    second = calculate_settlement(receipts, participants)

    assert first.model_dump() == second.model_dump()


def test_very_large_totals_are_rounded():
    """Test that totals beyond the default decimal precision still settle."""
    data = calculate_settlement(
        [receipt("r1", 1e26, "a", ["a", "b"])],
        [participant("a"), participant("b")]
    )
    rows = ledger(data)

    assert rows["a"].paid == 1e26
    assert rows["b"].net_amount == -5e25
    assert [t.amount for t in data.transfers] == [5e25]


def test_infinite_total_does_not_raise():
    """Test that an infinite total yields a result instead of an error."""
    data = calculate_settlement(
        [receipt("r1", float("inf"), "c", ["a", "b"])],
        [participant("a"), participant("b"), participant("c")]
    )
    rows = ledger(data)

    assert math.isinf(rows["c"].paid)
    assert math.isinf(rows["a"].should_pay)
    assert len(data.transfers) == 1
    assert data.transfers[0].to_household_id == "c"


def rows_with_nets(nets):
    return [
        HouseholdExpense(
            household_id=hid, household_name=hid, adults=1, kids=0, weight=1,
            should_pay=0, paid=0, net_amount=net
        )
        for hid, net in nets
    ]


def test_equal_creditors_keep_ledger_order():
    """Test that creditors owed the same amount are paid in ledger order."""
    transfers = generate_transfers(rows_with_nets([("a", 25.0), ("b", 25.0), ("c", -50.0)]))

    assert [(t.from_household_id, t.to_household_id, t.amount) for t in transfers] == [
        ("c", "a", 25.0),
        ("c", "b", 25.0),
    ]


def test_equal_debtors_keep_ledger_order():
    """Test that debtors owing the same amount pay in ledger order."""
    transfers = generate_transfers(rows_with_nets([("c", 50.0), ("a", -25.0), ("b", -25.0)]))

    assert [(t.from_household_id, t.to_household_id, t.amount) for t in transfers] == [
        ("a", "c", 25.0),
        ("b", "c", 25.0),
    ]
