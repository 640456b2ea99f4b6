"""
Settlement engine for weighted group cost splitting.

Pure computation: takes receipts and weighted household participants and
returns a ledger, a per-category breakdown and a transfer plan. No database
access happens here.
"""
import math
from typing import Dict, List
from app.core.utils import round_currency
from app.schemas.settlement import (
    SettlementParticipant, SettlementReceipt, SettlementData,
    HouseholdExpense, ExpenseCategory, Transfer
)

# Absolute tolerance in currency units, shared by classification,
# transfer emission and cursor advancement
SETTLEMENT_EPSILON = 0.01


def headcount_from_weight(weight: float) -> tuple:
    """
    Derive (adults, kids) for display from a participant weight.

    Only the two canonical weights are recognised: 1 is one adult and 0.5 is
    one kid. Any other weight yields (0, 0).
    """
    adults = 1 if weight == 1 else 0
    kids = 1 if weight == 0.5 else 0
    return adults, kids


def calculate_settlement(
    receipts: List[SettlementReceipt],
    participants: List[SettlementParticipant]
) -> SettlementData:
    """
    Calculate a weighted settlement for a set of receipts.

    Each receipt is split among the participating households in proportion
    to their weight, and the full amount is credited to the paying household.
    Receipts whose participating households weigh nothing in total are
    ignored, payer included. Unknown payer ids are not credited.
    """
    total_weight = 0.0
    # household_id -> [should_pay, paid], raw unrounded values
    accounts: Dict[str, List[float]] = {}
    for p in participants:
        total_weight += p.weight
        accounts[p.household_id] = [0.0, 0.0]

    # category -> household_id -> accumulated share, insertion ordered
    category_map: Dict[str, Dict[str, float]] = {}

    for receipt in receipts:
        receipt_households = set(receipt.participants)
        participating = [p for p in participants if p.household_id in receipt_households]
        participating_weight = sum(p.weight for p in participating)

        if participating_weight == 0:
            continue

        category_data = category_map.setdefault(receipt.category, {})
        for p in participating:
            share = (p.weight / participating_weight) * receipt.grand_total
            accounts[p.household_id][0] += share
            category_data[p.household_id] = category_data.get(p.household_id, 0) + share

        payer = accounts.get(receipt.paid_by)
        if payer is not None:
            payer[1] += receipt.grand_total

    households = []
    for p in participants:
        should_pay, paid = accounts[p.household_id]
        net_amount = paid - should_pay
        adults, kids = headcount_from_weight(p.weight)
        households.append(HouseholdExpense(
            household_id=p.household_id,
            household_name=p.household_name,
            adults=adults,
            kids=kids,
            weight=p.weight,
            should_pay=round_currency(should_pay),
            paid=round_currency(paid),
            net_amount=round_currency(net_amount)
        ))

    categories = [
        ExpenseCategory(category=category, expenses=expenses)
        for category, expenses in category_map.items()
    ]

    return SettlementData(
        households=households,
        categories=categories,
        transfers=generate_transfers(households),
        total_weight=total_weight
    )


def generate_transfers(households: List[HouseholdExpense]) -> List[Transfer]:
    """
    Build a transfer plan that settles all net amounts.

    Greedy matching: the largest creditor is paid by the largest debtor
    first. Produces at most creditors + debtors - 1 transfers. The input
    rows are not modified.
    """
    # Working copies as [household_id, household_name, net_amount]
    creditors = [
        [h.household_id, h.household_name, h.net_amount]
        for h in households if h.net_amount > SETTLEMENT_EPSILON
    ]
    debtors = [
        [h.household_id, h.household_name, h.net_amount]
        for h in households if h.net_amount < -SETTLEMENT_EPSILON
    ]

    creditors.sort(key=lambda x: x[2], reverse=True)
    debtors.sort(key=lambda x: x[2])

    transfers = []
    cred_idx = 0
    debt_idx = 0

    while cred_idx < len(creditors) and debt_idx < len(debtors):
        creditor = creditors[cred_idx]
        debtor = debtors[debt_idx]

        amount = min(creditor[2], abs(debtor[2]))

        if amount > SETTLEMENT_EPSILON:
            transfers.append(Transfer(
                from_household_id=debtor[0],
                from_name=debtor[1],
                to_household_id=creditor[0],
                to_name=creditor[1],
                amount=round_currency(amount)
            ))

        creditor[2] -= amount
        debtor[2] += amount

        # NaN balances (infinite totals) count as settled
        if creditor[2] < SETTLEMENT_EPSILON or math.isnan(creditor[2]):
            cred_idx += 1
        if abs(debtor[2]) < SETTLEMENT_EPSILON or math.isnan(debtor[2]):
            debt_idx += 1

    return transfers
