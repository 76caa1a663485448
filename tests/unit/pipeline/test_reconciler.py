"""Unit tests for primary/secondary ticket reconciliation."""

from __future__ import annotations

from services.pipeline.leaderboard import build_leaderboard
from services.pipeline.reconciler import build_referrer_lookup, reconcile
from shared.schemas.ticket import TicketSource

SECONDARY = TicketSource.SECONDARY


def test_reconcile_reference_scenario(ticket_factory) -> None:
    """Sheet corrects A2's referrer and contributes the unknown order A3."""
    primary = [ticket_factory("A1", "Dancer X"), ticket_factory("A2", None)]
    secondary = [
        ticket_factory("A2", "Dancer Y", source=SECONDARY),
        ticket_factory("A3", "Dancer X", source=SECONDARY),
    ]

    result = reconcile(primary, secondary)

    assert result.total_tickets == 3
    assert result.from_primary == 2
    assert result.only_in_secondary == 1
    assert result.referrers_updated == 1
    by_order = {t.order_id: t for t in result.tickets.values()}
    assert by_order["A2"].referrer == "Dancer Y"
    assert by_order["A2"].source is TicketSource.PRIMARY
    assert by_order["A3"].source is SECONDARY


def test_sheet_referrer_overrides_primary_referrer(ticket_factory) -> None:
    """A non-null sheet referrer wins even when Eventbrite has one."""
    primary = [ticket_factory("A1", "Dancer X"), ticket_factory("A1", None)]
    secondary = [ticket_factory("A1", "Dancer Z", source=SECONDARY)]

    result = reconcile(primary, secondary)

    assert [t.referrer for t in result.tickets.values()] == ["Dancer Z", "Dancer Z"]
    assert result.referrers_updated == 2
    assert result.only_in_secondary == 0


def test_matching_referrer_is_not_counted_as_update(ticket_factory) -> None:
    """Identical referrers leave the update counter alone."""
    result = reconcile(
        [ticket_factory("A1", "Dancer X")],
        [ticket_factory("A1", "Dancer X", source=SECONDARY)],
    )

    assert result.referrers_updated == 0
    assert result.total_tickets == 1


def test_sheet_without_referrer_keeps_primary_ticket(ticket_factory) -> None:
    """Matching sheet orders never delete or blank a primary ticket."""
    result = reconcile(
        [ticket_factory("A1", "Dancer X")],
        [ticket_factory("A1", None, source=SECONDARY)],
    )

    assert [t.referrer for t in result.tickets.values()] == ["Dancer X"]
    assert result.referrers_updated == 0


def test_referrer_lookup_last_row_wins(ticket_factory) -> None:
    """Later sheet rows for the same order overwrite earlier referrers."""
    secondary = [
        ticket_factory("A1", "Dancer X", source=SECONDARY),
        ticket_factory("A1", "Dancer Y", source=SECONDARY),
        ticket_factory("A1", None, source=SECONDARY),
        ticket_factory(None, "Dancer Q", source=SECONDARY),
    ]

    assert build_referrer_lookup(secondary) == {"A1": "Dancer Y"}


def test_primary_duplicates_are_never_merged(ticket_factory) -> None:
    """Two primary tickets on one order stay two tickets."""
    primary = [ticket_factory("A1", seat="1"), ticket_factory("A1", seat="1")]

    result = reconcile(primary, [])

    assert result.total_tickets == 2
    assert len(set(result.tickets)) == 2


def test_canonical_size_matches_primary_plus_sheet_only(ticket_factory) -> None:
    """Size = primary count + sheet tickets whose order is not in Eventbrite."""
    primary = [ticket_factory("A1"), ticket_factory("A2"), ticket_factory("A2")]
    secondary = [
        ticket_factory("A2", "Dancer Y", source=SECONDARY, seat="5"),
        ticket_factory("B1", source=SECONDARY, seat="1"),
        ticket_factory("B1", source=SECONDARY, seat="2"),
        ticket_factory("B2", source=SECONDARY),
        ticket_factory("B3", source=SECONDARY),
    ]

    result = reconcile(primary, secondary)

    primary_orders = {t.order_id for t in primary}
    expected = len(primary) + sum(1 for t in secondary if t.order_id not in primary_orders)
    assert result.total_tickets == expected == 7
    assert result.only_in_secondary == 4


def test_sheet_rows_without_order_id_are_kept_separately(ticket_factory) -> None:
    """Rows missing an order id are kept but never matched or collapsed."""
    secondary = [
        ticket_factory(None, "Dancer X", source=SECONDARY, seat="1"),
        ticket_factory(None, "Dancer X", source=SECONDARY, seat="1"),
    ]

    result = reconcile([ticket_factory("A1")], secondary)

    assert result.total_tickets == 3
    assert result.only_in_secondary == 2
    assert result.referrers_updated == 0


def test_repeated_sheet_row_collapses_onto_one_ticket(ticket_factory) -> None:
    """The same sheet order and seat listed twice counts once; the later row wins."""
    secondary = [
        ticket_factory("B1", None, source=SECONDARY, seat="C12"),
        ticket_factory("B1", "Dancer Z", source=SECONDARY, seat="C12"),
    ]

    result = reconcile([], secondary)

    assert result.total_tickets == 1
    assert result.only_in_secondary == 1
    assert [t.referrer for t in result.tickets.values()] == ["Dancer Z"]
    assert [(e.name, e.tickets) for e in build_leaderboard(result.tickets.values())] == [("Dancer Z", 1)]


def test_sheet_keys_do_not_collide_across_orders_and_positions(ticket_factory) -> None:
    """Dashes in order ids or seats, or numeric seats, never merge distinct rows."""
    secondary = [
        ticket_factory("A-1", "Dancer X", source=SECONDARY, seat="2"),
        ticket_factory("A", "Dancer Y", source=SECONDARY, seat="1-2"),
        ticket_factory("B1", "Dancer X", source=SECONDARY, seat="3"),
        ticket_factory("B1", "Dancer Y", source=SECONDARY),
    ]

    result = reconcile([], secondary)

    assert result.total_tickets == 4
    assert result.only_in_secondary == 4


def test_primary_ticket_without_order_id_is_counted(ticket_factory) -> None:
    """Primary tickets lacking an order id are kept but never matched."""
    primary = [ticket_factory(None, "Dancer X"), ticket_factory(None, None)]
    secondary = [ticket_factory(None, "Dancer Y", source=SECONDARY)]

    result = reconcile(primary, secondary)

    assert result.total_tickets == 3
    assert result.from_primary == 2
    assert result.only_in_secondary == 1
    assert result.referrers_updated == 0
    assert [t.referrer for t in result.tickets.values()] == ["Dancer X", None, "Dancer Y"]


def test_reconcile_without_secondary(ticket_factory) -> None:
    """The engine works primary-only."""
    result = reconcile([ticket_factory("A1", "Dancer X")], None)

    assert result.total_tickets == 1
    assert result.stats().model_dump(by_alias=True) == {
        "fromPrimary": 1,
        "onlyInSecondary": 0,
        "referrersUpdated": 0,
    }


def test_reconcile_does_not_mutate_inputs(ticket_factory) -> None:
    """Corrected referrers land on copies, not on the adapter's tickets."""
    primary = [ticket_factory("A1", None)]

    reconcile(primary, [ticket_factory("A1", "Dancer Y", source=SECONDARY)])

    assert primary[0].referrer is None
