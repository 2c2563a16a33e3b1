"""Typer CLI interface for TradeLedger."""

import logging
from decimal import Decimal
from pathlib import Path

import typer

from tradeledger.config import LedgerSettings
from tradeledger.models.enums import AccountType, CloseType

app = typer.Typer(
    name="tradeledger",
    help="TradeLedger: position and tax-lot reconciliation for brokerage accounts.",
)

DB_HELP = "Path to the SQLite database file (default: TRADELEDGER_DB_PATH or ~/.tradeledger/ledger.db)"


def _fmt(val: Decimal) -> str:
    """Format a Decimal to 2 decimal places with commas."""
    return f"{val:,.2f}"


def _settings() -> LedgerSettings:
    from pydantic import ValidationError

    try:
        return LedgerSettings.from_env()
    except ValidationError as exc:
        typer.echo(f"Error: Invalid TRADELEDGER_* setting: {exc}", err=True)
        raise typer.Exit(1)


def _db_path(db: Path | None) -> Path:
    return db if db is not None else _settings().db_path


def _open_repo(db: Path | None, create: bool = False):
    from tradeledger.db.repository import LedgerRepository
    from tradeledger.db.schema import create_schema

    db = _db_path(db)
    if not db.exists():
        if not create:
            typer.echo("Error: No database found. Add an account first with `tradeledger add-account`.", err=True)
            raise typer.Exit(1)
        db.parent.mkdir(parents=True, exist_ok=True)
    conn = create_schema(db)
    return conn, LedgerRepository(conn)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """TradeLedger: position and tax-lot reconciliation for brokerage accounts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command(name="add-account")
def add_account(
    name: str = typer.Argument(..., help="Display name of the account"),
    account_id: str | None = typer.Option(None, "--id", help="Account ID (generated when omitted)"),
    account_type: AccountType = typer.Option(AccountType.BROKERAGE, "--type", help="Account type"),
    broker: str = typer.Option("", "--broker", help="Broker name"),
    initial_cash: float = typer.Option(0, "--initial-cash", help="Opening cash balance"),
    db: Path | None = typer.Option(None, "--db", help=DB_HELP),
) -> None:
    """Create or replace an account."""
    from uuid import uuid4

    from tradeledger.models.transactions import Account
    from tradeledger.normalization.sanitizer import sanitize_account_name

    clean_name = sanitize_account_name(name)
    if not clean_name:
        typer.echo("Error: Account name is required", err=True)
        raise typer.Exit(1)

    account = Account(
        id=account_id or str(uuid4()),
        name=clean_name,
        account_type=account_type,
        broker=broker,
        initial_cash=Decimal(str(initial_cash)),
    )
    conn, repo = _open_repo(db, create=True)
    repo.save_account(account)
    conn.close()
    typer.echo(f"Saved account {account.name} ({account.id})")


@app.command(name="import")
def import_cmd(
    file_path: Path = typer.Argument(..., help="JSON file of stock and option transactions"),
    account: str | None = typer.Option(
        None, "--account", "-a", help="Account ID for records that do not name one"
    ),
    db: Path | None = typer.Option(None, "--db", help=DB_HELP),
) -> None:
    """Import transactions from a JSON file through validation and deduplication.

    Records with errors are skipped and reported; warnings, including possible
    duplicates, are reported but the record is still recorded.
    """
    from tradeledger.exceptions import LedgerError
    from tradeledger.ingestion.manual import ManualAdapter

    adapter = ManualAdapter()
    try:
        result = adapter.parse(file_path)
    except (FileNotFoundError, LedgerError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    problems = adapter.validate(result)
    if problems:
        for problem in problems:
            typer.echo(f"Error: {problem}", err=True)
        raise typer.Exit(1)

    settings = _settings()
    db = _db_path(db)
    conn, repo = _open_repo(db)
    log = repo.load_log(settings)
    batch_id = repo.create_import_batch("manual", str(file_path), result.record_count)

    recorded = 0
    rejected = 0
    batches = [
        (log.record_stock, result.stock_records),
        (log.record_option, result.option_records),
    ]
    for record_fn, records in batches:
        for raw in records:
            if account and not (raw.get("accountId") or raw.get("account_id")):
                raw = {**raw, "accountId": account}
            outcome = record_fn(raw)
            label = raw.get("id") or raw.get("ticker") or "record"
            for issue in outcome.validation.warnings:
                typer.echo(f"Warning: {label}: {issue.message}", err=True)
            if not outcome.recorded:
                rejected += 1
                for issue in outcome.validation.errors:
                    typer.echo(f"Error: {label}: {issue.field}: {issue.message}", err=True)
                continue
            repo.append_transaction(outcome.transaction, batch_id)
            recorded += 1

    repo.finish_import_batch(batch_id, recorded)
    conn.close()

    typer.echo(f"Recorded {recorded} of {result.record_count} record(s) into {db.name}")
    if rejected:
        raise typer.Exit(1)


@app.command()
def positions(
    account: str | None = typer.Option(None, "--account", "-a", help="Limit to one account ID"),
    premium_adjusted: bool = typer.Option(
        False, "--premium-adjusted", help="Show stock cost basis net of option premiums"
    ),
    db: Path | None = typer.Option(None, "--db", help=DB_HELP),
) -> None:
    """Show open option and stock positions rebuilt from the transaction log."""
    from tradeledger.engines.basis import CostBasisAdjuster
    from tradeledger.engines.positions import PositionBuilder

    settings = _settings()
    conn, repo = _open_repo(db)
    log = repo.load_log(settings)
    conn.close()

    snapshot = PositionBuilder(settings).build(log, account_id=account)
    adjuster = CostBasisAdjuster()
    stocks = snapshot.stock_positions
    if premium_adjusted:
        stocks = adjuster.adjust(stocks, log.option_transactions)

    typer.echo("\n=== Option Positions ===")
    open_options = snapshot.open_option_positions
    if not open_options:
        typer.echo("  (none)")
    for p in open_options:
        typer.echo(
            f"  {p.id}  {p.ticker:<6} {p.option_type.value:<4} ${p.strike_price:<9}"
            f" exp {p.expiration_date}  {p.opening_side.value:<6} x{p.contracts:<3}"
            f" premium ${_fmt(p.total_premium)}"
        )

    typer.echo("\n=== Stock Positions ===")
    if not stocks:
        typer.echo("  (none)")
    for s in stocks:
        basis = adjuster.get_effective_cost_basis(s, premium_adjusted)
        typer.echo(
            f"  {s.ticker:<6} {s.shares:>10} sh  basis ${_fmt(basis.total)}"
            f" (${_fmt(basis.per_share)}/sh)  realized ${_fmt(s.realized_pl)}"
        )

    typer.echo(f"\nRealized P/L: ${_fmt(snapshot.total_realized_pl)}")

    if snapshot.rejected_closings or snapshot.warnings:
        typer.echo("\nWarnings:")
        for txn_id, reason in snapshot.rejected_closings.items():
            typer.echo(f"  - {txn_id}: {reason}")
        for warning in snapshot.warnings:
            typer.echo(f"  - {warning}")


@app.command()
def close(
    position_id: str = typer.Argument(..., help="ID of the open option position"),
    close_type: CloseType = typer.Option(CloseType.CLOSED, "--type", help="How the position closed"),
    close_date: str = typer.Option(..., "--date", help="Close date (YYYY-MM-DD)"),
    price: float = typer.Option(0, "--price", help="Per-share premium of a manual close"),
    fees: float = typer.Option(0, "--fees", help="Closing fees"),
    contracts: int | None = typer.Option(None, "--contracts", help="Contracts to close (default all)"),
    db: Path | None = typer.Option(None, "--db", help=DB_HELP),
) -> None:
    """Close, expire or assign an open option position."""
    from tradeledger.engines.lifecycle import PositionLifecycle
    from tradeledger.engines.positions import PositionBuilder
    from tradeledger.engines.wash_sale import WashSaleDetector
    from tradeledger.exceptions import LedgerError

    settings = _settings()
    conn, repo = _open_repo(db)
    log = repo.load_log(settings)

    try:
        position = PositionBuilder(settings).build(log).option_position(position_id)
        result = PositionLifecycle(settings).close_position(
            position,
            close_type,
            close_date,
            close_price=Decimal(str(price)),
            fees=Decimal(str(fees)),
            contracts=contracts,
        )
    except LedgerError as exc:
        conn.close()
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    for txn in (result.closing_transaction, result.stock_transaction):
        if txn is None:
            continue
        outcome = log.record(txn)
        if not outcome.recorded:
            conn.close()
            for issue in outcome.validation.errors:
                typer.echo(f"Error: {issue.field}: {issue.message}", err=True)
            raise typer.Exit(1)
        repo.append_transaction(txn)
    conn.close()

    closing = result.closing_transaction
    typer.echo(closing.notes)
    typer.echo(f"Realized P/L: ${_fmt(closing.realized_pl)}")

    info = WashSaleDetector(settings).detect(closing.id, log)
    if info is not None and info.has_wash_sale:
        typer.echo(
            f"Warning: potential wash sale, loss of ${_fmt(info.loss_amount)} with "
            f"{len(info.related_transaction_ids)} related transaction(s) within "
            f"{settings.wash_sale_window_days} days",
            err=True,
        )


@app.command(name="wash-sales")
def wash_sales(
    db: Path | None = typer.Option(None, "--db", help=DB_HELP),
) -> None:
    """List loss-realizing closes with a re-entry inside the wash-sale window."""
    from tradeledger.engines.wash_sale import WashSaleDetector

    settings = _settings()
    conn, repo = _open_repo(db)
    log = repo.load_log(settings)
    conn.close()

    flagged = WashSaleDetector(settings).scan(log)
    if not flagged:
        typer.echo("No potential wash sales found.")
        return

    typer.echo(f"Potential wash sales: {len(flagged)}")
    for info in flagged:
        typer.echo(
            f"  {info.ticker:<6} {info.transaction_id}  loss ${_fmt(info.loss_amount)}"
            f"  window {info.wash_sale_period_start} to {info.wash_sale_period_end}"
        )
        typer.echo(f"        Related: {', '.join(info.related_transaction_ids)}")


@app.command()
def summary(
    account: str | None = typer.Option(None, "--account", "-a", help="Limit to one account ID"),
    db: Path | None = typer.Option(None, "--db", help=DB_HELP),
) -> None:
    """Show cash balances and options premium statistics."""
    from tradeledger.engines.analytics import OptionsAnalytics, account_cash

    settings = _settings()
    conn, repo = _open_repo(db)
    log = repo.load_log(settings)
    conn.close()

    typer.echo("\n=== Cash ===")
    for acct in log.accounts:
        if account in (None, acct.id):
            typer.echo(f"  {acct.name:<24} ${_fmt(account_cash(log, acct.id))}")

    stats = OptionsAnalytics(settings).summarize(log, account_id=account)
    typer.echo("\n=== Options ===")
    typer.echo(f"  Premium collected: ${_fmt(stats.total_premium_collected)}")
    typer.echo(f"  Premium paid:      ${_fmt(stats.total_premium_paid)}")
    typer.echo(f"  Net premium:       ${_fmt(stats.net_premium)}")
    typer.echo(f"  Realized P/L:      ${_fmt(stats.total_realized_pl)}")
    typer.echo(f"  Closed trades:     {stats.closed_count}")
    typer.echo(f"  Win rate:          {stats.win_rate:.1f}%")
