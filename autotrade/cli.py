"""
AutoTrade CLI
=============
Runs strategy trade decisions through the execution pipeline and inspects
the resulting ledger.

Commands:
    autotrade init-db
    autotrade assign "momentum-v1"
    autotrade execute decisions.json --assignment <ID>
    autotrade execute decisions.json --assignment <ID> --live
    autotrade history --assignment <ID>
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import TypeAdapter, ValidationError as SchemaError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config.settings import Settings
from autotrade.execution.batch_runner import DecisionBatchRunner, TradingContext
from autotrade.execution.models import ExecutionResult, ExecutionStrategy, TradeDecision
from autotrade.execution.pipeline import TradeExecutionPipeline
from autotrade.execution.recorder import OutcomeRecorder
from autotrade.shared.system.database.core import DatabaseCore
from autotrade.shared.system.database.repositories.assignment_repo import StrategyAssignmentRepository
from autotrade.shared.system.database.repositories.transaction_repo import TransactionRepository
from autotrade.shared.system.event_bus import EventBus
from autotrade.shared.system.execution_log import ExecutionLogRenderer

app = typer.Typer(
    name="autotrade",
    help="AutoTrade - execute strategy trade decisions as Solana swaps",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

DbOption = typer.Option(None, "--db", help="SQLite ledger path (default: Settings.DB_PATH)")


def load_decisions(path: Path) -> List[TradeDecision]:
    """Read decisions from a JSON list or a {"tradeDecisions": [...]} object."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("tradeDecisions", [])
    return TypeAdapter(List[TradeDecision]).validate_python(data)


def _results_table(results: List[ExecutionResult]) -> Table:
    table = Table(title="Execution Results")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Side")
    table.add_column("Pair")
    table.add_column("Amount", justify="right")
    table.add_column("Status")
    table.add_column("Tx / Error", overflow="fold")

    for i, result in enumerate(results, 1):
        pair = result.decision.token_pair
        if result.success:
            status = "[green]PAPER[/green]" if result.simulated else "[green]OK[/green]"
            detail = result.transaction_hash or "-"
        else:
            status = "[red]FAILED[/red]"
            detail = str(result.error)
        table.add_row(
            str(i),
            result.decision.side.value,
            f"{pair.from_token.symbol} → {pair.to_token.symbol}",
            f"{result.decision.amount:g}",
            status,
            detail,
        )
    return table


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: INIT-DB
# ═══════════════════════════════════════════════════════════════════════════════

@app.command("init-db")
def init_db(db: Optional[str] = DbOption):
    """Create the ledger tables."""
    core = DatabaseCore(db)
    TransactionRepository(core)
    console.print(f"[green]✅ Ledger ready at {core.db_path}[/green]")


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: ASSIGN
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def assign(
    name: str = typer.Argument(..., help="Strategy name"),
    db: Optional[str] = DbOption,
):
    """Create a strategy assignment and print its id."""
    repo = StrategyAssignmentRepository(DatabaseCore(db))
    console.print(repo.create(name))


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: EXECUTE
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def execute(
    decisions_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Decisions JSON"),
    assignment: str = typer.Option(..., "--assignment", "-a", help="Strategy assignment id"),
    live: bool = typer.Option(
        not Settings.PAPER_TRADING, "--live/--paper", help="Submit REAL swaps (default from PAPER_TRADING)"
    ),
    strategy: ExecutionStrategy = typer.Option(
        ExecutionStrategy(Settings.EXECUTION_STRATEGY), "--strategy", help="serial or parallel"
    ),
    max_concurrency: int = typer.Option(Settings.MAX_CONCURRENCY, "--max-concurrency", min=1),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the live-mode confirmation"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON instead of a table"),
    db: Optional[str] = DbOption,
):
    """
    Execute a batch of trade decisions.

    \b
    Examples:
        autotrade execute decisions.json -a 5f0c...
        autotrade execute decisions.json -a 5f0c... --live --strategy parallel
        autotrade execute decisions.json -a 5f0c... --json
    """
    paper = not live

    try:
        decisions = load_decisions(decisions_file)
    except (json.JSONDecodeError, SchemaError) as e:
        console.print(f"[bold red]❌ Invalid decisions file: {e}[/bold red]")
        raise typer.Exit(1)

    core = DatabaseCore(db)
    if not StrategyAssignmentRepository(core).exists(assignment):
        console.print(f"[bold red]❌ Unknown strategy assignment: {assignment}[/bold red]")
        raise typer.Exit(1)

    if not as_json:
        console.print(Panel.fit(
            f"[bold cyan]AutoTrade Execution[/bold cyan]\n"
            f"Decisions: {len(decisions)} | Mode: "
            f"{'[green]PAPER[/green]' if paper else '[bold red]LIVE[/bold red]'} | Strategy: {strategy.value}",
            border_style="cyan",
        ))

    backend = None
    if not paper:
        if not yes and not typer.confirm("\n⚠️  LIVE MODE ENABLED - Real money at risk. Continue?", default=False):
            console.print("[yellow]Aborted.[/yellow]")
            raise typer.Exit(0)
        from autotrade.shared.infrastructure.jupiter_backend import JupiterTradingBackend, SolanaWallet
        backend = JupiterTradingBackend(SolanaWallet.from_settings())

    events = EventBus()
    ExecutionLogRenderer(events).attach()
    recorder = OutcomeRecorder(TransactionRepository(core), events=events)
    runner = DecisionBatchRunner(
        TradeExecutionPipeline.from_settings(recorder, events=events),
        strategy=strategy,
        max_concurrency=max_concurrency,
        halt_on_persistence_error=Settings.HALT_ON_PERSISTENCE_ERROR,
        events=events,
    )
    ctx = TradingContext(
        strategy_assignment_id=assignment,
        trade_decisions=decisions,
        backend=backend,
        is_paper_trading=paper,
    )

    results = asyncio.run(runner.run(ctx))
    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2))
    else:
        console.print(_results_table(results))
    if any(not r.success for r in results):
        raise typer.Exit(1)


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: HISTORY
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def history(
    assignment: str = typer.Option(..., "--assignment", "-a", help="Strategy assignment id"),
    limit: int = typer.Option(20, "--limit", min=1),
    db: Optional[str] = DbOption,
):
    """Show the most recent ledger records of an assignment."""
    records = TransactionRepository(DatabaseCore(db)).get_by_assignment(assignment, limit=limit)
    if not records:
        console.print("[yellow]No transactions recorded.[/yellow]")
        return

    table = Table(title=f"Transactions ({assignment})")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Side")
    table.add_column("Status")
    table.add_column("From", justify="right")
    table.add_column("To", justify="right")
    table.add_column("Tx / Reason", overflow="fold")
    for r in records:
        status_style = "green" if r.succeeded else "red"
        detail = r.failure_reason if r.failure_reason else (r.transaction_hash or "paper")
        table.add_row(
            str(r.id),
            r.side.value,
            f"[{status_style}]{r.status.value}[/{status_style}]",
            f"{r.token_from_amount} {r.token_from_symbol}",
            f"{r.token_to_amount} {r.token_to_symbol}",
            detail,
        )
    console.print(table)


def main():
    """Entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
