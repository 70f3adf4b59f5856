import time

from rich.console import Console

from .config import BotConfig
from .distributor import CycleReport


def display_configuration(config: BotConfig, console: Console) -> None:
    mode = "red" if config.nobroadcast else "green"
    console.print("[cyan bold]=== Bot Configuration ===[/cyan bold]")
    console.print(f"  • Asset: [green]{config.asset_code}:{config.asset_issuer}[/green]")
    console.print(f"  • Distributor: [green]{config.keypair.public_key}[/green]")
    console.print(f"  • Reward Rate: [green]{config.reward_rate * 100}%[/green] per distribution")
    console.print(f"  • Horizon: {config.horizon_url}")
    console.print(f"  • Interval: {config.interval} seconds")
    console.print(
        f"  • Mode: [{mode}]{'DRY RUN' if config.nobroadcast else 'LIVE'}[/{mode}]"
    )
    console.print("[cyan bold]=========================[/cyan bold]")


def display_summary_report(report: CycleReport, config: BotConfig, console: Console) -> None:
    """Display a summary of one distribution cycle."""
    console.print("\n" + "=" * 80)
    console.print("[cyan bold]🔶 REWARD DISTRIBUTION SUMMARY 🔶[/cyan bold]")
    console.print("=" * 80)

    console.print("[yellow bold]📋 Configuration:[/yellow bold]")
    console.print(f"  • Asset: [green]{config.asset_code}[/green] ({config.asset_issuer})")
    console.print(f"  • Reward Rate: [green]{config.reward_rate}[/green]")
    mode = "red" if config.nobroadcast else "green"
    console.print(
        f"  • Mode: [{mode}]{'DRY RUN' if config.nobroadcast else 'LIVE'}[/{mode}]"
    )
    console.print(f"  • Timestamp: [cyan]{time.strftime('%Y-%m-%d %H:%M:%S')}[/cyan]")

    console.print("\n[yellow bold]📊 Results:[/yellow bold]")
    console.print(f"  • Holders Found: [cyan]{report.total_holders}[/cyan]")
    console.print(f"  • Eligible Payments: [cyan]{report.total_payments}[/cyan]")
    console.print(
        f"  • Batches: [green]{len(report.successful_batches)} ok[/green] / "
        f"[red]{len(report.failed_batches)} failed[/red]"
    )
    for batch in report.batches:
        if batch.ok:
            console.print(f"    ✅ Batch {batch.index}: {len(batch.payments)} payments, {batch.tx_hash}")
        else:
            console.print(f"    ❌ Batch {batch.index}: {len(batch.payments)} payments, [red]{batch.error}[/red]")
    if report.aborted:
        console.print(f"  • [red bold]Cycle aborted:[/red bold] {report.aborted}")

    console.print("\n[yellow bold]💰 XLM:[/yellow bold]")
    console.print(f"  • Total Distributed: [green]{report.total_distributed:.7f}[/green]")
    if report.successful_payments > 0:
        average = report.total_distributed / report.successful_payments
        console.print(f"  • Average Per Holder: [cyan]{average:.7f}[/cyan]")
    if report.unpaid:
        console.print(f"  • Unpaid Holders: [red]{len(report.unpaid)}[/red]")

    console.print("\n[yellow bold]⏱️ Time:[/yellow bold]")
    console.print(f"  • Duration: [cyan]{report.duration:.2f} seconds[/cyan]")
    console.print("=" * 80)
