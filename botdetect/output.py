"""Bot Detector - Report output"""

import json
from typing import Dict

from rich import box
from rich.panel import Panel
from rich.table import Table


def print_report(report: Dict, console=None):
    if console is None:
        print(json.dumps(report, indent=2))
        return

    console.print("\n" + "═" * 70, style="cyan")
    console.print("              BOT DETECTOR REPORT", style="bold cyan")
    console.print("═" * 70, style="cyan")

    # Summary
    summary = report['summary']
    failures = summary['parse_failures'] + summary['timestamp_failures']
    console.print(Panel.fit(
        f"Lines Read: [cyan]{summary['total_lines']:,}[/]\n"
        f"Parsed Records: [cyan]{summary['parsed_records']:,}[/]\n"
        f"Unparsable: [{'yellow' if failures > 0 else 'green'}]"
        f"{summary['parse_failures']:,} lines, {summary['timestamp_failures']:,} timestamps[/]\n"
        f"Unique IPs: [cyan]{summary['unique_ips']:,}[/]\n"
        f"Unique Countries: [cyan]{summary['unique_countries']:,}[/]\n"
        f"Bots: [{'red' if summary['bot_count'] > 0 else 'green'}]{summary['bot_count']:,}[/]",
        title="Summary",
        border_style="cyan"
    ))

    thresholds = report['thresholds']
    console.print(
        f"  Volume threshold: > {thresholds['max_requests']} requests, "
        f"burst window: < {thresholds['burst_window_seconds']:g}s"
    )

    # Bot countries
    console.print("\n" + "─" * 70, style="cyan")
    if report['bot_countries']:
        console.print("BOT LOCATIONS", style="bold red")
        table = Table(box=box.ROUNDED)
        table.add_column("Country", style="red")
        table.add_column("Requests", style="yellow")
        for country, count in report['bot_countries'].items():
            table.add_row(country, str(count))
        console.print(table)
    else:
        console.print("No bot locations found.", style="green")

    # Bots
    console.print("\n" + "─" * 70, style="cyan")
    if report['bots']:
        console.print("BOT IP ADDRESSES", style="bold red")
        for bot in report['bots']:
            timestamps = bot['timestamps']
            agents = sorted(set(bot['user_agents']))
            console.print(Panel(
                f"Requests: [yellow]{bot['requests']:,}[/]\n"
                f"First seen: [cyan]{timestamps[0] if timestamps else '-'}[/]\n"
                f"Last seen: [cyan]{timestamps[-1] if timestamps else '-'}[/]\n"
                f"User agents: {', '.join(agents)}",
                title=f"[red]{bot['ip']}[/]",
                border_style="red"
            ))
    elif report['volume_bot_ips']:
        console.print("No bot IPs found with burst timing "
                      f"({len(report['volume_bot_ips'])} over the volume threshold).", style="green")
    else:
        console.print("No bot IPs found.", style="green")

    # Top IPs
    console.print("\n" + "─" * 70, style="cyan")
    console.print("TOP IPs (by requests)", style="bold")
    table = Table(box=box.ROUNDED)
    table.add_column("IP Address", style="cyan")
    table.add_column("Requests", style="white")
    for ip, count in report['top_ips'].items():
        table.add_row(ip, str(count))
    console.print(table)

    # Top countries
    console.print("\n" + "─" * 70, style="cyan")
    console.print("TOP COUNTRIES (by requests)", style="bold")
    for country, count in report['top_countries'].items():
        color = 'red' if country in report['bot_countries'] else 'white'
        console.print(f"  {country}: [{color}]{count}[/]")

    # Diagnostics
    if report['parse_failure_lines']:
        console.print("\n" + "─" * 70, style="cyan")
        console.print("UNPARSABLE LINES", style="bold yellow")
        for line in report['parse_failure_lines']:
            console.print(f"  {line}", style="dim", markup=False)

    console.print("\n" + "═" * 70, style="cyan")
