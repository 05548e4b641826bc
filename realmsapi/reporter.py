from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, Optional

from rich import box
from rich.console import Console
from rich.table import Table


def _display(value: Any) -> str:
    if value is None or value == "":
        return "[dim]-[/dim]"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value) or "[dim]-[/dim]"
    return str(value)


def print_realm(record: Dict[str, Any], console: Optional[Console] = None) -> None:
    """
    Render one aggregated realm record (wire field names) as rich tables.

    Stub records (only ``id``/``name``) and lookup failures render compactly.
    """
    console = console or Console()

    if record.get("valid") is False:
        console.print(
            f"[red]Realm code [bold]{record.get('realmCode')}[/bold] could not be resolved:[/red] "
            f"{record.get('error')}"
        )
        return

    if set(record) <= {"id", "name"}:
        console.print(
            f"[yellow]{record.get('id')}[/yellow] looks like a realm id; no lookup performed."
        )
        return

    realm = Table(title=f"Realm {record.get('name', '')}", box=box.ROUNDED, show_header=False)
    realm.add_column("Field", style="cyan", no_wrap=True)
    realm.add_column("Value")
    for key in (
        "id",
        "state",
        "motd",
        "worldType",
        "maxPlayers",
        "daysLeft",
        "expired",
        "ownerUUID",
        "clubId",
        "ip",
        "port",
    ):
        realm.add_row(key, _display(record.get(key)))
    invite = record.get("invite") or {}
    realm.add_row("invite", _display(invite.get("codeurl")))
    realm.add_row("request_id", _display(record.get("request_id")))
    console.print(realm)

    server = record.get("server") or {}
    if server.get("invalid"):
        console.print("[yellow]No live server status available.[/yellow]")
    else:
        status = Table(title="Live status", box=box.ROUNDED)
        for column in ("Level", "Players", "Gamemode", "Version", "Protocol"):
            status.add_column(column, justify="right" if column == "Players" else "left")
        status.add_row(
            _display(server.get("levelName")),
            f"{server.get('playersOnline', 0)}/{server.get('maxPlayers', 0)}",
            _display(server.get("gamemode")),
            _display(server.get("version")),
            _display(server.get("protocol")),
        )
        console.print(status)

    owner = record.get("owner") or {}
    club = record.get("club") or {}
    people = Table(title="Owner & club", box=box.ROUNDED, show_header=False)
    people.add_column("Field", style="cyan", no_wrap=True)
    people.add_column("Value")
    people.add_row("gamertag", _display(owner.get("gamertag")))
    people.add_row("gamerScore", f"{owner.get('gamerScore', 0):,}")
    people.add_row("presence", _display(owner.get("presenceText")))
    people.add_row("club members", f"{club.get('membersCount', 0):,}")
    people.add_row("club followers", f"{club.get('followersCount', 0):,}")
    people.add_row("club tags", _display(club.get("tags")))
    console.print(people)


def print_store_summary(
    realms: Iterable[Dict[str, Any]],
    users: Iterable[Dict[str, Any]],
    console: Optional[Console] = None,
) -> None:
    """Summarise both record stores: counts, latest request id and the most looked-up realms."""
    console = console or Console()
    realm_records = list(realms)
    user_records = list(users)

    summary = Table(title="Record stores", box=box.ROUNDED)
    summary.add_column("Store", style="cyan")
    summary.add_column("Records", justify="right", style="magenta")
    summary.add_column("Distinct", justify="right", style="green")
    summary.add_column("Latest request id", no_wrap=True)
    summary.add_row(
        "realms",
        f"{len(realm_records):,}",
        f"{len({r.get('id') for r in realm_records}):,}",
        _display(realm_records[-1].get("request_id") if realm_records else None),
    )
    # Profile records are stored raw and carry no request id.
    summary.add_row("xbox_users", f"{len(user_records):,}", "", _display(None))
    console.print(summary)

    if not realm_records:
        return

    counts = Counter((r.get("id"), r.get("name")) for r in realm_records)
    top = Table(title="Most looked-up realms", box=box.ROUNDED, caption="Top 10 by lookups")
    top.add_column("Realm id", style="cyan", no_wrap=True)
    top.add_column("Name")
    top.add_column("Lookups", justify="right", style="bold green")
    for (realm_id, name), count in counts.most_common(10):
        top.add_row(_display(realm_id), _display(name), str(count))
    console.print(top)


__all__ = ["print_realm", "print_store_summary"]
