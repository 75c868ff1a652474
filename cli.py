# cli.py
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

import requests

from sdk.catalog_client import CatalogClient, error_message

console = Console()
c = CatalogClient(base_url=os.getenv("CATALOG_API_URL", "http://127.0.0.1:3000"))

status_message = "Ready"
resource_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})

CORE_COLUMNS = ("id", "name", "price", "category")


# ---------------------------
# Display helpers
# ---------------------------
def show_resources(resources: List[Dict[str, Any]]):
    if not resources:
        console.print("[italic yellow]No resources found[/italic yellow]")
        return

    # core columns first, then whatever else the documents carry
    columns = [col for col in CORE_COLUMNS if any(col in r for r in resources)]
    for r in resources:
        for key in r:
            if key not in columns:
                columns.append(key)

    table = Table(
        title="📦 Catalog",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    for col in columns:
        table.add_column(col.capitalize(), justify="right" if col == "price" else "left",
                         style="dim" if col == "id" else None)

    for r in resources:
        table.add_row(*[str(r.get(col, "")) for col in columns])
    console.print(table)


def show_status(msg: str, ok: bool = True):
    color = "green" if ok else "red"
    icon = "✅" if ok else "❌"
    return Panel.fit(f"{icon} [bold {color}]{msg}[/bold {color}]", border_style=color)


def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the result, or None after printing the API's error message.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except requests.exceptions.HTTPError as e:
        status_message = f"Error: {error_message(e)}"
    except requests.exceptions.RequestException as e:
        status_message = f"Error: {e}"
    console.print(show_status(status_message, False))
    return None


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def get_id_completer():
    global resource_cache
    if not resource_cache:
        resource_cache = (try_api(c.list_resources) or {}).get("resources", [])
    return WordCompleter([r["id"] for r in resource_cache if r.get("id")], ignore_case=True)


def get_category_completer():
    return WordCompleter(sorted({r.get("category", "") for r in resource_cache} - {""}), ignore_case=True)


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: Optional[float] = None) -> Optional[float]:
    while True:
        raw = Prompt.ask(message, default="" if default is None else str(default))
        if raw == "" and default is None:
            return None
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def ask_field_value(raw: str) -> Any:
    # numbers stay numbers, everything else is a string
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🗂️ catalog-api",
        f"[bold blue]{c.base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message, resource_cache

    console.clear()
    console.print(create_header())
    resource_cache = (try_api(c.list_resources) or {}).get("resources", [])

    while True:
        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        options = [
            ("1", "📦 List resources", "5", "✏️ Patch resource"),
            ("2", "🔍 Filter resources", "6", "🗑️ Delete resource"),
            ("3", "ℹ️ Get resource by ID", "7", "🩺 Health"),
            ("4", "➕ Create resource", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 8)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            resp = try_api(c.list_resources, success_msg="Resources loaded")
            if resp is not None:
                resource_cache = resp["resources"]
                show_resources(resp["resources"])

        elif choice == "2":
            category = prompt_with_autocomplete("🏷️ Category (blank for any)", completer=get_category_completer())
            min_price = ask_float("💰 Minimum price (blank for none)")
            sort = "price" if Confirm.ask("Sort by price?", default=False) else None
            fields = prompt_with_autocomplete("Fields (comma separated, blank for all)")
            resp = try_api(c.list_resources, category or None, min_price, sort, fields or None,
                           success_msg="Filter applied")
            if resp is not None:
                console.print(f"[dim]{resp['count']} match(es)[/dim]")
                show_resources(resp["resources"])

        elif choice == "3":
            rid = prompt_with_autocomplete("Enter resource ID", completer=get_id_completer())
            resp = try_api(c.get_resource, rid, success_msg=f"Resource {rid} loaded")
            if resp:
                show_resources([resp])

        elif choice == "4":
            name = prompt_with_autocomplete("Enter name")
            price = ask_float("💰 Price", default=0.0)
            category = prompt_with_autocomplete("🏷️ Category", completer=get_category_completer())
            resp = try_api(c.create_resource, name, price, category, success_msg=f"'{name}' created")
            if resp:
                console.print(Panel(f"Created resource: [green]{resp['id']}[/green]"))
                resource_cache = []

        elif choice == "5":
            rid = prompt_with_autocomplete("Enter resource ID", completer=get_id_completer())
            fields: Dict[str, Any] = {}
            console.print("[dim]Enter field=value pairs, blank line to finish[/dim]")
            while True:
                line = prompt_with_autocomplete("  field=value").strip()
                if not line:
                    break
                if "=" not in line:
                    console.print("[red]Use field=value[/red]")
                    continue
                key, _, raw = line.partition("=")
                fields[key.strip()] = ask_field_value(raw.strip())
            resp = try_api(c.patch_resource, rid, fields, success_msg=f"Resource {rid} updated")
            if resp:
                shown = try_api(c.get_resource, rid)
                if shown:
                    show_resources([shown])
                resource_cache = []

        elif choice == "6":
            rid = prompt_with_autocomplete("Enter resource ID", completer=get_id_completer())
            if Confirm.ask(f"[red]Delete {rid}?[/red]"):
                try_api(c.delete_resource, rid, success_msg=f"Resource {rid} deleted")
                resource_cache = []

        elif choice == "7":
            ok = try_api(c.health)
            console.print(show_status("Store reachable" if ok else "Store unavailable", bool(ok)))

        elif choice.lower() in ("q", "quit", "exit"):
            console.print(Panel.fit("[bold green]Bye 👋[/bold green]", title="Goodbye"))
            sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
