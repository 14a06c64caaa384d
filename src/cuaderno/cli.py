"""Command-line front end for the notebook.

Each sub-command is a cmd_* handler that receives the loaded service and the
parsed arguments and returns an exit code. Confirmation prompts live here,
not in the data layer.
"""

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable

from .config import NotebookConfig, load_config
from .data import FlatItem, JSONFileStore, NotebookService, build_remote
from .data.transfer import dumps_document, export_filename, parse_document
from .errors import NotebookError, NotFoundError
from .gate import PasswordGate
from .logging import JSONLLogger

Handler = Callable[[NotebookService, argparse.Namespace], int]


def _build_service(config: NotebookConfig) -> NotebookService:
    """Create a NotebookService wired to the configured stores."""
    store = JSONFileStore(config.store_path)
    activity = JSONLLogger(log_dir=config.log_dir)
    return NotebookService(store, build_remote(config), activity=activity)


def _confirm(message: str, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    try:
        answer = input(f"{message}\n[s/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("s", "si", "sí", "y", "yes")


def _format_date(iso: str) -> str:
    try:
        moment = datetime.fromisoformat(iso.replace("Z", "+00:00"))
    except ValueError:
        return ""
    return moment.astimezone().strftime("%d %b %Y %H:%M")


def _format_item(item: FlatItem) -> str:
    lines = [
        f"{item.category_emoji} {item.category_name}  ·  {_format_date(item.effective_timestamp)}",
        f"  {item.key} → {item.value}",
    ]
    if item.note.strip():
        lines.append(f"  {item.note.strip()}")
    lines.append(f"  id: {item.id}")
    return "\n".join(lines)


def _print_items(items: list[FlatItem], title: str) -> None:
    print(f"\n{title}")
    print("-" * 40)
    if not items:
        print("No hay datos todavía.")
        return
    for item in items:
        print(_format_item(item))
        print()


def cmd_overview(service: NotebookService, args: argparse.Namespace) -> int:
    """Show totals and the most recent items."""
    summary = service.overview(limit=args.limit)
    _print_items(summary.latest, summary.title)
    return 0


def cmd_list(service: NotebookService, args: argparse.Namespace) -> int:
    """List items, optionally for one category and/or filtered by a search."""
    items = service.search_filter(service.all_items(args.category), args.search)
    if args.category:
        category = service.find_category(args.category)
        assert category is not None
        title = f"{category.label} ({len(items)})"
    else:
        title = f"🗂️ Todo ({len(items)})"
    _print_items(items, title)
    return 0


def cmd_categories(service: NotebookService, args: argparse.Namespace) -> int:
    """List categories in display order."""
    for category in service.data.categories:
        print(f"{category.label} ({len(category.items)})  {category.id}")
    print(f"\nTotal: {len(service.data.categories)} categoría(s)")
    return 0


def cmd_add_category(service: NotebookService, args: argparse.Namespace) -> int:
    service.create_category(args.name, args.emoji)
    category = service.data.categories[-1]
    print(f"✓ Categoría creada: {category.label}  {category.id}")
    return 0


def cmd_add(service: NotebookService, args: argparse.Namespace) -> int:
    service.create_item(args.category, args.key, args.value, args.note)
    category = service.find_category(args.category)
    assert category is not None
    print(f"✓ Dato agregado a {category.label}  {category.items[-1].id}")
    return 0


def cmd_edit(service: NotebookService, args: argparse.Namespace) -> int:
    """Edit an item; omitted fields keep their current value."""
    found = service.find_item(args.item_id)
    if found is None:
        raise NotFoundError("item", args.item_id)
    category, item = found

    session = service.begin_edit(category.id, item.id)
    session.submit(
        args.key if args.key is not None else session.key,
        args.value if args.value is not None else session.value,
        args.note if args.note is not None else session.note,
        category_id=args.move_to,
    )

    target = service.find_category(args.move_to or category.id)
    assert target is not None
    print(f"✓ Dato actualizado en {target.label}")
    return 0


def cmd_delete(service: NotebookService, args: argparse.Namespace) -> int:
    found = service.find_item(args.item_id)
    if found is None:
        raise NotFoundError("item", args.item_id)
    category, item = found

    if not _confirm(f"¿Borrar este dato?\n\n{item.key} → {item.value}", args.yes):
        print("Cancelado.")
        return 0

    service.delete_item(category.id, item.id)
    print("✓ Dato borrado.")
    return 0


def cmd_export(service: NotebookService, args: argparse.Namespace) -> int:
    """Write the whole notebook to a JSON file."""
    path = Path(args.path) if args.path else Path(export_filename())
    try:
        path.write_text(dumps_document(service.export_document()), encoding="utf-8")
    except OSError as e:
        print(f"Error: no pude escribir {path}: {e}")
        return 1
    print(f"✓ Exportado a {path}")
    return 0


def cmd_import(service: NotebookService, args: argparse.Namespace) -> int:
    """Replace the notebook with the contents of an exported file."""
    path = Path(args.path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: no pude leer {path}: {e}")
        return 1

    document = parse_document(text)

    if not _confirm("¿Importar y reemplazar lo actual?\n\nTip: exporta antes por si acaso.", args.yes):
        print("Cancelado.")
        return 0

    service.replace_dataset(document)
    print("✅ Importación lista.")
    return 0


def cmd_wipe(service: NotebookService, args: argparse.Namespace) -> int:
    if not _confirm(
        "¿Borrar TODO?\n\nEsto no se puede deshacer (a menos que tengas un export).", args.yes
    ):
        print("Cancelado.")
        return 0

    service.reset_dataset()
    print("✓ Cuaderno reiniciado.")
    return 0


COMMANDS: dict[str, Handler] = {
    "overview": cmd_overview,
    "list": cmd_list,
    "categories": cmd_categories,
    "add-category": cmd_add_category,
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "export": cmd_export,
    "import": cmd_import,
    "wipe": cmd_wipe,
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the notebook CLI."""
    parser = argparse.ArgumentParser(
        prog="cuaderno",
        description="Cuaderno de datos: categorías, datos y búsqueda",
    )

    subparsers = parser.add_subparsers(dest="command", help="Sub-command help")

    overview_parser = subparsers.add_parser("overview", help="Totals and latest items")
    overview_parser.add_argument("-n", "--limit", type=int, default=10, help="Items to show")

    list_parser = subparsers.add_parser("list", help="List items, newest first")
    list_parser.add_argument("-c", "--category", help="Only this category id")
    list_parser.add_argument("-s", "--search", help="Case-insensitive search text")

    subparsers.add_parser("categories", help="List categories")

    cat_parser = subparsers.add_parser("add-category", help="Create a category")
    cat_parser.add_argument("name", help="Category name")
    cat_parser.add_argument("-e", "--emoji", default="📁", help="Category emoji")

    add_parser = subparsers.add_parser("add", help="Add an item to a category")
    add_parser.add_argument("category", help="Category id")
    add_parser.add_argument("key", help="Item label")
    add_parser.add_argument("value", help="Item content")
    add_parser.add_argument("-n", "--note", default="", help="Optional note")

    edit_parser = subparsers.add_parser("edit", help="Edit or move an item")
    edit_parser.add_argument("item_id", help="Item id")
    edit_parser.add_argument("-k", "--key", help="New label")
    edit_parser.add_argument("-v", "--value", help="New content")
    edit_parser.add_argument("-n", "--note", help="New note")
    edit_parser.add_argument("-m", "--move-to", help="Destination category id")

    delete_parser = subparsers.add_parser("delete", help="Delete an item")
    delete_parser.add_argument("item_id", help="Item id")
    delete_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask")

    export_parser = subparsers.add_parser("export", help="Export to a JSON file")
    export_parser.add_argument("path", nargs="?", help="Output file")

    import_parser = subparsers.add_parser("import", help="Replace data from a JSON file")
    import_parser.add_argument("path", help="File exported by cuaderno")
    import_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask")

    wipe_parser = subparsers.add_parser("wipe", help="Delete everything")
    wipe_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask")

    return parser


async def _run(handler: Handler, args: argparse.Namespace, config: NotebookConfig) -> int:
    service = _build_service(config)
    await service.load()
    try:
        return handler(service, args)
    except NotebookError as e:
        print(f"Error: {e}")
        return 1
    finally:
        await service.flush()


def run_cli(argv: list[str] | None = None, config: NotebookConfig | None = None) -> int:
    """Run the notebook CLI with given arguments.

    Args:
        argv: Command-line arguments. Uses sys.argv[1:] if None.
        config: Already loaded configuration. Loaded here if None.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    if config is None:
        config = load_config()
    if not PasswordGate(config.password).prompt():
        return 1

    return asyncio.run(_run(handler, args, config))


if __name__ == "__main__":
    sys.exit(run_cli())
