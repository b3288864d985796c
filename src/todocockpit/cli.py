"""CLI interface for ToDo Cockpit."""

import asyncio
import logging
from datetime import date, timedelta
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from todocockpit.config import get_settings
from todocockpit.database import get_async_session_maker, init_db, close_db
from todocockpit.exceptions import CockpitError
from todocockpit.logging_setup import setup_logging
from todocockpit.models import TodoStatus
from todocockpit.services.ordering import plan_move
from todocockpit.services.todo_service import (
    TodoService,
    CategoryService,
    LabelService,
)
from todocockpit.schemas.todo import TodoCreate, TodoUpdate, TodoFilter

app = typer.Typer(
    name="cockpit",
    help="ToDo Cockpit - categories, todos and labels from the terminal.",
    no_args_is_help=True,
)
console = Console()

DEFAULT_LABEL_COLOR = "#3b82f6"

STATUS_STYLES = {
    TodoStatus.INBOX: "cyan",
    TodoStatus.TODO: "yellow",
    TodoStatus.DONE: "green",
}


def run_async(coro):
    """Run async function in sync context, then release the engine."""

    async def _run():
        try:
            return await coro
        finally:
            await close_db()

    try:
        return asyncio.run(_run())
    except CockpitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)


def format_due_date(due: date, today: date | None = None) -> str:
    """Human label for a due date: Today, Tomorrow, Overdue, weekday or date."""
    today = today or date.today()
    if due == today:
        return "Today"
    if due == today + timedelta(days=1):
        return "Tomorrow"
    if due < today:
        return f"Overdue: {due.strftime('%b')} {due.day}"
    if due <= today + timedelta(days=7):
        return due.strftime("%A")
    return f"{due.strftime('%b')} {due.day}, {due.year}"


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Invalid date format: {value}[/red]")
        console.print("Use format: YYYY-MM-DD")
        raise typer.Exit(1)


async def ensure_db():
    """Ensure database is initialized."""
    await init_db()


async def _find_category(service: CategoryService, name_or_id: str):
    for c in await service.get_all():
        if c.id == name_or_id or c.name.lower() == name_or_id.lower():
            return c
    return None


async def _find_todo(service: TodoService, todo_id: str):
    todo = await service.get_by_id(todo_id)
    if todo:
        return todo
    # Try partial match
    for t in await service.get_all():
        if t.id.startswith(todo_id):
            return t
    return None


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Configure logging before any command runs."""
    settings = get_settings()
    setup_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        log_file=settings.log_file,
    )


@app.command()
def add(
    title: str = typer.Argument(..., help="Todo title"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    important: bool = typer.Option(False, "--important", "-i", help="Mark as important"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category name"),
    labels: Optional[str] = typer.Option(None, "--labels", "-l", help="Comma-separated labels"),
    status: TodoStatus = typer.Option(TodoStatus.INBOX, "--status", "-s", help="Initial status"),
):
    """Add a new todo."""
    due_date = _parse_date(due) if due else None

    async def _add():
        await ensure_db()
        async with get_async_session_maker()() as session:
            # Resolve category
            category_id = None
            if category:
                cat_service = CategoryService(session)
                found = await _find_category(cat_service, category)
                if found is None:
                    # Create category if it doesn't exist
                    found = await cat_service.create(name=category)
                category_id = found.id

            # Resolve labels
            label_ids = []
            if labels:
                label_service = LabelService(session)
                label_map = {l.name.lower(): l.id for l in await label_service.get_all()}

                for label_name in labels.split(","):
                    label_name = label_name.strip()
                    if not label_name:
                        continue
                    if label_name.lower() in label_map:
                        label_ids.append(label_map[label_name.lower()])
                    else:
                        new_label = await label_service.create(label_name, DEFAULT_LABEL_COLOR)
                        label_map[label_name.lower()] = new_label.id
                        label_ids.append(new_label.id)

            todo = await TodoService(session).create(
                TodoCreate(
                    title=title,
                    due_date=due_date,
                    is_important=important,
                    status=status,
                    category_id=category_id,
                    labels=label_ids,
                )
            )
            await session.commit()

            console.print(Panel(
                f"[green]Created:[/green] {todo.title}\n"
                f"[dim]ID: {todo.id}[/dim]",
                title="Todo Added",
            ))

    run_async(_add())


@app.command("list")
def list_todos(
    all_todos: bool = typer.Option(False, "--all", "-a", help="Show completed todos too"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Filter by category"),
    inbox: bool = typer.Option(False, "--inbox", help="Only uncategorized todos"),
    important: bool = typer.Option(False, "--important", "-i", help="Only important todos"),
):
    """List todos."""

    async def _list():
        await ensure_db()
        async with get_async_session_maker()() as session:
            cat_service = CategoryService(session)
            categories = {c.id: c.name for c in await cat_service.get_all()}

            category_id = "" if inbox else None
            if category:
                found = await _find_category(cat_service, category)
                if found is None:
                    console.print(f"[red]Category not found: {category}[/red]")
                    raise typer.Exit(1)
                category_id = found.id

            todos = await TodoService(session).get_all(
                category_id=category_id,
                is_important=True if important else None,
                view=TodoFilter.ALL if all_todos else TodoFilter.ACTIVE,
            )

            if not todos:
                console.print("[dim]No todos found.[/dim]")
                return

            table = Table(title=f"Todos ({len(todos)} total)")
            table.add_column("ID", style="dim", width=8)
            table.add_column("!", justify="center", width=1)
            table.add_column("Title", style="bold")
            table.add_column("Status")
            table.add_column("Due", width=18)
            table.add_column("Category", style="cyan")
            table.add_column("Labels", style="magenta")

            for todo in todos:
                title = todo.title
                if todo.is_done:
                    title = f"[strike dim]{title}[/strike dim]"
                style = STATUS_STYLES[todo.status]

                due_str = ""
                if todo.due_date:
                    due_str = format_due_date(todo.due_date)
                    if due_str.startswith("Overdue") and not todo.is_done:
                        due_str = f"[red]{due_str}[/red]"

                table.add_row(
                    todo.id[:8],
                    "[yellow]*[/yellow]" if todo.is_important else "",
                    title,
                    f"[{style}]{todo.status.value}[/{style}]",
                    due_str,
                    categories.get(todo.category_id, "Inbox"),
                    ", ".join(f"[{l.color}]{l.name}[/{l.color}]" for l in todo.labels),
                )

            console.print(table)

    run_async(_list())


@app.command()
def done(
    todo_id: str = typer.Argument(..., help="Todo ID (or partial ID)"),
):
    """Mark a todo as done."""

    async def _done():
        await ensure_db()
        async with get_async_session_maker()() as session:
            todo_service = TodoService(session)
            found = await _find_todo(todo_service, todo_id)
            if not found:
                console.print(f"[red]Todo not found: {todo_id}[/red]")
                raise typer.Exit(1)

            todo = await todo_service.update(found.id, TodoUpdate(status=TodoStatus.DONE))
            await session.commit()

            console.print(f"[green]Completed:[/green] {todo.title}")

    run_async(_done())


@app.command()
def delete(
    todo_id: str = typer.Argument(..., help="Todo ID (or partial ID)"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a todo."""

    async def _delete():
        await ensure_db()
        async with get_async_session_maker()() as session:
            todo_service = TodoService(session)
            todo = await _find_todo(todo_service, todo_id)
            if not todo:
                console.print(f"[red]Todo not found: {todo_id}[/red]")
                raise typer.Exit(1)

            if not force:
                confirm = typer.confirm(f"Delete '{todo.title}'?")
                if not confirm:
                    raise typer.Abort()

            await todo_service.delete(todo.id)
            await session.commit()

            console.print(f"[red]Deleted:[/red] {todo.title}")

    run_async(_delete())


@app.command()
def categories():
    """List all categories."""

    async def _categories():
        await ensure_db()
        async with get_async_session_maker()() as session:
            cats = await CategoryService(session).get_all()

            if not cats:
                console.print("[dim]No categories found.[/dim]")
                return

            table = Table(title="Categories")
            table.add_column("#", justify="right")
            table.add_column("ID", style="dim", width=8)
            table.add_column("Name", style="bold")

            for cat in cats:
                table.add_row(str(cat.position), cat.id[:8], cat.name)

            console.print(table)

    run_async(_categories())


@app.command("category-add")
def category_add(
    name: str = typer.Argument(..., help="Category name"),
):
    """Add a category after the existing ones."""

    async def _add():
        await ensure_db()
        async with get_async_session_maker()() as session:
            category = await CategoryService(session).create(name=name)
            await session.commit()
            console.print(f"[green]Created category:[/green] {category.name}")

    run_async(_add())


@app.command("category-rename")
def category_rename(
    category: str = typer.Argument(..., help="Category name or ID"),
    new_name: str = typer.Argument(..., help="New name"),
):
    """Rename a category."""

    async def _rename():
        await ensure_db()
        async with get_async_session_maker()() as session:
            service = CategoryService(session)
            found = await _find_category(service, category)
            if found is None:
                console.print(f"[red]Category not found: {category}[/red]")
                raise typer.Exit(1)
            await service.update(found.id, name=new_name)
            await session.commit()
            console.print(f"[green]Renamed:[/green] {category} -> {new_name}")

    run_async(_rename())


@app.command("category-delete")
def category_delete(
    category: str = typer.Argument(..., help="Category name or ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a category; its todos move to the inbox."""

    async def _delete():
        await ensure_db()
        async with get_async_session_maker()() as session:
            service = CategoryService(session)
            found = await _find_category(service, category)
            if found is None:
                console.print(f"[red]Category not found: {category}[/red]")
                raise typer.Exit(1)

            if not force:
                confirm = typer.confirm(f"Delete category '{found.name}'?")
                if not confirm:
                    raise typer.Abort()

            await service.delete(found.id)
            await session.commit()
            console.print(f"[red]Deleted category:[/red] {found.name}")

    run_async(_delete())


@app.command("category-move")
def category_move(
    category: str = typer.Argument(..., help="Category to move"),
    target: str = typer.Argument(..., help="Category whose place it takes"),
):
    """Move a category to another category's place in the order."""

    async def _move():
        await ensure_db()
        async with get_async_session_maker()() as session:
            service = CategoryService(session)
            dragged = await _find_category(service, category)
            dropped_on = await _find_category(service, target)
            if dragged is None or dropped_on is None:
                console.print(f"[red]Category not found: {category if dragged is None else target}[/red]")
                raise typer.Exit(1)

            order = [c.id for c in await service.get_all()]
            plan = plan_move(order, dragged.id, dropped_on.id)
            cats = await service.reorder([p.as_dict() for p in plan])
            await session.commit()
            console.print("Order: " + " > ".join(c.name for c in cats))

    run_async(_move())


@app.command()
def labels():
    """List all labels."""

    async def _labels():
        await ensure_db()
        async with get_async_session_maker()() as session:
            all_labels = await LabelService(session).get_all()

            if not all_labels:
                console.print("[dim]No labels found.[/dim]")
                return

            table = Table(title="Labels")
            table.add_column("ID", style="dim", width=8)
            table.add_column("Name", style="bold")
            table.add_column("Color")

            for label in all_labels:
                table.add_row(
                    label.id[:8],
                    label.name,
                    f"[{label.color}]{label.color}[/{label.color}]",
                )

            console.print(table)

    run_async(_labels())


@app.command("label-add")
def label_add(
    name: str = typer.Argument(..., help="Label name"),
    color: str = typer.Option(DEFAULT_LABEL_COLOR, "--color", help="Hex color like #3b82f6"),
):
    """Add a label."""

    async def _add():
        await ensure_db()
        async with get_async_session_maker()() as session:
            label = await LabelService(session).create(name, color)
            await session.commit()
            console.print(f"[green]Created label:[/green] {label.name} ({label.color})")

    run_async(_add())


@app.command("label-delete")
def label_delete(
    name: str = typer.Argument(..., help="Label name or ID"),
):
    """Delete a label and detach it from every todo."""

    async def _delete():
        await ensure_db()
        async with get_async_session_maker()() as session:
            service = LabelService(session)
            found = None
            for label in await service.get_all():
                if label.id == name or label.name.lower() == name.lower():
                    found = label
                    break
            if found is None:
                console.print(f"[red]Label not found: {name}[/red]")
                raise typer.Exit(1)

            await service.delete(found.id)
            await session.commit()
            console.print(f"[red]Deleted label:[/red] {found.name}")

    run_async(_delete())


@app.command()
def stats(
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only this category"),
    inbox: bool = typer.Option(False, "--inbox", help="Only uncategorized todos"),
):
    """Show todo statistics."""

    async def _stats():
        await ensure_db()
        async with get_async_session_maker()() as session:
            category_id = "" if inbox else None
            if category:
                found = await _find_category(CategoryService(session), category)
                if found is None:
                    console.print(f"[red]Category not found: {category}[/red]")
                    raise typer.Exit(1)
                category_id = found.id

            s = await TodoService(session).get_statistics(category_id=category_id)

            table = Table(title="Statistics", show_header=False)
            table.add_column("Metric", style="bold")
            table.add_column("Value", justify="right")
            table.add_row("Tasks", f"{s.total} ({s.active} active)")
            table.add_row("Completed", f"{s.completion_rate}% ({s.completed}/{s.total})")
            table.add_row("Important", str(s.important))
            table.add_row("Overdue", f"[red]{s.overdue}[/red]" if s.overdue else "0")
            table.add_row("Due today", str(s.due_today))
            table.add_row("Due tomorrow", str(s.due_tomorrow))
            table.add_row("Due this week", str(s.due_this_week))
            console.print(table)

    run_async(_stats())


@app.command()
def server(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind to"),
):
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    setup_logging(level=settings.log_level, log_file=settings.log_file)

    console.print(f"[green]Starting ToDo Cockpit server at http://{host}:{port}[/green]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    uvicorn.run(
        "todocockpit.main:app",
        host=host,
        port=port,
        reload=False,
        log_config=None,
    )


if __name__ == "__main__":
    app()
