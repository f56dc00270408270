"""
Element Resolver - CLI Entry Point.

Configuration Priority:
    1. CLI arguments (--max-retries, --timeout-ms, etc.)
    2. Environment variables (ELEMENT_RESOLVER__RESOLVER__MAX_RETRIES, etc.)
    3. Config file (element-resolver.yaml)

Usage:
    element-resolver find https://example.com "More information"
    element-resolver click https://example.com "#submit" -s css -s text
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from element_resolver.actions.toolbox import ElementTools
from element_resolver.browsers.playwright_browser import PlaywrightBrowser
from element_resolver.config import get_settings, load_config
from element_resolver.config.settings import Settings
from element_resolver.engine.resolver import ElementResolver
from element_resolver.exceptions.browser import NavigationError
from element_resolver.interfaces.action import ActionResult, ActionType
from element_resolver.interfaces.browser import BrowserType
from element_resolver.utils.logging import setup_logging
from element_resolver.utils.retry import RetryConfig, retry_async

app = typer.Typer(
    name="element-resolver",
    help="Locate page elements with multiple strategies, retries and diagnostics",
    add_completion=False,
)

console = Console()
logger = logging.getLogger(__name__)


def _load_settings(config: Optional[Path], verbose: bool) -> Settings:
    settings = load_config(config_path=config) if config else get_settings()
    level = "DEBUG" if verbose else settings.logging.level
    setup_logging(level, settings.logging.file, settings.logging.json_format)
    return settings


def _print_result(result: ActionResult, target: str) -> None:
    if result.success:
        console.print(Panel.fit(
            f"[bold green]Element found[/bold green] for [bold]{escape(target)}[/bold]\n"
            f"[dim]Strategy:[/dim] {result.metadata.get('strategy')} "
            f"(attempt {result.metadata.get('attempt')})\n"
            f"[dim]Query:[/dim] {escape(str(result.metadata.get('query')))}\n"
            f"[dim]Took:[/dim] {result.duration_ms:.0f}ms",
            border_style="green",
        ))
        console.print_json(json.dumps(result.data, default=str))
        return
    
    console.print(Panel.fit(
        f"[bold red]{result.error_type}[/bold red]\n{escape(result.error or '')}",
        border_style="red",
    ))
    trace = result.metadata.get("trace")
    if not trace:
        return
    table = Table(title="Attempts")
    table.add_column("#", justify="right")
    table.add_column("Strategy")
    table.add_column("Query")
    table.add_column("Outcome")
    table.add_column("Message")
    for i, attempt in enumerate(trace["attempts"], start=1):
        table.add_row(
            str(i),
            attempt["strategy"],
            escape(attempt["query"]),
            attempt["outcome"],
            escape(attempt["message"]),
        )
    console.print(table)
    if trace.get("snapshot_path"):
        console.print(f"[dim]Snapshot:[/dim] {escape(str(trace['snapshot_path']))}")


async def _run_tool(
    settings: Settings,
    action_type: ActionType,
    url: str,
    target: str,
    strategies: Optional[List[str]],
    headed: bool,
    **options,
) -> ActionResult:
    """Open ``url``, run one tool and always close the browser."""
    browser = PlaywrightBrowser()
    await browser.launch(
        headless=not headed,
        browser_type=BrowserType(settings.browser.browser_type),
    )
    try:
        page = await browser.new_page(viewport={
            "width": settings.browser.viewport_width,
            "height": settings.browser.viewport_height,
        })
        await retry_async(
            page.goto,
            RetryConfig(max_attempts=2, retry_on=(NavigationError,)),
            url,
            timeout=settings.browser.timeout_ms,
        )
        tools = ElementTools(ElementResolver(settings.resolver), page)
        return await tools.run(action_type, target, strategies=strategies, **options)
    finally:
        await browser.close()


def _execute(action_type: ActionType, url: str, target: str, **kwargs) -> None:
    try:
        result = asyncio.run(_run_tool(action_type=action_type, url=url, target=target, **kwargs))
    except Exception as e:
        logger.exception(f"{action_type.value} failed")
        console.print(Panel.fit(
            f"[bold red]{type(e).__name__}[/bold red]\n{escape(str(e))}",
            border_style="red",
        ))
        raise typer.Exit(1)
    
    _print_result(result, target)
    if not result.success:
        raise typer.Exit(1)


@app.command()
def find(
    url: str = typer.Argument(..., help="Page to open"),
    target: str = typer.Argument(..., help="Text, id, attribute value, CSS or XPath"),
    strategy: Optional[List[str]] = typer.Option(None, "--strategy", "-s", help="Strategy to try (repeatable, in order)"),
    visible: bool = typer.Option(True, "--visible/--hidden-ok", help="Require the element to be visible, or accept elements hidden by CSS"),
    max_retries: Optional[int] = typer.Option(None, "--max-retries", "-r", help="Attempts per strategy"),
    timeout_ms: Optional[int] = typer.Option(None, "--timeout-ms", help="Time budget for the lookup"),
    enforce_timeout: bool = typer.Option(False, "--enforce-timeout", help="Stop retrying once the time budget is spent"),
    include_html: bool = typer.Option(False, "--html", help="Include the element's HTML"),
    include_context: bool = typer.Option(False, "--context", help="Include the parent element's HTML"),
    headed: bool = typer.Option(False, "--headed", help="Run with a visible browser"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
):
    """
    Find an element and print its details.
    
    Examples:
        element-resolver find https://example.com "More information" -s text
        element-resolver find https://example.com "//h1" --html
    """
    settings = _load_settings(config, verbose)
    _execute(
        ActionType.FIND,
        url,
        target,
        settings=settings,
        strategies=strategy or None,
        headed=headed,
        visible=None if visible else False,
        max_retries=max_retries,
        timeout_ms=timeout_ms,
        enforce_timeout=True if enforce_timeout else None,
        include_html=include_html,
        include_context=include_context,
    )


@app.command()
def click(
    url: str = typer.Argument(..., help="Page to open"),
    target: str = typer.Argument(..., help="Text, id, attribute value, CSS or XPath"),
    strategy: Optional[List[str]] = typer.Option(None, "--strategy", "-s", help="Strategy to try (repeatable, in order)"),
    max_retries: Optional[int] = typer.Option(None, "--max-retries", "-r", help="Attempts per strategy"),
    headed: bool = typer.Option(False, "--headed", help="Run with a visible browser"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
):
    """Click an element."""
    settings = _load_settings(config, verbose)
    _execute(
        ActionType.CLICK,
        url,
        target,
        settings=settings,
        strategies=strategy or None,
        headed=headed,
        max_retries=max_retries,
    )


@app.command()
def strategies():
    """List supported strategies in their default order."""
    from element_resolver.engine.strategies import StrategyRegistry
    
    table = Table(title="Strategies")
    table.add_column("Strategy")
    table.add_column("Locator")
    table.add_column("Example query for 'Submit'")
    for strategy in StrategyRegistry.list_strategies():
        spec = StrategyRegistry.get(strategy)
        table.add_row(strategy.value, spec.kind.value, escape(spec.translate("Submit")))
    console.print(table)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
