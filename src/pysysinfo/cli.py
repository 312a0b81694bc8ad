"""pysysinfo command line entry point."""

import logging

import click

from pysysinfo.codec import to_json
from pysysinfo.collector import SystemCollector
from pysysinfo.config import RenderConfig, SysInfoConfig, default_disk_path
from pysysinfo.include import Category
from pysysinfo.render import render


def _parse_categories(ctx, param, values):
    categories = []
    for value in values:
        for name in value.split(","):
            if not name.strip():
                continue
            try:
                categories.append(Category.parse(name))
            except ValueError as e:
                raise click.BadParameter(str(e), ctx=ctx, param=param) from e
    return tuple(categories)


@click.command()
@click.version_option(version="0.1.0", prog_name="pysysinfo")
@click.option(
    "--include",
    "-i",
    multiple=True,
    callback=_parse_categories,
    help="Category to collect (repeatable or comma separated). Default: all. "
    f"Choices: {', '.join(c.value for c in Category)}",
)
@click.option("--json", "as_json", is_flag=True, help="Print the snapshot as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--tui", is_flag=True, help="Open the interactive viewer")
@click.option("--max-workers", type=click.IntRange(min=1), default=32, show_default=True)
@click.option("--disk-path", default=None, help="Path whose disk usage is reported")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
def main(include, as_json, verbose, tui, max_workers, disk_path, log_level):
    """Collect and print a snapshot of this machine."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = SysInfoConfig(
        max_workers=max_workers,
        disk_path=disk_path or default_disk_path(),
    )
    collector = SystemCollector(config=config)

    if tui:
        from pysysinfo.app import SysInfoApp

        SysInfoApp(collector=collector, include=include).run()
        return

    snapshot = collector.collect(include)
    if as_json:
        click.echo(to_json(snapshot))
    else:
        click.echo(render(snapshot, RenderConfig(verbose=verbose)), nl=False)


if __name__ == "__main__":
    main()
