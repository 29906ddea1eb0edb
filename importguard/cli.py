import glob
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from .cleanup import ImportCleanup
from .exceptions import ImportGuardError
from .models import Settings
from .output.formatters import format_output
from .utils.config import DEFAULT_CONFIG, get_config_path, load_config, save_config
from .utils.text import get_language_id


class OrderedGroup(click.Group):
    def __init__(self, *args, commands_order: list[str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.commands_order = commands_order or []

    def list_commands(self, ctx):
        commands = super().list_commands(ctx)
        if self.commands_order:
            ordered = [c for c in self.commands_order if c in commands]
            remaining = [c for c in commands if c not in self.commands_order]
            return ordered + remaining
        return commands


def setup_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_settings() -> Settings:
    try:
        return Settings.from_config(load_config())
    except ValidationError as e:
        raise click.ClickException(f"Invalid config file {get_config_path()}:\n{e}")


def expand_paths(paths: tuple[str, ...], settings: Settings | None = None) -> list[Path]:
    """Expand files and directories.

    Directories are searched recursively for files whose language has a
    directive syntax, built in or configured.
    """
    settings = settings or Settings()
    files: list[Path] = []
    for pattern in paths:
        path = Path(pattern).resolve()
        if not path.exists():
            raise click.ClickException(f"Path not found: {pattern}")
        if path.is_dir():
            matches = glob.glob(str(path / "**" / "*"), recursive=True)
            files.extend(
                Path(m).resolve() for m in sorted(matches)
                if Path(m).is_file() and settings.syntax_for(get_language_id(m)) is not None
            )
        else:
            files.append(path)
    return files


def output_format(ctx) -> str:
    return "json" if ctx.obj["json"] else "plain"


CLI_HELP = """\
importguard removes unused import directives with an external command while
keeping protected directives, and moves the remaining directives into the
file's enclosing namespace in a fixed order (standard library first).

`importguard clean` runs the configured remove-unused/sort command and
re-inserts any protected directive it deleted. `importguard sort` moves all
directives into the single namespace block of each file.

See `importguard config` for the config file location.
"""


@click.group(
    cls=OrderedGroup,
    commands_order=["clean", "sort", "patterns", "config"],
    help=CLI_HELP,
    context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120},
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, json_output, verbose):
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output
    settings = load_settings()
    ctx.obj["settings"] = settings
    setup_logging(settings.log_level, verbose)


@cli.command("clean")
@click.argument("paths", nargs=-1, required=True)
@click.option("--autosave", is_flag=True, help="Run as part of an automatic cleanup on save")
@click.option("--dry-run", is_flag=True, help="Print a diff instead of writing files")
@click.pass_context
def clean(ctx, paths, autosave, dry_run):
    """Remove unused directives, re-inserting protected ones.

    \b
    The command is taken from the [cleanup] section of the config file:
      merged_command          used when merged_command_supported is true
      remove_unused_command   } used in sequence otherwise
      sort_command            }
    A command containing {path} is run on a temporary copy of the file;
    any other command receives the file on stdin and prints the result.
    """
    cleanup = ImportCleanup(ctx.obj["settings"])
    results = []
    for path in expand_paths(paths, ctx.obj["settings"]):
        try:
            results.append(cleanup.clean_file(path, autosave=autosave, dry_run=dry_run))
        except ImportGuardError as e:
            raise click.ClickException(f"{path}: {e}")
        except (OSError, UnicodeDecodeError) as e:
            raise click.ClickException(f"Failed to read {path}: {e}")

    click.echo(format_output({"action": "Cleaned", "results": results}, output_format(ctx)))


@cli.command("sort")
@click.argument("paths", nargs=-1, required=True)
@click.option("--dry-run", is_flag=True, help="Print a diff instead of writing files")
@click.pass_context
def sort(ctx, paths, dry_run):
    """Move directives into the enclosing namespace, standard library first.

    Files with no namespace block, or more than one, are left unchanged.
    """
    cleanup = ImportCleanup(ctx.obj["settings"])
    results = []
    for path in expand_paths(paths, ctx.obj["settings"]):
        try:
            results.append(cleanup.sort_file(path, dry_run=dry_run))
        except (OSError, UnicodeDecodeError) as e:
            raise click.ClickException(f"Failed to read {path}: {e}")

    click.echo(format_output({"action": "Sorted", "results": results}, output_format(ctx)))


@cli.command("patterns")
@click.pass_context
def patterns(ctx):
    """Show the protected directive patterns."""
    cleanup = ImportCleanup(ctx.obj["settings"])
    click.echo(format_output({"patterns": cleanup.guard.patterns}, output_format(ctx)))


@cli.command("config")
@click.option("--init", "init_config", is_flag=True, help="Write the default config file if missing")
@click.pass_context
def config(ctx, init_config):
    """Print config file location and contents."""
    config_path = get_config_path()

    if init_config:
        if config_path.exists():
            raise click.ClickException(f"Config file already exists: {config_path}")
        save_config(DEFAULT_CONFIG, config_path)
        click.echo(f"Wrote {config_path}")
        return

    click.echo(f"Config file: {config_path}")
    click.echo()

    if config_path.exists():
        click.echo(config_path.read_text())
    else:
        click.echo("(file does not exist, using defaults)")


if __name__ == "__main__":
    cli()
