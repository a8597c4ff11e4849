"""
rails - Rails Assembler and Emulator Command-Line Interface
===========================================================

Assembles a Rails source file and runs it in the emulator. The emulator
shows the machine state whenever the program reads input (IN) and once
more when it halts.

Usage Examples
--------------
Run a program:
    $ rails counter.rails

Print the assembled program instead of running it:
    $ rails -l counter.rails

Resolve tags to instruction indices and refuse undefined tags:
    $ rails --tag-mode emitted --strict-tags counter.rails

Stop runaway loops:
    $ rails --max-steps 10000 counter.rails
"""

from pathlib import Path
from typing import Optional
import logging

import click

from rails_sdk import __version__
from rails_sdk.assembler import Assembler
from rails_sdk.cli.errors import handle_cli_exception
from rails_sdk.config import AssemblerConfig, EmulatorConfig, TagMode
from rails_sdk.disassembler import RailsDisassembler
from rails_sdk.emulator import Emulator

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-l", "--listing",
    is_flag=True,
    help="Print the assembled program as a listing and exit without running it",
)
@click.option(
    "--strict-tags/--no-strict-tags",
    default=None,
    help="Treat references to undefined tags as errors instead of resolving them to 0",
)
@click.option(
    "--tag-mode",
    type=click.Choice([mode.value for mode in TagMode], case_sensitive=False),
    default=None,
    help="What a tag points at: the raw source line index (raw, default) "
         "or the index of the next instruction (emitted)",
)
@click.option(
    "--max-steps",
    type=click.IntRange(min=1),
    default=None,
    help="Abort after executing this many instructions",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging, tracebacks on internal errors)",
)
@click.version_option(version=__version__, prog_name="rails")
def main(
    input_file: Path,
    listing: bool,
    strict_tags: Optional[bool],
    tag_mode: Optional[str],
    max_steps: Optional[int],
    verbose: bool,
) -> None:
    """
    Assemble and run a Rails program.

    INPUT_FILE is the Rails assembly source file to run.

    Configuration defaults come from the RAILS_TAG_MODE, RAILS_STRICT_TAGS,
    RAILS_MAX_STEPS and RAILS_CLEAR_SCREEN environment variables; options
    given on the command line take precedence.

    \b
    Examples:
        rails program.rails              # Assemble and run
        rails -l program.rails           # Show the assembled listing
        rails --max-steps 500 loop.rails # Give up after 500 instructions
    """
    setup_logging(verbose)

    asm_config = AssemblerConfig.from_env()
    if tag_mode is not None:
        asm_config.tag_mode = TagMode(tag_mode.lower())
    if strict_tags is not None:
        asm_config.strict_tags = strict_tags

    emu_config = EmulatorConfig.from_env()
    if max_steps is not None:
        emu_config.max_steps = max_steps

    error_type = "Assembly"
    try:
        logger.debug("Assembling %s (tag mode %s)", input_file, asm_config.tag_mode.value)
        program = Assembler(asm_config).assemble_file(input_file)

        if listing:
            click.echo(RailsDisassembler().disassemble_to_text(program))
            return

        error_type = "Runtime"
        Emulator(config=emu_config).run(program)

    except click.Abort:
        raise
    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type=error_type)


if __name__ == "__main__":
    main()
