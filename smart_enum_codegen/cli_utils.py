"""
Recording the generator invocation in generated headers.
"""

from pathlib import Path

import click

PROGRAM_NAME = "smart_enum_codegen"


def _display_value(value) -> str:
    """Paths are reduced to their file name so headers do not depend on the checkout location."""
    if isinstance(value, (str, Path)):
        return Path(str(value)).name
    return str(value)


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Rebuild the invocation of ``click_command`` from the active Click context.

    Positional arguments come first, then every option that differs from its
    default. Outside of an invocation only the program name is returned.

    Args:
        click_command: The command whose parameters are being reported

    Returns:
        Command line recorded in generated headers
    """
    ctx = click.get_current_context(silent=True)
    if ctx is None or not ctx.params:
        return PROGRAM_NAME

    positional: list[str] = []
    flags: list[str] = []
    for param in click_command.params:
        value = ctx.params.get(param.name)
        if not value:
            continue

        if isinstance(param, click.Argument):
            positional.append(_display_value(value))
        elif isinstance(param, click.Option) and value != param.default:
            name = param.opts[0]
            if param.is_flag:
                flags.append(name)
            else:
                flags.extend([name, _display_value(value)])

    return " ".join([PROGRAM_NAME, *positional, *flags])
