"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from .progress import get_progress
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)
from .format_utils import format_output, get_format_from_env, FORMATS


def _emit(item) -> None:
    click.echo(json.dumps(item, ensure_ascii=False, default=str))


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Progress reporting on stderr
    - Clean JSONL (or --format) output on stdout
    - --quiet suppresses data output
    - CommandError subclasses map to their exit codes

    The wrapped command may return a generator, list, dict or None.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        quiet = kwargs.get('quiet', False)
        output_format = kwargs.get('format') or get_format_from_env('jsonl')

        progress = get_progress(enabled=verbose or None)
        kwargs['progress'] = progress

        try:
            result = func(*args, **kwargs)

            if isinstance(result, dict):
                result = [result]

            if result is None:
                pass
            elif quiet:
                # Drain generators so their side effects still happen
                for _ in result:
                    pass
            else:
                for line in format_output(iter(result), output_format):
                    click.echo(line)

        except KeyboardInterrupt:
            progress.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except CommandError as e:
            progress.error(str(e))
            if not quiet:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__,
                    "exit_code": e.exit_code
                }
                if hasattr(e, 'succeeded'):
                    error_obj['succeeded'] = e.succeeded
                    error_obj['failed'] = e.failed
                if getattr(e, 'failing', None):
                    error_obj['failing'] = e.failing
                _emit(error_obj)
            sys.exit(e.exit_code)
        except Exception as e:
            progress.error(f"Command failed: {e}")
            if not quiet:
                _emit({"error": str(e), "type": type(e).__name__})
            sys.exit(get_exit_code_for_exception(e))

        sys.exit(SUCCESS)

    return wrapper


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                           help='Force progress output even when piped'),
    'quiet': click.option('-q', '--quiet', is_flag=True,
                         help='Suppress data output, show only progress'),
    'format': click.option('-f', '--format',
                         type=click.Choice(list(FORMATS)),
                         help='Output format (default: jsonl, or from REPOPROV_FORMAT env)'),
    'workspace': click.option('-w', '--workspace', type=click.Path(file_okay=False),
                            help='Workspace root (default: from config)'),
    'manifest': click.option('-m', '--manifest', type=click.Path(dir_okay=False),
                           help='Manifest file (default: <workspace>/stores/meta.json)'),
    'config': click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False),
                         help='Configuration file'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'quiet')
        def my_command(verbose, quiet):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
