## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# lamfl — A minimal lambda language, linked into closures over a flat value stack.
#

import sys
import time
import traceback
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import LamError, LamParseError, LamIncompleteParse, UnboundIdentifier, TypeMismatch, InternalConsistency
from .parser import format_parse_error_context, format_identifier_context
from .formatting import write_without_ansi, format_value, format_expr
from .runtime import Runtime


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    validate: bool
    ignore: bool
    stats: bool
    plain: bool
    dump: bool


@dataclass
class ExecutionItem:
    source: str
    filename: str


class LamRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.validate = config.validate
        self.ignore = config.ignore
        self.stats_enabled = config.stats
        self.plain = config.plain
        self.dump = config.dump

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = Runtime(verbosity=self.verbose, validate=self.validate)
        self.total_stats = {'steps': 0, 'calls': 0, 'depth': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True
        if not is_repl and not self.ignore: sys.exit(1)

    def _handle_exception(self, exc, filename: str, source: str, is_repl: bool = False) -> bool:
        if isinstance(exc, LamParseError):
            if is_repl and isinstance(exc, LamIncompleteParse): return True
            context = format_parse_error_context(filename, exc.line, exc.column, exc.token, source=source)
            context += f"\n\033[90m{str(exc).replace(chr(10), ' ').replace(chr(9), ' ')}\033[0m\n"
            self._maybe_fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context, is_repl)
        elif isinstance(exc, UnboundIdentifier):
            names = ', '.join(f"`\033[1;97m{n}\033[0m`" for n in exc.names)
            detail = f"Identifier {names} from `\033[97m{filename}\033[0m` is not bound in any enclosing scope!"
            context = ''.join(format_identifier_context(filename, source, n) for n in exc.names[:1])
            self._maybe_fatal_error("LINKER ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, TypeMismatch):
            detail = f"Expression `\033[1;97m{format_expr(exc.lam_node, abbreviate=True)}\033[0m` called a non-function value."
            context = f"\033[1;33m  Value is\033[0;33m\n    {format_value(exc.value, abbreviate=True)}\033[0m\n"
            self._maybe_fatal_error("TYPE ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, InternalConsistency):
            detail = f"Linked tree from `\033[97m{filename}\033[0m` is inconsistent: {exc}"
            self._maybe_fatal_error("INTERNAL ERROR.", detail, type(exc).__name__, '', is_repl)
        elif isinstance(exc, RecursionError):
            detail = f"Evaluating `\033[97m{filename}\033[0m` recursed too deeply."
            self._maybe_fatal_error("RUNTIME ERROR.", detail, type(exc).__name__, '', is_repl)
        elif isinstance(exc, Exception):
            print(f'\033[30;43m RUNTIME ERROR. \033[0m Evaluating `\033[97m{filename}\033[0m` caused an error! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            traceback.print_exc()
            self.failure = True
            if not is_repl and not self.ignore: sys.exit(1)
        return False

    def execute_items(self, items: list[ExecutionItem]) -> None:
        for item in items:
            self._execute_script(item.source, item.filename)

    def _evaluate(self, source: str, filename: str):
        if not self.dump:
            return self.runtime.run(source, filename=filename, stats=self.total_stats)

        linked = self.runtime.link(self.runtime.parse(source, filename=filename))
        print(f"\033[90m{filename}:\033[0m {format_expr(linked)}")
        if self.validate: self.runtime.validate(linked)
        return self.runtime.eval(linked, stats=self.total_stats)

    def _execute_script(self, source: str, filename: str, is_repl: bool = False) -> None:
        try:
            result = self._evaluate(source, filename)
            print(format_value(result))
        except (LamError, Exception) as exc:
            self._handle_exception(exc, filename, source, is_repl=is_repl)
        else:
            self.executed_items += 1

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('lamfl - Lambda language REPL; type Ctrl+C to exit.')
        source = ""

        while True:
            try:
                prompt = "\033[36m<<< \033[0m" if not source.strip() else "\033[36m... \033[0m"
                line = input(prompt)
                if len(line.strip()) == 0: continue
                if line.strip() in ('quit', 'exit'): break
                source += line + "\n"

                try:
                    result = self._evaluate(source, '<REPL>')
                    print("\033[90m>>>\033[0m", format_value(result))
                    source = ""
                except (LamError, Exception) as exc:
                    if not self._handle_exception(exc, '<REPL>', source, is_repl=True):
                        source = ""

            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"call\t\033[97m{self.total_stats['calls']:,}\033[0m")
            print(f"depth\t\033[97m{self.total_stats['depth']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


_GLOBAL_FLAGS = ('--verbose', '--validate', '--ignore', '--stats', '--plain', '--dump', '-i', '-p', '-d')


def _parse_dev_tokens(tokens: list[str]) -> list[tuple[str, Path | str | None]]:
    """Turn `-c CODE`, `-r` and `.lam` paths into an ordered list of actions."""
    actions: list[tuple[str, Path | str | None]] = []
    pending = iter(token for token in tokens if token != '--')
    for token in pending:
        if token in ('-c', '--command'):
            code = next(pending, None)
            if code is None:
                raise click.BadParameter("Missing inline code after -c/--command option.")
            actions.append(('command', code))
        elif token in ('-r', '--repl'):
            actions.append(('repl', None))
        elif token.startswith('-'):
            raise click.BadParameter(f"Unknown option `{token}`.")
        else:
            path = Path(token)
            if not path.exists():
                raise click.BadParameter(f"File `{token}` not found.")
            if path.suffix != '.lam':
                raise click.BadParameter(f"Expected `.lam` source file, got `{token}`.")
            actions.append(('file', path))
    return actions


@click.group(invoke_without_command=True, context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.option('--verbose', '-v', default=0, count=True, help='Trace calls (-v) or every node (-vv) during evaluation.')
@click.option('--validate', is_flag=True, help='Check all stack offsets of the linked tree before evaluating.')
@click.option('--ignore', '-i', is_flag=True, help='Report errors but keep running the remaining inputs.')
@click.option('--stats', is_flag=True, help='Print evaluation totals at exit.')
@click.option('--plain', '-p', is_flag=True, help='Plain output: no ANSI colours, stderr merged into stdout.')
@click.option('--dump', '-d', is_flag=True, help='Print the linked tree before evaluating it.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, validate: bool, ignore: bool, stats: bool, plain: bool, dump: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, validate=validate, ignore=ignore, stats=stats, plain=plain, dump=dump)


@cli.command('run-file')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.pass_context
def run_file(ctx: click.Context, script) -> None:
    runner = LamRunner(ctx.obj['config'])
    runner.execute_items((ExecutionItem(script.read(), script.name or '<STDIN>'),))
    ctx.exit(runner.finalize())


@cli.command('run-dev', context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.argument('tokens', nargs=-1)
@click.pass_context
def run_dev(ctx: click.Context, tokens: tuple[str, ...]) -> None:
    runner = LamRunner(ctx.obj['config'])
    actions = _parse_dev_tokens(list(tokens))

    inline = 0
    for action, payload in actions:
        match action:
            case 'file':
                runner.execute_items((ExecutionItem(payload.read_text(encoding='utf-8'), str(payload)),))
            case 'command':
                inline += 1
                runner._execute_script(payload, f'<INPUT_{inline}>')
            case 'repl':
                runner.repl()

    if not actions:
        runner.repl()
    ctx.exit(runner.finalize())


@cli.command('run-repl')
@click.pass_context
def run_repl(ctx: click.Context) -> None:
    runner = LamRunner(ctx.obj['config'])
    runner.repl()
    ctx.exit(runner.finalize())


def _choose_command(rest: list[str]) -> tuple[str, list[str]]:
    if not rest:
        # Piped input runs as a script, a terminal gets the REPL.
        return ('run-repl', []) if sys.stdin.isatty() else ('run-file', ['-'])
    if rest == ['-']:
        return 'run-file', ['-']
    if rest == ['--repl']:
        return 'run-repl', []
    if len(rest) == 1 and rest[0].endswith('.lam') and Path(rest[0]).exists():
        return 'run-file', rest
    return 'run-dev', rest


def main(argv: list[str] | None = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    flags = [a for a in args if a in _GLOBAL_FLAGS or a.startswith('-v')]
    command, tail = _choose_command([a for a in args if a not in flags])
    cli.main(args=[*flags, command, *tail], prog_name='lamfl')


if __name__ == "__main__":
    main()
