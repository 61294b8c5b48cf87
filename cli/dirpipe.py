'''dirpipe CLI 진입점(KR). dirpipe CLI entrypoint (EN).'''

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Sequence

import click
from pydantic import ValidationError

from core import (
    DirpipeError,
    FlagError,
    ProcessSettings,
    RunConfig,
    ScannerSettings,
    configure_logging,
)
from src.process import ProcessErrorBase, run_interactive
from src.scanner import DirectoryError, ScanErrorBase, scan

NAME = 'dirpipe'
VERSION = '0.1.0'
DEFAULT_LOG = Path('.cache/dirpipe.log')
DEFAULT_COMMAND = 'bash'

logger = logging.getLogger(__name__)


def _report_skipped(error: DirectoryError) -> None:
    '''건너뛴 디렉터리를 알린다 · Report a skipped directory.'''

    click.echo(f'skipped {error.path}: {error.message}', err=True)


def run(config: RunConfig, spool_file: Path) -> int:
    '''스캔 후 대화형 명령을 실행한다 · Scan, then run the interactive command.'''

    cmd_file = Path(sys.argv[0]).resolve()
    click.echo(f'Cmd file: [{cmd_file}]')
    click.echo(f'Cmd dir : [{cmd_file.parent}]')
    logger.info('spool file %s, config %s', spool_file, json.dumps(config.to_dict()))

    if config.scan_enabled:
        click.echo(f'root: [{config.root}]')
        found = 0
        for path in scan(
            config.root,
            config.scanner.to_scan_options(),
            report_error=_report_skipped,
        ):
            click.echo(path)
            found += 1
        logger.info('scan of %s yielded %d files', config.root, found)

    process = config.process
    exit_status = run_interactive(
        process.command, process.args, process.to_supervisor_options()
    )
    if exit_status != 0:
        raise DirpipeError(
            f'{process.command} exited with status {exit_status}', stage='process'
        )
    return 0


@click.command(
    context_settings={'allow_interspersed_args': False, 'help_option_names': ['-h', '--help']}
)
@click.option(
    '-q',
    '-f',
    'sql_file',
    type=click.Path(path_type=Path),
    default=None,
    help='입력 SQL 파일(미사용) · Input sql file (accepted, unused)',
)
@click.option('-u', 'user', default=None, help='사용자(미사용) · User name (accepted, unused)')
@click.option('-p', 'password', default=None, help='암호(미사용) · Password (accepted, unused)')
@click.option('-s', 'sid', default=None, help='DB SID(미사용) · Database SID (accepted, unused)')
@click.option(
    '-version', '--version', 'show_version', is_flag=True, help='버전 출력 · Print version and quit'
)
@click.option(
    '--root',
    type=click.Path(path_type=Path, file_okay=False),
    default=Path('.'),
    help='스캔 루트 · Directory to scan',
)
@click.option('--no-scan', is_flag=True, help='스캔 생략 · Skip the directory scan')
@click.option('--workers', type=int, default=8, help='스캔 작업자 수 · Scan worker threads')
@click.option(
    '--skip-unreadable', is_flag=True, help='읽을 수 없는 폴더 건너뜀 · Skip unreadable directories'
)
@click.option('--relative', is_flag=True, help='상대 경로 출력 · Keep paths relative to root')
@click.option(
    '--split-streams', is_flag=True, help='stderr 분리 · Relay child stderr to stderr'
)
@click.option(
    '--exit-timeout', type=float, default=None, help='종료 대기 제한(초) · Exit timeout seconds'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=DEFAULT_LOG,
    help='로그 파일 경로 · Log file path',
)
@click.option('--verbose', is_flag=True, help='상세 로그 · Verbose logs')
@click.option('--quiet', is_flag=True, help='간략 로그 · Quiet logs')
@click.argument('spool_file', required=False, type=click.Path(path_type=Path))
@click.argument('command', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(
    ctx: click.Context,
    sql_file: Path | None,
    user: str | None,
    password: str | None,
    sid: str | None,
    show_version: bool,
    root: Path,
    no_scan: bool,
    workers: int,
    skip_unreadable: bool,
    relative: bool,
    split_streams: bool,
    exit_timeout: float | None,
    log_file: Path,
    verbose: bool,
    quiet: bool,
    spool_file: Path | None,
    command: Sequence[str],
) -> int:
    '''디렉터리를 스캔하고 명령을 대화형으로 실행 · Scan a tree, then run COMMAND interactively.

    FILE is the spooled file. COMMAND defaults to bash.
    '''

    if show_version:
        click.echo(f'{NAME} version {VERSION}', err=True)
        return 0
    if spool_file is None:
        click.echo(ctx.get_help(), err=True)
        raise FlagError('missing spool file argument')
    del sql_file, user, password, sid  # accepted for compatibility, never consumed

    level = 'INFO'
    if verbose:
        level = 'DEBUG'
    if quiet:
        level = 'WARNING'
    configure_logging(log_file, level=level)

    try:
        config = RunConfig(
            root=root,
            scan_enabled=not no_scan,
            scanner=ScannerSettings(
                workers=workers,
                on_error='skip' if skip_unreadable else 'fail',
                absolute=not relative,
            ),
            process=ProcessSettings(
                command=command[0] if command else DEFAULT_COMMAND,
                args=tuple(command[1:]),
                split_streams=split_streams,
                exit_timeout=exit_timeout,
            ),
        )
    except ValidationError as exc:
        raise FlagError(str(exc)) from exc
    return run(config, spool_file)


def _stage_of(exc: Exception) -> str | None:
    if isinstance(exc, DirpipeError):
        return exc.stage
    if isinstance(exc, ScanErrorBase):
        return 'scan'
    return 'process'


def main(argv: Sequence[str] | None = None) -> int:
    '''CLI 진입점을 실행한다 · Execute CLI entry point.'''

    args = list(sys.argv[1:] if argv is None else argv)
    try:
        result = cli.main(args=args, prog_name=NAME, standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return 1
    except click.Abort:
        click.echo('Aborted!', err=True)
        return 1
    except (DirpipeError, ScanErrorBase, ProcessErrorBase) as exc:
        logger.error('run failed: %s', exc)
        click.echo(
            json.dumps({'error': str(exc), 'stage': _stage_of(exc)}, ensure_ascii=False), err=True
        )
        return 1
    return int(result or 0)


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
