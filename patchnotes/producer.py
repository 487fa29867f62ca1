# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
Producers of the notes section of patch release notes.

Both producers implement `NotesProducerBase.produce`: the `GathererNotesProducer` calls into a
note gatherer in-process, the `CommandNotesProducer` runs the `relnotes` executable and captures
its output.
'''

import abc
import collections.abc
import logging
import os
import shlex
import subprocess
import typing

import patchnotes.model as pm

logger = logging.getLogger(__name__)


RELNOTES_EXECUTABLE = 'relnotes'

# markdown is written to a tmpfile (removed upon exit), progress output is redirected to stderr
RELNOTES_SCRIPT = '''
set -euo pipefail
tmp="$( mktemp )"
trap 'rm -f -- "${{tmp}}"' EXIT
{relnotes} --htmlize-md --preview --quiet --markdown-file="${{tmp}}" >&2
cat "${{tmp}}"
'''

CommandRunner = collections.abc.Callable[..., subprocess.CompletedProcess]


class NoteGathererBase:
    '''
    gathers release notes from commits and pull requests, and renders them. patchnotes only calls
    into implementations; it does not ship one.
    '''
    @abc.abstractmethod
    def gather(self, options: pm.NotesOptions) -> tuple[typing.Any, typing.Any]:
        '''
        returns release notes and their history for the range specified by `options`
        '''
        raise NotImplementedError()

    @abc.abstractmethod
    def create_document(self, notes, history) -> typing.Any:
        raise NotImplementedError()

    @abc.abstractmethod
    def render_markdown(self, document, start_rev: str, end_rev: str) -> str:
        raise NotImplementedError()


class NotesProducerBase:
    @abc.abstractmethod
    def produce(
        self,
        revision_range: pm.RevisionRange,
    ) -> str:
        raise NotImplementedError()


class GathererNotesProducer(NotesProducerBase):
    def __init__(
        self,
        gatherer: NoteGathererBase,
        repo_dir: str,
        github_token: str | None=None,
        github_org: str=pm.DEFAULT_GITHUB_ORG,
        github_repo: str=pm.DEFAULT_GITHUB_REPO,
    ):
        if gatherer is None:
            raise ValueError(gatherer)

        self.gatherer = gatherer
        self.repo_dir = repo_dir
        self.github_token = github_token
        self.github_org = github_org
        self.github_repo = github_repo

    def notes_options(
        self,
        revision_range: pm.RevisionRange,
    ) -> pm.NotesOptions:
        return pm.NotesOptions(
            discover_mode=pm.DiscoverMode.NONE,
            github_org=self.github_org,
            github_repo=self.github_repo,
            pull=False,
            repo_path=self.repo_dir,
            github_token=self.github_token,
            start_rev=revision_range.start,
            end_sha=revision_range.end,
        )

    def produce(
        self,
        revision_range: pm.RevisionRange,
    ) -> str:
        options = self.notes_options(revision_range=revision_range)

        try:
            options.validate_and_finish()
        except Exception as e:
            raise pm.RenderError(pm.RenderStage.VALIDATING, f'finishing opts: {e}') from e

        logger.info(f'gathering release notes for {revision_range=}')
        try:
            notes, history = self.gatherer.gather(options)
        except Exception as e:
            raise pm.RenderError(pm.RenderStage.GATHERING, f'listing release notes: {e}') from e

        try:
            document = self.gatherer.create_document(notes, history)
        except Exception as e:
            raise pm.RenderError(
                pm.RenderStage.RENDERING,
                f'creating release note document: {e}',
            ) from e

        try:
            markdown = self.gatherer.render_markdown(
                document,
                start_rev=options.start_rev,
                end_rev=options.end_rev,
            )
        except Exception as e:
            raise pm.RenderError(
                pm.RenderStage.RENDERING,
                f'rendering release notes to markdown: {e}',
            ) from e

        logger.debug(f'rendered release notes:\n\n----\n{markdown}\n----\n')

        return markdown


def _full_error(
    args: collections.abc.Sequence[str],
    cwd: str,
    returncode: int | None=None,
    stdout: str | None=None,
    stderr: str | None=None,
    exception: BaseException | None=None,
) -> str:
    lines = [
        f'command: {shlex.join(args)}',
        f'workdir: {cwd}',
    ]
    if returncode is not None:
        lines.append(f'exit code: {returncode}')
    if exception is not None:
        lines.append(f'error: {exception!r}')
    if stdout:
        lines.append(f'stdout:\n{stdout}')
    if stderr:
        lines.append(f'stderr:\n{stderr}')

    return '\n'.join(lines)


class CommandNotesProducer(NotesProducerBase):
    '''
    runs `relnotes` (found in `release_tools_dir`) in `repo_dir` and returns its markdown output.

    The revision range is not passed to `relnotes`, which determines it on its own. Only
    `GITHUB_TOKEN` (and `PATH`) are passed to the command's environment.
    '''
    def __init__(
        self,
        release_tools_dir: str,
        repo_dir: str,
        github_token: str | None=None,
        command_runner: CommandRunner=subprocess.run,
    ):
        self.release_tools_dir = release_tools_dir
        self.repo_dir = repo_dir
        self.github_token = github_token
        self.command_runner = command_runner

    @property
    def bin_path(self) -> str:
        return os.path.abspath(os.path.join(self.release_tools_dir, RELNOTES_EXECUTABLE))

    def command(self) -> tuple[str, ...]:
        script = RELNOTES_SCRIPT.format(relnotes=shlex.quote(self.bin_path))
        return ('bash', '-c', script)

    def env(self) -> dict[str, str]:
        env = {
            'GITHUB_TOKEN': self.github_token or '',
        }
        if (path := os.environ.get('PATH')):
            env['PATH'] = path
        return env

    def produce(
        self,
        revision_range: pm.RevisionRange,
    ) -> str:
        bin_path = self.bin_path
        work_dir = self.repo_dir
        logger.debug(f'{bin_path=}')

        args = self.command()
        logger.info(
            f'starting release notes gatherer ({work_dir=}, {revision_range=}) '
            '... this may take a while ...'
        )

        try:
            result = self.command_runner(
                args,
                cwd=work_dir,
                env=self.env(),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.debug(f'execing {bin_path=} failed: {e}')
            raise pm.ExternalToolError(
                summary=f'could not start {RELNOTES_EXECUTABLE}: {e}',
                full_error=_full_error(args=args, cwd=work_dir, exception=e),
            ) from e

        if result.returncode != 0:
            full_error = _full_error(
                args=args,
                cwd=work_dir,
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )
            logger.debug(f'execing & getting output failed ({result.returncode=})')
            logger.debug(f'full exec error:\n{full_error}')
            raise pm.ExternalToolError(
                summary=f'{RELNOTES_EXECUTABLE} exited with {result.returncode=}',
                full_error=full_error,
            )

        if result.stderr:
            logger.debug(f'{RELNOTES_EXECUTABLE} stderr:\n{result.stderr}')

        return result.stdout
