# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import dataclasses
import enum
import logging

logger = logging.getLogger(__name__)


DEFAULT_GITHUB_ORG = 'kubernetes'
DEFAULT_GITHUB_REPO = 'kubernetes'


class PatchNotesError(RuntimeError):
    pass


class RepositoryError(PatchNotesError):
    '''
    raised if reading from the repository failed. `query` names the failed read (e.g. `getting
    current checked out branch`).
    '''
    def __init__(self, query: str, reason: str | None=None):
        self.query = query
        self.reason = reason
        if reason:
            super().__init__(f'{query}: {reason}')
        else:
            super().__init__(query)


class NoReleaseTagFoundError(PatchNotesError):
    def __init__(self, pattern: str, branch: str | None=None):
        self.pattern = pattern
        self.branch = branch
        super().__init__(
            f'could not find a release tag ("{pattern}") on the current branch ({branch})'
        )


class RenderStage(enum.StrEnum):
    VALIDATING = 'validating'
    GATHERING = 'gathering'
    RENDERING = 'rendering'


class RenderError(PatchNotesError):
    def __init__(self, stage: RenderStage, message: str):
        self.stage = stage
        self.message = message
        super().__init__(f'{stage}: {message}')


class ExternalToolError(PatchNotesError):
    '''
    raised if an external command could not be started, or exited w/ a non-zero exit code.

    str(error) yields the short summary, `full_error` contains all diagnostic output captured
    from the failed command (command line, working directory, exit code, stdout, stderr).
    '''
    def __init__(self, summary: str, full_error: str):
        self.summary = summary
        self.full_error = full_error
        super().__init__(summary)


@dataclasses.dataclass(frozen=True)
class RevisionRange:
    start: str
    end: str
    branch: str | None = None

    def __str__(self):
        return f'{self.start}...{self.end}'


class DiscoverMode(enum.StrEnum):
    '''
    NONE: caller specifies the revision range; the note gatherer must not infer it
    others: note gatherer determines the range itself (not used by patchnotes)
    '''
    NONE = 'none'
    MERGE_BASE_TO_LATEST = 'mergebase-to-latest'
    PATCH_TO_PATCH = 'patch-to-patch'
    PATCH_TO_LATEST = 'patch-to-latest'
    MINOR_TO_MINOR = 'minor-to-minor'


@dataclasses.dataclass(kw_only=True)
class NotesOptions:
    '''
    Options handed to a note gatherer.

    discover_mode: how the gatherer determines the revision range
    github_org: organisation hosting the repository
    github_repo: name of the repository
    repo_path: path to local worktree
    github_token: optional access credential
    start_rev: revision (typically a release tag) to start from
    end_sha: commit digest to end at
    end_rev: revision name used for rendering (defaults to end_sha)
    pull: whether gatherer may pull/update the local repository
    '''
    discover_mode: DiscoverMode = DiscoverMode.NONE
    github_org: str = DEFAULT_GITHUB_ORG
    github_repo: str = DEFAULT_GITHUB_REPO
    repo_path: str | None = None
    github_token: str | None = None
    start_rev: str | None = None
    end_sha: str | None = None
    end_rev: str | None = None
    pull: bool = False

    def validate_and_finish(self) -> 'NotesOptions':
        if not self.github_org:
            raise ValueError('github_org must not be empty')
        if not self.github_repo:
            raise ValueError('github_repo must not be empty')

        if self.discover_mode is DiscoverMode.NONE:
            if not self.start_rev:
                raise ValueError(f'start_rev must be set if {self.discover_mode=}')
            if not self.end_sha:
                raise ValueError(f'end_sha must be set if {self.discover_mode=}')

        if not self.end_rev:
            self.end_rev = self.end_sha

        if not self.github_token:
            logger.warning('no github-token set - note gatherer may hit rate-limits')

        return self
