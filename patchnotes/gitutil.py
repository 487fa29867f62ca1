# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import abc
import collections.abc
import logging
import os

import git
import git.exc

import patchnotes.model as pm

logger = logging.getLogger(__name__)


class RepositoryBase:
    '''
    read-only view on a version-control repository, as needed for resolving revision ranges.
    '''
    @abc.abstractmethod
    def current_branch(self) -> str:
        raise NotImplementedError()

    @abc.abstractmethod
    def tags_for_branch(self, branch: str) -> list[str]:
        '''
        returns tags reachable from `branch`, newest first
        '''
        raise NotImplementedError()

    @abc.abstractmethod
    def head(self) -> str:
        raise NotImplementedError()


RepoOpener = collections.abc.Callable[[str], RepositoryBase]


class GitRepository(RepositoryBase):
    def __init__(
        self,
        repo: git.Repo | str,
    ):
        if repo is None:
            raise ValueError(repo)
        if isinstance(repo, str):
            repo = git.Repo(repo)
        if not isinstance(repo, git.Repo):
            raise ValueError(repo)

        self.repo = repo

    @property
    def repo_path(self) -> str:
        return self.repo.working_tree_dir

    def current_branch(self) -> str:
        try:
            return self.repo.active_branch.name
        except TypeError as e:
            # raised by GitPython if HEAD is detached
            raise pm.RepositoryError('determining active branch', str(e)) from e

    def tags_for_branch(self, branch: str) -> list[str]:
        try:
            # creatordate sorts annotated tags by tagging date, lightweight tags by commit date
            tags = self.repo.git.tag('--sort=-creatordate', '--merged', branch)
        except git.exc.GitCommandError as e:
            raise pm.RepositoryError(f'listing tags merged into {branch=}', str(e)) from e

        return tags.split()

    def head(self) -> str:
        try:
            return self.repo.head.commit.hexsha
        except ValueError as e:
            # raised by GitPython if HEAD does not point to a commit (e.g. empty repository)
            raise pm.RepositoryError('resolving HEAD', str(e)) from e


def open_repo(path: str) -> GitRepository:
    path = os.path.abspath(path)
    logger.debug(f'opening {path=}')

    try:
        repo = git.Repo(path)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise pm.RepositoryError(f'opening git-repository at {path=}', repr(e)) from e

    return GitRepository(repo=repo)
