# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import logging

import patchnotes.config as pc
import patchnotes.document as pd
import patchnotes.gitutil as pg
import patchnotes.model as pm
import patchnotes.producer as pp
import patchnotes.revision as pr

logger = logging.getLogger(__name__)


class ReleaseNoter:
    '''
    creates the release notes document for the next patch release of the repository at
    `repo_dir`, covering changes since the newest release tag on the checked out branch.
    '''
    def __init__(
        self,
        repo_dir: str,
        producer: pp.NotesProducerBase,
        repo_opener: pg.RepoOpener=pg.open_repo,
    ):
        self.repo_dir = repo_dir
        self.producer = producer
        self.repo_opener = repo_opener

    def revision_range(self) -> pm.RevisionRange:
        try:
            repository = self.repo_opener(self.repo_dir)
        except Exception as e:
            raise pm.RepositoryError('opening repo', str(e)) from e

        return pr.resolve_revision_range(repository)

    def markdown(self) -> str:
        revision_range = self.revision_range()
        logger.info(f'creating release notes for {revision_range=}')

        try:
            notes = self.producer.produce(revision_range)
        except pm.ExternalToolError as e:
            raise pm.ExternalToolError(
                summary=f'gathering release notes: {e.summary}',
                full_error=e.full_error,
            ) from e
        except pm.RenderError as e:
            raise pm.RenderError(
                stage=e.stage,
                message=f'gathering release notes: {e.message}',
            ) from e

        return pd.assemble(notes)


def producer_from_cfg(
    cfg: pc.ReleaseNoterCfg,
    gatherer: pp.NoteGathererBase | None=None,
    command_runner: pp.CommandRunner | None=None,
) -> pp.NotesProducerBase:
    if cfg.producer is pc.ProducerMode.GATHERER:
        if gatherer is None:
            raise ValueError(f'a note gatherer must be passed for {cfg.producer=}')
        return pp.GathererNotesProducer(
            gatherer=gatherer,
            repo_dir=cfg.repo_dir,
            github_token=cfg.github_token,
            github_org=cfg.github_org,
            github_repo=cfg.github_repo,
        )

    if cfg.producer is pc.ProducerMode.COMMAND:
        kwargs = {}
        if command_runner:
            kwargs['command_runner'] = command_runner
        return pp.CommandNotesProducer(
            release_tools_dir=cfg.release_tools_dir,
            repo_dir=cfg.repo_dir,
            github_token=cfg.github_token,
            **kwargs,
        )

    raise NotImplementedError(cfg.producer)


def release_noter_from_cfg(
    cfg: pc.ReleaseNoterCfg,
    gatherer: pp.NoteGathererBase | None=None,
    command_runner: pp.CommandRunner | None=None,
    repo_opener: pg.RepoOpener=pg.open_repo,
) -> ReleaseNoter:
    return ReleaseNoter(
        repo_dir=cfg.repo_dir,
        producer=producer_from_cfg(
            cfg=cfg,
            gatherer=gatherer,
            command_runner=command_runner,
        ),
        repo_opener=repo_opener,
    )
