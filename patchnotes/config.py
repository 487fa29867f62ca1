# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import dataclasses
import enum
import logging
import os

import dacite
import yaml

import patchnotes.model as pm

logger = logging.getLogger(__name__)


GITHUB_TOKEN_ENV_VAR = 'GITHUB_TOKEN'


class ProducerMode(enum.StrEnum):
    COMMAND = 'command'
    GATHERER = 'gatherer'


@dataclasses.dataclass(kw_only=True)
class ReleaseNoterCfg:
    '''
    repo_dir: worktree of the repository to create release notes for
    release_tools_dir: directory containing the `relnotes` executable (used by COMMAND producer)
    producer: which producer to create the notes section with
    github_org: organisation hosting the repository (passed to note gatherer)
    github_repo: name of the repository (passed to note gatherer)
    github_token: credential for note gatherer / `relnotes` (defaults to env-var `GITHUB_TOKEN`)
    '''
    repo_dir: str = '.'
    release_tools_dir: str = '.'
    producer: ProducerMode = ProducerMode.COMMAND
    github_org: str = pm.DEFAULT_GITHUB_ORG
    github_repo: str = pm.DEFAULT_GITHUB_REPO
    github_token: str | None = None


def cfg_from_dict(raw: dict) -> ReleaseNoterCfg:
    return dacite.from_dict(
        data_class=ReleaseNoterCfg,
        data=raw,
        config=dacite.Config(
            cast=[enum.Enum],
            strict=True,
        ),
    )


def load_cfg(
    path: str | None=None,
    **overrides,
) -> ReleaseNoterCfg:
    '''
    loads cfg from YAML file at `path` (if passed). Overrides that are not `None` take precedence
    over values read from file. If no github-token is configured, it is read from `GITHUB_TOKEN`.
    '''
    raw = {}
    if path:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f'expected a mapping in cfg-file at {path=}, got {type(raw)}')

    raw.update({
        k: v for k, v in overrides.items()
        if v is not None
    })

    cfg = cfg_from_dict(raw)

    if not cfg.github_token:
        cfg.github_token = os.environ.get(GITHUB_TOKEN_ENV_VAR)

    logger.debug(f'{cfg.repo_dir=} {cfg.release_tools_dir=} {cfg.producer=}')
    return cfg
