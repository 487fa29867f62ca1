#!/usr/bin/env python3

import argparse
import logging
import sys

import dacite
import yaml

import patchnotes.config as pc
import patchnotes.log
import patchnotes.model as pm
import patchnotes.noter as pn

logger = logging.getLogger('patch-release-notes')


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='patch-release-notes',
        description='create release notes for the next patch release of the checked out branch',
    )
    # defaults are None, so values from cfg-file are only overwritten if explicitly passed
    parser.add_argument(
        '--cfg',
        default=None,
        help='path to YAML cfg-file (see patchnotes.config.ReleaseNoterCfg)',
    )
    parser.add_argument(
        '--repo-dir',
        default=None,
        help='path to repository worktree (defaults to cwd)',
    )
    parser.add_argument(
        '--release-tools-dir',
        default=None,
        help='directory containing the `relnotes` executable',
    )
    parser.add_argument(
        '--producer',
        type=pc.ProducerMode,
        choices=tuple(pc.ProducerMode),
        default=None,
    )
    parser.add_argument('--github-org', default=None)
    parser.add_argument('--github-repo', default=None)
    parser.add_argument(
        '--github-token',
        default=None,
        help=f'defaults to cfg-file, then env-var {pc.GITHUB_TOKEN_ENV_VAR}',
    )
    parser.add_argument(
        '--outfile',
        default='-',
        help='output file to write release notes to (`-` for stdout, which is the default)',
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        default=False,
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    parsed = parse_args(argv)

    patchnotes.log.configure_default_logging(
        stdout_level=logging.DEBUG if parsed.verbose else logging.INFO,
    )

    try:
        cfg = pc.load_cfg(
            path=parsed.cfg,
            repo_dir=parsed.repo_dir,
            release_tools_dir=parsed.release_tools_dir,
            producer=parsed.producer,
            github_org=parsed.github_org,
            github_repo=parsed.github_repo,
            github_token=parsed.github_token,
        )
        release_noter = pn.release_noter_from_cfg(cfg=cfg)
    except (OSError, ValueError, dacite.DaciteError, yaml.YAMLError) as e:
        logger.error(f'invalid configuration: {e}')
        return 1

    try:
        markdown = release_noter.markdown()
    except pm.PatchNotesError as e:
        logger.error(f'creating release notes failed: {e}')
        if isinstance(e, pm.ExternalToolError):
            logger.debug(f'full error:\n{e.full_error}')
        elif e.__cause__:
            logger.debug(f'caused by: {e.__cause__!r}')
        return 1

    if parsed.outfile == '-':
        sys.stdout.write(markdown)
        return 0

    try:
        with open(parsed.outfile, 'w') as f:
            f.write(markdown)
    except OSError as e:
        logger.error(f'writing release notes to {parsed.outfile=} failed: {e}')
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
