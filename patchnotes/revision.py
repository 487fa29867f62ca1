# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import collections.abc
import logging
import re

import semver

import patchnotes.gitutil as pg
import patchnotes.model as pm

logger = logging.getLogger(__name__)


RELEASE_TAG_PATTERN = re.compile(r'^v\d+\.\d+\.\d+$', flags=re.ASCII)


def is_release_tag(tag: str) -> bool:
    return bool(RELEASE_TAG_PATTERN.fullmatch(tag))


def filter_release_tags(tags: collections.abc.Iterable[str]) -> list[str]:
    '''
    returns tags matching `RELEASE_TAG_PATTERN` (pre-releases are excluded), retaining their
    order. Tags are neither sorted nor deduplicated.
    '''
    return [tag for tag in tags if is_release_tag(tag)]


def _parse_to_semver(tag: str) -> semver.Version | None:
    try:
        return semver.Version.parse(tag.removeprefix('v'))
    except ValueError:
        # e.g. leading zeroes (v1.02.3) are matched by RELEASE_TAG_PATTERN, but are not semver
        return None


def _warn_if_not_greatest(
    selected_tag: str,
    release_tags: collections.abc.Sequence[str],
):
    '''
    logs a warning if a release tag w/ a greater version than `selected_tag` exists. This does
    not influence which tag is selected.
    '''
    if (selected_version := _parse_to_semver(selected_tag)) is None:
        return

    versions = {
        tag: version for tag in release_tags
        if (version := _parse_to_semver(tag)) is not None
    }
    greatest_tag = max(versions, key=versions.get)

    if versions[greatest_tag] > selected_version:
        logger.warning(
            f'{selected_tag=} is not the greatest release tag ({greatest_tag=}) - tags were '
            'probably not passed newest first'
        )


def resolve_revision_range(repository: pg.RepositoryBase) -> pm.RevisionRange:
    '''
    determines the revision range for patch release notes: from the newest release tag on the
    currently checked out branch up to the branch's head.

    Tags returned by `repository.tags_for_branch` are expected to be ordered newest first; the
    first tag matching `RELEASE_TAG_PATTERN` is used as start of the range. Tags are not compared
    by version.
    '''
    try:
        branch = repository.current_branch()
    except Exception as e:
        raise pm.RepositoryError('getting current checked out branch', str(e)) from e

    try:
        tags = repository.tags_for_branch(branch)
    except Exception as e:
        raise pm.RepositoryError('getting tags on current branch', str(e)) from e

    if not (release_tags := filter_release_tags(tags)):
        raise pm.NoReleaseTagFoundError(
            pattern=RELEASE_TAG_PATTERN.pattern,
            branch=branch,
        )

    newest_patch_release = release_tags[0]
    logger.info(f'{newest_patch_release=} ({branch=}, {len(release_tags)} release tag(s) found)')
    _warn_if_not_greatest(
        selected_tag=newest_patch_release,
        release_tags=release_tags,
    )

    try:
        head = repository.head()
    except Exception as e:
        raise pm.RepositoryError('getting head of current branch', str(e)) from e

    return pm.RevisionRange(
        start=newest_patch_release,
        end=head,
        branch=branch,
    )
