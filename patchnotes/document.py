# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import collections.abc


SECTION_SEPARATOR = '\n\n----\n\n'

PENDING_PRS_SECTION = '### some pending PRs'
GREEN_BUILD_SECTION = '### find a green build'

DEFAULT_PLACEHOLDER_SECTIONS = (
    PENDING_PRS_SECTION,
    GREEN_BUILD_SECTION,
)


def assemble(
    notes_body: str,
    sections: collections.abc.Iterable[str]=DEFAULT_PLACEHOLDER_SECTIONS,
    separator: str=SECTION_SEPARATOR,
) -> str:
    '''
    returns the release notes document: the rendered notes, followed by the given placeholder
    sections (in the given order).
    '''
    return separator.join((notes_body, *sections))
