'''
Patch Release Notes

Creates a draft of the release notes document for the next patch release of a repository. The
revision range starts at the newest release tag (vX.Y.Z, no pre-releases) reachable from the
currently checked out branch, and ends at the branch's head.

The notes section is created either by calling into a note gatherer (see
`patchnotes.producer.GathererNotesProducer`), or by running the `relnotes` executable (see
`patchnotes.producer.CommandNotesProducer`). Placeholder sections for pending pull requests and
green builds are appended (see `patchnotes.document`).
'''
