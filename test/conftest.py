import datetime

import git
import pytest


@pytest.fixture
def git_repo(tmp_path):
    repo = git.Repo.init(tmp_path / 'repo')
    return repo


@pytest.fixture
def commit(git_repo):
    '''
    creates (empty) commits w/ increasing dates, as tags are ordered by creation date
    '''
    base_date = datetime.datetime(2020, 1, 1, tzinfo=datetime.timezone.utc)
    count = 0

    def _commit(message: str='commit', tag: str | None=None) -> git.Commit:
        nonlocal count
        count += 1
        # git's internal date format: <unix timestamp> <utc offset>
        timestamp = int((base_date + datetime.timedelta(days=count)).timestamp())
        date = f'{timestamp} +0000'
        created = git_repo.index.commit(
            message,
            author_date=date,
            commit_date=date,
        )
        if tag:
            git_repo.create_tag(tag, ref=created)
        return created

    return _commit
