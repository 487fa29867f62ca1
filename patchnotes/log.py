from copy import copy
import logging
import sys


class Bcolors:
    RESET_ALL = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'


def _coloured(colour: str):
    return lambda level_name: f'{Bcolors.BOLD}{colour}{level_name}{Bcolors.RESET_ALL}'


class PatchNotesFormatter(logging.Formatter):
    level_colors = {
        logging.DEBUG: _coloured(Bcolors.BLUE),
        logging.INFO: _coloured(Bcolors.GREEN),
        logging.WARNING: _coloured(Bcolors.YELLOW),
        logging.ERROR: _coloured(Bcolors.RED),
    }

    def __init__(self, *args, stream=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.stream = stream or sys.stderr

    def color_level_name(self, level_name, level_number):
        func = self.level_colors.get(level_number, str)
        return func(level_name)

    def formatMessage(self, record):
        record_copy = copy(record)
        levelname = record_copy.levelname
        if self.stream.isatty():
            levelname = self.color_level_name(levelname, record_copy.levelno)
        record_copy.__dict__['levelprefix'] = levelname
        return super().formatMessage(record_copy)


def default_fmt_string(print_thread_id: bool=False):
    ptid = print_thread_id
    return f'%(asctime)s [%(levelprefix)s] {"TID:%(thread)d " if ptid else ""}%(name)s: %(message)s'


def configure_default_logging(
    stdout_level=None,
    force=True,
    print_thread_id=False,
    stream=None,
):
    '''
    logs to stderr by default, as stdout is reserved for the release notes document
    '''
    if not stdout_level:
        stdout_level = logging.INFO
    if not stream:
        stream = sys.stderr

    # make sure to have a clean root logger (in case setup is called multiple times)
    if force:
        for h in list(logging.root.handlers):
            logging.root.removeHandler(h)
            h.close()

    sh = logging.StreamHandler(stream=stream)
    sh.setLevel(stdout_level)
    sh.setFormatter(PatchNotesFormatter(
        fmt=default_fmt_string(print_thread_id=print_thread_id),
        stream=stream,
    ))

    logging.root.addHandler(hdlr=sh)
    logging.root.setLevel(level=stdout_level)

    # too verbose (logs every git-invocation)
    logging.getLogger('git').setLevel(logging.WARNING)
