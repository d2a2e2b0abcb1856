"""
Set of functions to stage the input files in a temporary workspace before using BETA
and the analysis engine

@Date: 2025-06-02

"""

import csv
import logging
import os
import re
import shutil
import tempfile

import pandas as pd

logger = logging.getLogger(__name__)

COMMENT_MARKER = '#'
DELIMITER = '\t'

# Input files are not required to be UTF-8; undecodable bytes are carried through unchanged
ENCODING = 'utf-8'
ENCODING_ERRORS = 'surrogateescape'

# Runs of spaces and tabs separating two fields
_SEPARATOR_RUN = re.compile(r'[ \t]+')


class Workspace:
    """
    Temporary directory owned by one invocation.

    Layout::

        <root>/parsed_data/   normalized copies of the inputs
        <root>/BETA_output/   BETA minus output directory

    Use it as a context manager; the directory is removed on exit unless keep is True.
    """

    def __init__(self, prefix='ghmtools-analysis.', keep=False):
        self.prefix = prefix
        self.keep = keep
        self.root = None

    def __enter__(self):
        self.root = tempfile.mkdtemp(prefix=self.prefix)
        os.mkdir(self.parsed_data)
        logger.debug(f"Created temporary directory {self.root}")
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.keep:
            logger.info(f"Intermediate files kept in {self.root}")
        else:
            shutil.rmtree(self.root, ignore_errors=True)
        return False

    @property
    def parsed_data(self):
        return os.path.join(self.root, 'parsed_data')

    @property
    def beta_output(self):
        return os.path.join(self.root, 'BETA_output')

    def path(self, name):
        return os.path.join(self.parsed_data, name)


def _open_text(path, mode='r', newline=None):
    return open(path, mode, encoding=ENCODING, errors=ENCODING_ERRORS, newline=newline)


def is_comment(line):
    """
    A comment line has the comment marker as its first non-blank character.

    Leading blanks are ignored because normalize_line removes them: ' # x' would
    become '#\\tx' and be dropped as a comment by a second normalization. Counting it
    as a comment from the start keeps normalization idempotent. A marker inside a
    field ('GENE#2') does not make a comment.
    """
    return line.lstrip(' \t').startswith(COMMENT_MARKER)


def normalize_line(line):
    """
    Rewrite the field separators of one line (without its terminator) as single tabs.
    Leading and trailing spaces/tabs are dropped.
    """
    return _SEPARATOR_RUN.sub(DELIMITER, line.strip(' \t'))


def strip_comments(input_file, output_file):
    """
    Copy a file without its comment lines (first non-blank character is the comment marker).

    Parameters
    ----------
    input_file : str
        Path to the file to be copied
    output_file : str
        Path to the copy

    Returns
    -------
    str
        Path to the copy
    """
    with _open_text(input_file) as src, _open_text(output_file, 'w', newline='\n') as out:
        for line in src:
            if not is_comment(line):
                out.write(line)
    return output_file


def normalize_file(input_file, output_file):
    """
    Copy a file without comment lines, with every field separator replaced by a tab.

    Each output line ends with a newline. Normalizing an already normalized file
    gives the same bytes back.

    Parameters
    ----------
    input_file : str
        Path to the file to be normalized
    output_file : str
        Path to the normalized copy (may not be the input file)

    Returns
    -------
    str
        Path to the normalized copy
    """
    with _open_text(input_file) as src, _open_text(output_file, 'w', newline='\n') as out:
        for line in src:
            if is_comment(line):
                continue
            out.write(normalize_line(line.rstrip('\r\n')) + '\n')
    return output_file


def is_site_data(path):
    """
    Tell raw binding site data (several tab separated columns) from a list of bound genes
    (one column). The file must already be normalized.
    """
    with _open_text(path) as handle:
        for line in handle:
            if DELIMITER in line:
                return True
    return False


def count_records(path):
    """
    Number of data rows in a normalized, tab separated file (0 when empty).

    Quote characters are ordinary field content. If pandas cannot parse the file, the
    non-blank, non-comment lines are counted instead.
    """
    try:
        table = pd.read_csv(path, sep=DELIMITER, header=None, dtype=str,
                            comment=COMMENT_MARKER, skip_blank_lines=True,
                            quoting=csv.QUOTE_NONE, on_bad_lines='skip',
                            encoding=ENCODING, encoding_errors=ENCODING_ERRORS)
    except pd.errors.EmptyDataError:
        return 0
    except pd.errors.ParserError as e:
        logger.debug(f"Could not read {path} as a table ({e}), counting lines")
        with _open_text(path) as handle:
            return sum(1 for line in handle if line.strip() and not is_comment(line))
    return len(table)
