"""
Default locations of the ghmtools resources and external executables.

Everything lives under the ghmtools home directory (~/.genetic-heatmaps by
default, overridable with the GHMTOOLS_HOME environment variable):

    blacklists/<genome>.bed   ENCODE blacklist of each supported genome
    HELP/<operation>          plain-text help messages
    src/analysis-engine.r     transcription/binding analysis engine
    src/heatmap-engine.r      heatmap renderer

@Date: 2025-06-02

"""

import os

DEFAULT_HOME = '~/.genetic-heatmaps'

BEDTOOLS_EXECUTABLE = 'bedtools'
BETA_EXECUTABLE = 'BETA'

# Analysis defaults
DEFAULT_BINDING_DISTANCE = '10'  # kilobases
DEFAULT_WINDOW_SIZE = '10'

# Name of the gene target file written by BETA minus (no -n given)
BETA_TARGETS_FILE = 'NA_targets.txt'

HELP_PROMPT = "Type 'ghmtools help {operation}' for usage notes"


def ghmtools_home():
    return os.path.expanduser(os.environ.get('GHMTOOLS_HOME', DEFAULT_HOME))


def blacklist_dir():
    return os.path.join(ghmtools_home(), 'blacklists')


def help_dir():
    return os.path.join(ghmtools_home(), 'HELP')


def analysis_engine():
    return os.path.join(ghmtools_home(), 'src', 'analysis-engine.r')


def heatmap_engine():
    return os.path.join(ghmtools_home(), 'src', 'heatmap-engine.r')


def help_prompt(operation=None):
    """
    Help hint printed after every error message.
    """
    if operation is None:
        return "Type 'ghmtools help' for usage notes"
    return HELP_PROMPT.format(operation=operation)
