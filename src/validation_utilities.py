"""
Set of functions to validate the command line arguments of the ghmtools operations
before anything is handed to the external programs.

@Date: 2025-06-02

"""

import enum
import logging
import os
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN, localcontext

from src.exceptions import UsageError, ValidationError, OverwriteDeclined

logger = logging.getLogger(__name__)

# Positive numbers (integer or decimal, optional leading +)
POSITIVE_NUMBER_REGEX = re.compile(r'^\+?(\d+|\d*\.\d+)\Z', re.ASCII)
# Non-negative integers
NONNEGATIVE_INTEGER_REGEX = re.compile(r'^\+?\d+\Z', re.ASCII)
# Real numbers (heatmap scale bounds)
REAL_NUMBER_REGEX = re.compile(r'^[+-]?(\d+|\d*\.\d+)\Z', re.ASCII)

OVERWRITE_PROMPT = 'Type y to overwrite that file, type n to exit: '


class OverwritePolicy(enum.Enum):
    FORCE = 'f'
    INTERACTIVE = 'i'
    NEVER = 'n'


@dataclass(frozen=True)
class AnalysisConfig:
    overwrite_policy: OverwritePolicy
    binding_distance: int  # base pairs
    use_blacklist: bool
    window_size: int


class GenomeRegistry:
    """
    Supported genomes, mapped to the blacklist file used to filter their binding sites.

    A genome is supported when the blacklist directory holds a <genome>.bed file.
    The registry is built once and only queried afterwards.
    """

    def __init__(self, blacklists):
        self._blacklists = dict(blacklists)

    @classmethod
    def from_directory(cls, directory):
        """
        Build the registry from the *.bed files of a blacklist directory.

        Parameters
        ----------
        directory : str
            Directory holding one <genome>.bed file per supported genome

        Returns
        -------
        GenomeRegistry
            Registry (empty when the directory does not exist)
        """
        blacklists = {}
        if os.path.isdir(directory):
            for filename in sorted(os.listdir(directory)):
                path = os.path.join(directory, filename)
                genome, extension = os.path.splitext(filename)
                if extension == '.bed' and os.path.isfile(path):
                    blacklists[genome] = path
        else:
            logger.debug(f"Blacklist directory not found: {directory}")
        logger.debug(f"Supported genomes: {', '.join(blacklists) or 'none'}")
        return cls(blacklists)

    def __contains__(self, genome):
        return genome in self._blacklists

    def __len__(self):
        return len(self._blacklists)

    def genomes(self):
        return sorted(self._blacklists)

    def blacklist(self, genome):
        """
        Path of the blacklist file of a genome.

        Raises
        ------
        ValidationError
            If the genome is not supported
        """
        try:
            return self._blacklists[genome]
        except KeyError:
            raise ValidationError(f"Invalid genome ({genome})") from None


def resolve_overwrite_policy(force=False, interactive=False, never=False):
    """
    Combine the -f, -i and -n flags. Priority is never > interactive > force;
    interactive when no flag is given.
    """
    if never:
        return OverwritePolicy.NEVER
    if interactive:
        return OverwritePolicy.INTERACTIVE
    if force:
        return OverwritePolicy.FORCE
    return OverwritePolicy.INTERACTIVE


def parse_binding_distance(value):
    """
    Convert a binding distance given in kilobases to base pairs.

    The product 1000 * value is computed exactly on the decimal text and rounded
    half to even to the nearest integer (0.0025 -> 2, 0.0035 -> 4).

    Parameters
    ----------
    value : str
        Binding distance in kilobases, as typed on the command line

    Returns
    -------
    int
        Binding distance in base pairs

    Raises
    ------
    ValidationError
        If the value is not a positive number
    """
    value = str(value)
    if not POSITIVE_NUMBER_REGEX.match(value) or Decimal(value) == 0:
        raise ValidationError(f"Binding distance is not a positive number ({value})")
    # Enough digits for the whole product, however long the input is
    with localcontext() as ctx:
        ctx.prec = len(value) + 4
        base_pairs = Decimal(value).scaleb(3).to_integral_value(rounding=ROUND_HALF_EVEN)
    return int(base_pairs)


def parse_window_size(value):
    value = str(value)
    if not NONNEGATIVE_INTEGER_REGEX.match(value):
        raise ValidationError(f"Window size is not a non-negative integer ({value})")
    return int(value)


def parse_scale_bound(value, name):
    value = str(value)
    if not REAL_NUMBER_REGEX.match(value):
        raise ValidationError(f"{name} is not a number ({value})")
    return Decimal(value)


def check_argument_count(arguments, *expected):
    if len(arguments) not in expected:
        raise UsageError("Invalid number of arguments")


def check_input_file(path, description):
    """
    Check that an input path exists and is a regular file.

    Parameters
    ----------
    path : str
        Path given on the command line
    description : str
        Human readable name of the file used in the error messages (e.g. 'Transcription data')

    Returns
    -------
    str
        The same path

    Raises
    ------
    ValidationError
        If the path does not exist or is not a regular file
    """
    if not os.path.isfile(path):
        if not os.path.exists(path):
            raise ValidationError(f"{description} file does not exist ({path})")
        raise ValidationError(f"Invalid {description.lower()} file ({path})")
    return path


def check_genome(genome, registry):
    if genome not in registry:
        raise ValidationError(f"Invalid genome ({genome})")
    return genome


def ask_overwrite(prompt=OVERWRITE_PROMPT):
    """
    Ask the user on the terminal whether to overwrite a file.
    End of input counts as a refusal.
    """
    try:
        return input(prompt)
    except EOFError:
        return ''


def check_output_path(path, policy, confirm=ask_overwrite):
    """
    Decide whether an output path can be written.

    Parameters
    ----------
    path : str
        Output path given on the command line
    policy : OverwritePolicy
        What to do when the path already exists
    confirm : callable
        Called with the prompt text when the policy is interactive; returns the user's answer

    Returns
    -------
    str
        The same path, confirmed for writing

    Raises
    ------
    ValidationError
        If the path exists and the policy is never
    OverwriteDeclined
        If the path exists and the user did not answer y or Y
    """
    if not os.path.exists(path):
        return path

    if policy is OverwritePolicy.FORCE:
        logger.debug(f"Overwriting {path}")
        return path

    if policy is OverwritePolicy.NEVER:
        raise ValidationError(f"A file already exists at {path}")

    logger.warning(f"A file already exists at {path}")
    answer = confirm(OVERWRITE_PROMPT)
    if (answer or '').strip().lower() != 'y':
        raise OverwriteDeclined(f"Not overwriting {path}")
    return path
