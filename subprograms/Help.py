#!/usr/bin/env python3

"""
Display the help message of an operation.

@date: 2025-06-02

"""

import os
import sys

from src import config as ghm_config
from src.exceptions import ValidationError
from src.validation_utilities import check_argument_count


def main(args, stream=None):
    stream = stream or sys.stdout

    check_argument_count(args.arguments, 0, 1)
    # Without an operation, list the operations
    name = args.arguments[0] if args.arguments else 'operations'

    filepath = os.path.join(ghm_config.help_dir(), name)
    if os.path.basename(name) != name or not os.path.isfile(filepath):
        raise ValidationError(f"Invalid operation ({name})")

    with open(filepath, 'r') as handle:
        stream.write(handle.read())
