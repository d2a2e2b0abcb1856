#!/usr/bin/env python3

"""
This program validates the arguments of the heatmap operation before passing them to
the heatmap engine.

@date: 2025-06-02
@version: 1.0.0

"""

import logging

from src.exceptions import ValidationError
from src.pipeline_utilities import run_heatmap_engine
from src.validation_utilities import (ask_overwrite, check_argument_count, check_input_file,
                                      check_output_path, parse_scale_bound,
                                      resolve_overwrite_policy)

logger = logging.getLogger(__name__)


def main(args, confirm=ask_overwrite):
    """
    Run the heatmap operation.

    args.arguments holds <gene-file> <heatmap-file> and optionally <lower-bound> <upper-bound>.
    """
    policy = resolve_overwrite_policy(args.force, args.interactive, args.never)

    check_argument_count(args.arguments, 2, 4)
    gene_path, heatmap_path = args.arguments[:2]

    bounds = None
    if len(args.arguments) == 4:
        lower = parse_scale_bound(args.arguments[2], 'Lower bound')
        upper = parse_scale_bound(args.arguments[3], 'Upper bound')
        if not lower < upper:
            raise ValidationError(f"Lower bound is not less than upper bound ({lower}, {upper})")
        bounds = (args.arguments[2], args.arguments[3])

    check_input_file(gene_path, 'Gene')
    check_output_path(heatmap_path, policy, confirm)

    run_heatmap_engine(gene_path, heatmap_path, args.engine_path, bounds=bounds)
    logger.info(f"Heatmap: {heatmap_path}")
