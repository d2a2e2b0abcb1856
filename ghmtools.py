#!/usr/bin/env python3
"""
ghmtools is the command line interface of the genetic heatmaps pipeline. It validates
the arguments of each operation and hands them to the external programs (bedtools,
BETA and the R engines) that do the actual work.

@date: 2025-06-02

@version: 1.0.0

"""

import argparse
import logging
import sys

from src import config as ghm_config
from src.exceptions import GhmToolsError, UsageError, OverwriteDeclined
from src.validation_utilities import ask_overwrite

from subprograms.Analysis import main as analysis_main
from subprograms.Heatmap import main as heatmap_main
from subprograms.Help import main as help_main

OPERATIONS = ('analysis', 'heatmap', 'help')

ANALYSIS_USAGE = ('ghmtools analysis [-f | -i | -n] [-d <binding-distance>] [--no-blacklist]\n'
                  '    [--window <window-size>] [--] <transcription-data> <binding-data>\n'
                  '    <genome> <gene-file>')
HEATMAP_USAGE = ('ghmtools heatmap [-f | -i | -n] [--] <gene-file> <heatmap-file>\n'
                 '    [<lower-bound> <upper-bound>]')


class InterfaceArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


def add_overwrite_flags(parser):
    overwrite_group = parser.add_argument_group('Overwrite arguments',
                                                'What to do when the output file already exists')
    overwrite_group.add_argument('-f', dest='force', action='store_true',
                                 help='Do not prompt before overwriting files')
    overwrite_group.add_argument('-i', dest='interactive', action='store_true',
                                 help='Prompt before overwriting files (default)')
    overwrite_group.add_argument('-n', dest='never', action='store_true',
                                 help='Do not overwrite files')


def build_parser():
    # Create the main parser
    parser = InterfaceArgumentParser(
        prog='ghmtools',
        description='ghmtools: transcription and binding analysis of genes, rendered as heatmaps.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debugging messages')
    subparsers = parser.add_subparsers(dest='command', help='Operations')

    # --- Analysis Subcommand ---
    analysis_parser = subparsers.add_parser(
        'analysis', help='Combine transcription data and binding data into a gene activity file',
        usage=ANALYSIS_USAGE)
    add_overwrite_flags(analysis_parser)
    analysis_parser.add_argument('-d', dest='binding_distance', default=ghm_config.DEFAULT_BINDING_DISTANCE,
                                 metavar='<binding-distance>',
                                 help='Maximum distance (in kilobases) between a bound gene and the nearest binding site (default: 10)')
    analysis_parser.add_argument('--no-blacklist', action='store_true',
                                 help='Do not remove common false positive binding sites from the ChIP-seq data')
    analysis_parser.add_argument('--window', default=ghm_config.DEFAULT_WINDOW_SIZE, metavar='<window-size>',
                                 help='Number of genes to be summed to calculate a binding score (default: 10)')
    analysis_parser.add_argument('--keep-intermediate', action='store_true',
                                 help='Keep the temporary directory with the intermediate files (default: False)')
    analysis_parser.add_argument('--bedtools-path', default=ghm_config.BEDTOOLS_EXECUTABLE,
                                 help='Path to the bedtools executable (default: bedtools)')
    analysis_parser.add_argument('--beta-path', default=ghm_config.BETA_EXECUTABLE,
                                 help='Path to the BETA executable (default: BETA)')
    analysis_parser.add_argument('--engine-path', default=ghm_config.analysis_engine(),
                                 help='Path to the analysis engine (default: <ghmtools home>/src/analysis-engine.r)')
    analysis_parser.add_argument('arguments', nargs='*',
                                 metavar='ARGUMENT',
                                 help='Transcription data file, ChIP-seq data or bound gene list file, '
                                      'genome used by BETA (e.g. hg19, hg38, mm9, mm10) and output gene file')

    # --- Heatmap Subcommand ---
    heatmap_parser = subparsers.add_parser('heatmap', help='Render a gene activity file as a heatmap',
                                           usage=HEATMAP_USAGE)
    add_overwrite_flags(heatmap_parser)
    heatmap_parser.add_argument('--engine-path', default=ghm_config.heatmap_engine(),
                                help='Path to the heatmap engine (default: <ghmtools home>/src/heatmap-engine.r)')
    heatmap_parser.add_argument('arguments', nargs='*',
                                metavar='ARGUMENT',
                                help='Gene activity file, output heatmap file and optional color scale bounds')

    # --- Help Subcommand ---
    help_parser = subparsers.add_parser('help', help='Display the usage notes of an operation',
                                        usage='ghmtools help [<operation>]')
    help_parser.add_argument('arguments', nargs='*', metavar='OPERATION',
                             help='Operation name (default: list the operations)')

    return parser


def guess_operation(argv):
    return next((token for token in argv if token in OPERATIONS), None)


def main(argv=None, confirm=ask_overwrite):
    if argv is None:
        argv = sys.argv[1:]

    # Setting up basic logging configuration
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    parser = build_parser()
    operation = guess_operation(argv)
    try:
        args = parser.parse_args(argv)
        operation = args.command
        if args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        # Execute the appropriate subcommand
        if args.command == 'analysis':
            analysis_main(args, confirm=confirm)
        elif args.command == 'heatmap':
            heatmap_main(args, confirm=confirm)
        elif args.command == 'help':
            help_main(args)
        else:
            parser.print_help()
            return 1

    except OverwriteDeclined as e:
        logging.info(str(e))
        return e.exit_status
    except GhmToolsError as e:
        logging.error(str(e))
        # The help operation has a single help message
        prompt_operation = None if operation == 'help' else operation
        print(ghm_config.help_prompt(prompt_operation), file=sys.stderr)
        return e.exit_status

    return 0


if __name__ == "__main__":
    sys.exit(main())
