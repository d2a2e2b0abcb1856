#!/usr/bin/env python3

"""
This program validates the arguments of the analysis operation before passing them to
BETA and the analysis engine.

The binding data can be either ChIP-seq data (several tab or space separated columns)
or a list of bound genes (one column); the kind of file is detected automatically.
ChIP-seq data is first filtered with the ENCODE blacklist of the genome (unless
--no-blacklist is given) and then reduced to a list of bound genes with BETA.

@date: 2025-06-02
@version: 1.0.0

"""

import logging

from src import config as ghm_config
from src.pipeline_utilities import subtract_blacklist, run_beta, run_analysis_engine
from src.staging_utilities import (Workspace, normalize_file, strip_comments, is_site_data,
                                   count_records)
from src.validation_utilities import (AnalysisConfig, GenomeRegistry, ask_overwrite,
                                      check_argument_count, check_genome, check_input_file,
                                      check_output_path, parse_binding_distance,
                                      parse_window_size, resolve_overwrite_policy)

logger = logging.getLogger(__name__)


def build_config(args):
    """
    Validate the options of the analysis operation.

    Parameters:
    -----------
    args : argparse.Namespace
        Command line arguments containing:
        - force, interactive, never: overwrite flags
        - binding_distance: maximum distance (in kilobases) between a bound gene and a binding site
        - no_blacklist: do not remove blacklisted binding sites
        - window: number of genes summed to calculate a binding score
    Returns:
    --------
    AnalysisConfig
    """
    return AnalysisConfig(
        overwrite_policy=resolve_overwrite_policy(args.force, args.interactive, args.never),
        binding_distance=parse_binding_distance(args.binding_distance),
        use_blacklist=not args.no_blacklist,
        window_size=parse_window_size(args.window),
    )


def run_pipeline(settings, transcription_path, binding_path, genome, gene_path, blacklist,
                 bedtools_path, beta_path, engine_path, keep_intermediate=False):
    """
    Stage the validated inputs and run the external programs one after the other.

    Parameters:
    -----------
    settings : AnalysisConfig
        Validated options
    transcription_path, binding_path : str
        Validated input files
    genome : str
        Supported genome identifier
    gene_path : str
        Output path confirmed for writing
    blacklist : str
        Blacklist file of the genome
    bedtools_path, beta_path, engine_path : str
        External executables
    keep_intermediate : bool
        Do not remove the temporary directory at the end
    """
    with Workspace(prefix='ghmtools-analysis.', keep=keep_intermediate) as workspace:

        # --- Step 1: Normalize the input files ---
        temp_transcription = normalize_file(transcription_path, workspace.path('transcription_data'))
        temp_binding_unfiltered = normalize_file(binding_path, workspace.path('binding_data_unfiltered'))
        logger.info(f"Transcription data: {count_records(temp_transcription)} records")

        # --- Step 2: Reduce ChIP-seq data to a list of bound genes ---
        if is_site_data(temp_binding_unfiltered):
            n_sites = count_records(temp_binding_unfiltered)
            logger.info(f"Binding data: ChIP-seq data with {n_sites} binding sites")

            sites = temp_binding_unfiltered
            if settings.use_blacklist:
                filtered = subtract_blacklist(temp_binding_unfiltered, blacklist,
                                              workspace.path('binding_data_filtered'),
                                              bedtools_path=bedtools_path)
                sites = normalize_file(filtered, workspace.path('binding_data_sites'))
                n_kept = count_records(sites)
                logger.info(f"Removed {n_sites - n_kept} blacklisted binding sites, {n_kept} left")

            targets = run_beta(sites, genome, settings.binding_distance, workspace.beta_output,
                               use_blacklist=settings.use_blacklist, beta_path=beta_path)
            temp_binding = strip_comments(targets, workspace.path('binding_data'))
            logger.info(f"BETA found {count_records(temp_binding)} bound genes")
        else:
            temp_binding = temp_binding_unfiltered
            logger.info(f"Binding data: list of {count_records(temp_binding)} bound genes")

        # --- Step 3: Run the analysis engine ---
        run_analysis_engine(temp_transcription, temp_binding, settings.window_size,
                            gene_path, engine_path)

    logger.info(f"Gene activity file: {gene_path}")


def main(args, confirm=ask_overwrite, registry=None):
    """
    Run the analysis operation.

    Parameters:
    -----------
    args : argparse.Namespace
        Parsed command line arguments; args.arguments holds
        <transcription-data> <binding-data> <genome> <gene-file>
    confirm : callable
        Asks the user whether an existing gene file may be overwritten
    registry : GenomeRegistry, optional
        Supported genomes. Read from the blacklist directory when not given.
    Raises:
    -------
    UsageError, ValidationError, OverwriteDeclined, ExternalToolFailure
    """
    settings = build_config(args)

    check_argument_count(args.arguments, 4)
    transcription_path, binding_path, genome, gene_path = args.arguments

    check_input_file(transcription_path, 'Transcription data')
    check_input_file(binding_path, 'Binding data')

    if registry is None:
        registry = GenomeRegistry.from_directory(ghm_config.blacklist_dir())
    check_genome(genome, registry)

    check_output_path(gene_path, settings.overwrite_policy, confirm)

    run_pipeline(settings, transcription_path, binding_path, genome, gene_path,
                 blacklist=registry.blacklist(genome),
                 bedtools_path=args.bedtools_path,
                 beta_path=args.beta_path,
                 engine_path=args.engine_path,
                 keep_intermediate=args.keep_intermediate)
