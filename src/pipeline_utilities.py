"""
Set of functions to run the external programs used by ghmtools: bedtools, BETA and the
R engines. Every call blocks until the program finishes; a non-zero exit status stops
the pipeline.

@Date: 2025-06-02

"""

import logging
import os
import subprocess

from src.config import BETA_TARGETS_FILE
from src.exceptions import ExternalToolFailure

logger = logging.getLogger(__name__)

# Exit statuses used by the shell for commands that cannot be run
COMMAND_NOT_EXECUTABLE = 126
COMMAND_NOT_FOUND = 127


def run_command(cmd_list, tool, stdout_file=None, capture_output=True):
    """
    Run an external program and wait for it.

    Parameters
    ----------
    cmd_list : list
        Program and its arguments (shell=False)
    tool : str
        Name of the program used in the log and error messages
    stdout_file : str, optional
        Redirect the standard output of the program to this file
    capture_output : bool
        Capture stdout/stderr and log them. If False the program writes directly
        to the terminal.

    Returns
    -------
    subprocess.CompletedProcess

    Raises
    ------
    ExternalToolFailure
        If the program cannot be started or returns a non-zero exit status
    """
    logger.info(f"Running {tool} command: {' '.join(str(part) for part in cmd_list)}")

    try:
        if stdout_file is not None:
            with open(stdout_file, 'w') as out:
                result = subprocess.run(cmd_list, check=True, stdout=out,
                                        stderr=subprocess.PIPE, universal_newlines=True, errors='replace')
        elif capture_output:
            result = subprocess.run(cmd_list, check=True, stdout=subprocess.PIPE,
                                    stderr=subprocess.PIPE, universal_newlines=True, errors='replace')
        else:
            result = subprocess.run(cmd_list, check=True)

    except subprocess.CalledProcessError as e:
        logger.error(f"{tool} failed")
        logger.error(f"Command: {' '.join(str(part) for part in e.cmd)}")
        logger.error(f"Return code: {e.returncode}")
        if e.stdout:
            logger.error("stdout:\n" + e.stdout)
        if e.stderr:
            logger.error("stderr:\n" + e.stderr)
        raise ExternalToolFailure(tool, e.returncode) from e
    except FileNotFoundError as e:
        raise ExternalToolFailure(
            tool, COMMAND_NOT_FOUND,
            f"{tool} executable not found ({cmd_list[0]})") from e
    except PermissionError as e:
        raise ExternalToolFailure(
            tool, COMMAND_NOT_EXECUTABLE,
            f"{tool} is not executable ({cmd_list[0]})") from e

    # Some programs print their progress on stderr
    if capture_output and result.stdout:
        logger.debug(f"{tool} stdout:\n" + result.stdout)
    if capture_output and result.stderr:
        logger.debug(f"{tool} stderr:\n" + result.stderr)

    return result


def subtract_blacklist(sites_file, blacklist_file, output_file, bedtools_path='bedtools'):
    """
    Remove every binding site overlapping a blacklisted region (bedtools subtract -A).

    Parameters
    ----------
    sites_file : str
        Path to the binding sites in BED format
    blacklist_file : str
        Path to the blacklist of the genome in BED format
    output_file : str
        Path to the filtered binding sites
    bedtools_path : str
        Path to the bedtools executable

    Returns
    -------
    str
        Path to the filtered binding sites
    """
    cmd_list = [
        os.path.expanduser(bedtools_path), 'subtract',
        '-A',
        '-a', sites_file,
        '-b', blacklist_file
    ]
    run_command(cmd_list, 'bedtools', stdout_file=output_file)
    return output_file


def run_beta(sites_file, genome, binding_distance, output_dir, use_blacklist=True,
             beta_path='BETA'):
    """
    Assign target genes to the binding sites with BETA minus.

    Parameters
    ----------
    sites_file : str
        Path to the binding sites in BED format
    genome : str
        Genome identifier understood by BETA (e.g. hg38)
    binding_distance : int
        Maximum distance in base pairs between a binding site and a bound gene
    output_dir : str
        Directory where BETA writes its results
    use_blacklist : bool
        Ask BETA to filter the binding sites with its own blacklist (--bl)
    beta_path : str
        Path to the BETA executable

    Returns
    -------
    str
        Path to the gene target file written by BETA
    """
    cmd_list = [
        os.path.expanduser(beta_path), 'minus',
        '-p', sites_file,
        '-g', genome,
        '-d', str(binding_distance),
        '-o', output_dir
    ]
    if use_blacklist:
        cmd_list.append('--bl')

    run_command(cmd_list, 'BETA')

    targets_file = os.path.join(output_dir, BETA_TARGETS_FILE)
    if not os.path.isfile(targets_file):
        raise ExternalToolFailure('BETA', 1, f"BETA did not write its target file ({targets_file})")
    return targets_file


def run_analysis_engine(transcription_file, binding_file, window_size, gene_file, engine_path):
    """
    Hand the staged data to the analysis engine, which writes the gene activity file.
    The engine talks directly to the terminal.
    """
    cmd_list = [
        os.path.expanduser(engine_path),
        transcription_file,
        binding_file,
        str(window_size),
        gene_file
    ]
    return run_command(cmd_list, 'analysis engine', capture_output=False)


def run_heatmap_engine(gene_file, heatmap_file, engine_path, bounds=None):
    cmd_list = [os.path.expanduser(engine_path), gene_file, heatmap_file]
    if bounds is not None:
        cmd_list.extend(str(bound) for bound in bounds)
    return run_command(cmd_list, 'heatmap engine', capture_output=False)
