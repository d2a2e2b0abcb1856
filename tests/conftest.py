import os
import subprocess
import tempfile

import pytest

TRANSCRIPTION_DATA = (
    "# gene\tlog2fc\n"
    "GENE1 1.5\n"
    "GENE2  -0.3\n"
    "GENE3\t\t2.0\n"
)

SITE_DATA = (
    "# ChIP-seq peaks\n"
    "chr1 100 200 peak1\n"
    "chr1 5000 5200 blacklisted_peak\n"
    "chr2 300 400 peak3\n"
)

GENE_LIST = (
    "# bound genes\n"
    "GENE1\n"
    "GENE3\n"
)

BETA_TARGETS = (
    "# chrom\ttxStart\ttxEnd\trefseq\tscore\tstrand\tsymbol\n"
    "chr1\t150\t900\tNM_0001\t1.0\t+\tGENE1\n"
    "chr2\t350\t800\tNM_0003\t0.5\t-\tGENE3\n"
)


class FakeTools:
    """
    Stand-in for subprocess.run that records the commands instead of running them.

    bedtools drops the lines containing 'blacklisted', BETA writes a target file and
    the engines write their output path. The contents of every existing file argument
    are saved at call time, since the workspace is gone once the run returns.
    """

    def __init__(self):
        self.calls = []
        self.snapshots = []
        self.failures = {}

    def tools(self):
        return [os.path.basename(cmd[0]) for cmd in self.calls]

    def call(self, tool):
        return next(cmd for cmd in self.calls if os.path.basename(cmd[0]) == tool)

    def snapshot(self, tool):
        index = self.tools().index(tool)
        return self.snapshots[index]

    def __call__(self, cmd, check=False, stdout=None, stderr=None, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        snapshot = {}
        for arg in cmd[1:]:
            if os.path.isfile(arg):
                with open(arg, encoding='utf-8', errors='surrogateescape') as handle:
                    snapshot[arg] = handle.read()
        self.snapshots.append(snapshot)

        tool = os.path.basename(cmd[0])
        returncode = self.failures.get(tool, 0)
        if returncode:
            if check:
                raise subprocess.CalledProcessError(returncode, cmd, output='', stderr=f'{tool} crashed')
            return subprocess.CompletedProcess(cmd, returncode)

        if tool == 'bedtools':
            with open(cmd[cmd.index('-a') + 1]) as handle:
                stdout.write(''.join(line for line in handle if 'blacklisted' not in line))
        elif tool == 'BETA':
            output_dir = cmd[cmd.index('-o') + 1]
            os.makedirs(output_dir, exist_ok=True)
            with open(os.path.join(output_dir, 'NA_targets.txt'), 'w') as handle:
                handle.write(BETA_TARGETS)
        elif tool.endswith('-engine.r'):
            with open(cmd[-1] if tool.startswith('analysis') else cmd[2], 'w') as handle:
                handle.write('engine output\n')

        captured = '' if stdout is subprocess.PIPE else None
        return subprocess.CompletedProcess(cmd, 0, stdout=captured, stderr=captured)


@pytest.fixture
def ghm_home(tmp_path, monkeypatch):
    """
    ghmtools home directory with the blacklists of hg38 and mm10 and two help messages.
    """
    home = tmp_path / 'ghm_home'
    (home / 'blacklists').mkdir(parents=True)
    (home / 'blacklists' / 'hg38.bed').write_text("chr1\t4000\t6000\n")
    (home / 'blacklists' / 'mm10.bed').write_text("chr3\t0\t1000\n")
    (home / 'blacklists' / 'README').write_text("not a blacklist\n")
    (home / 'HELP').mkdir()
    (home / 'HELP' / 'operations').write_text("analysis\nheatmap\nhelp\n")
    (home / 'HELP' / 'analysis').write_text("ghmtools analysis [-f | -i | -n] ...\n")
    (home / 'src').mkdir()
    monkeypatch.setenv('GHMTOOLS_HOME', str(home))
    return home


@pytest.fixture
def scratch_dir(tmp_path, monkeypatch):
    """Directory receiving the temporary workspaces."""
    scratch = tmp_path / 'scratch'
    scratch.mkdir()
    monkeypatch.setattr(tempfile, 'tempdir', str(scratch))
    return scratch


@pytest.fixture
def fake_tools(monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(subprocess, 'run', tools)
    return tools


@pytest.fixture
def data_files(tmp_path):
    data = tmp_path / 'data'
    data.mkdir()
    (data / 'transcription.txt').write_text(TRANSCRIPTION_DATA)
    (data / 'sites.bed').write_text(SITE_DATA)
    (data / 'genes.txt').write_text(GENE_LIST)
    return data
