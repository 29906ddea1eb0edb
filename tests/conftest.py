import shlex
import sys
import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def isolated_config(temp_dir, monkeypatch):
    config_dir = temp_dir / "config"
    config_dir.mkdir()

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))

    return {"config": config_dir, "path": config_dir / "importguard" / "config.toml"}


CSHARP_SOURCE = """\
using System.Linq;
using MyApp.Utils;
using System;

namespace App
{
    class Program { }
}
"""


@pytest.fixture
def csharp_file(temp_dir):
    path = temp_dir / "Program.cs"
    path.write_text(CSHARP_SOURCE)
    return path.resolve()


def python_command(script: str) -> str:
    """A shell command line running script with the current interpreter."""
    return f"{shlex.quote(sys.executable)} -c {shlex.quote(script)}"


DROP_LINQ_FILTER = python_command(
    "import sys\n"
    "sys.stdout.write(''.join(l for l in sys.stdin if 'System.Linq' not in l))\n"
)

DROP_LINQ_IN_FILE = python_command(
    "import sys\n"
    "p = sys.argv[1]\n"
    "lines = open(p).readlines()\n"
    "open(p, 'w').write(''.join(l for l in lines if 'System.Linq' not in l))\n"
) + " {path}"
