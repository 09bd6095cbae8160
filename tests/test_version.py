import re
from pathlib import Path
from unittest.mock import patch

import pytest

import nbe2ivil
from nbe2ivil.__main__ import main

PYPROJECT = Path(__file__).parent.parent / "pyproject.toml"


def test_package_version_is_declared_in_pyproject():
    match = re.search(r'^version = "([^"]+)"$', PYPROJECT.read_text(), re.MULTILINE)
    assert match, "pyproject.toml has no version line"
    assert match.group(1) == nbe2ivil.__version__


def test_version_flag_prints_package_version(capsys):
    with patch("sys.argv", ["nbe2ivil", "--version"]):
        with pytest.raises(SystemExit) as exc:
            main()
    assert exc.value.code == 0
    assert capsys.readouterr().out.strip() == f"nbe2ivil {nbe2ivil.__version__}"
