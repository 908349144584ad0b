"""
Tests for the installable package layout
"""

from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent


class TestPackageLayout:
    """Every source directory must be a regular package so wheels include it"""

    @pytest.mark.parametrize("package", ["config", "webhook_tracker"])
    def test_source_directories_have_init(self, package):
        base = ROOT / package
        directories = {path.parent for path in base.rglob("*.py")}

        missing = [
            str(directory.relative_to(ROOT))
            for directory in sorted(directories)
            if not (directory / "__init__.py").exists()
        ]

        assert missing == []

