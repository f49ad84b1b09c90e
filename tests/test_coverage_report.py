"""Unit tests for the coverage report script"""

import importlib.util
import json
from pathlib import Path

import pytest

from smartthings_mcp.services.unified_device import Platform

SCRIPT_PATH = Path(__file__).parent.parent / "scripts" / "coverage_report.py"


@pytest.fixture(scope="module")
def coverage_report():
    """Load scripts/coverage_report.py as a module"""
    spec = importlib.util.spec_from_file_location("coverage_report", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestCoverageReport:
    """Test suite for the coverage report CLI"""

    def test_build_report(self, coverage_report):
        """Test report contains coverage and recommendations per platform"""
        report = coverage_report.build_report([Platform.SMARTTHINGS, Platform.LUTRON])

        assert list(report) == ['smartthings', 'lutron']
        assert report['smartthings']['supported'] == 30
        assert report['lutron']['supported'] == 4
        assert 'lutron supports no composite capabilities' in report['lutron']['recommendations']

    def test_json_output(self, coverage_report, monkeypatch, capsys):
        """Test --json prints the report for the selected platform"""
        monkeypatch.setattr('sys.argv', ['coverage_report.py', '--platform', 'tuya', '--json'])

        coverage_report.main()

        report = json.loads(capsys.readouterr().out)
        assert list(report) == ['tuya']
        assert report['tuya']['supported'] == 22
        assert report['tuya']['total'] == 31

    def test_text_output(self, coverage_report, monkeypatch, capsys):
        """Test the default output lists every platform"""
        monkeypatch.setattr('sys.argv', ['coverage_report.py'])

        coverage_report.main()

        out = capsys.readouterr().out
        assert 'Unified Capability Coverage' in out
        assert 'smartthings' in out
        assert 'lutron' in out
        assert 'Missing:     occupancySensor' in out

    def test_unknown_platform_exits(self, coverage_report, monkeypatch, capsys):
        """Test an unknown platform exits with code 1"""
        monkeypatch.setattr('sys.argv', ['coverage_report.py', '--platform', 'zigbee'])

        with pytest.raises(SystemExit) as exc_info:
            coverage_report.main()

        assert exc_info.value.code == 1
        assert "Invalid platform: 'zigbee'" in capsys.readouterr().err
