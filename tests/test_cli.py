# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the solargen command-line interface."""
import json

import pytest

from solargen.cli import format_summary, format_validation, main, run
from solargen.domain.system import ValidationResult
from solargen.domain.system_generator import SystemSpec


class TestRun:

    def test_run_returns_system(self):
        system = run(SystemSpec(seed=4))
        assert system is not None
        assert system.seed == 4

    def test_run_writes_output(self, tmp_path):
        path = tmp_path / "out.json"
        system = run(SystemSpec(seed=4), output_path=str(path))
        data = json.loads(path.read_text(encoding='utf-8'))
        assert data['seed'] == 4
        assert len(data['bodies']) == len(system)

    def test_run_without_moons(self):
        assert run(SystemSpec(seed=4), include_moons=False).moons == []


class TestFormatting:

    def test_summary_lists_stars_and_planets(self):
        system = run(SystemSpec(seed=4, name="Kelvar"))
        text = format_summary(system)
        assert text.splitlines()[0] == "System Kelvar (seed 4)"
        for planet in system.planets:
            assert planet.name in text

    def test_validation_report(self):
        text = format_validation(ValidationResult(errors=("bad",), warnings=("odd",)))
        assert text.splitlines() == [
            "Validation: 1 errors, 1 warnings",
            "  error: bad",
            "  warning: odd",
        ]


class TestMain:

    def test_seed(self, capsys):
        main(['--seed', '42'])
        out = capsys.readouterr().out
        assert "(seed 42)" in out

    def test_named_multi_star(self, capsys):
        main(['--seed', '7', '--min-stars', '2', '--max-stars', '2', '--name', 'Kelvar'])
        out = capsys.readouterr().out
        assert "Kelvar A" in out
        assert "Kelvar B" in out

    def test_output_and_validate(self, tmp_path, capsys):
        path = tmp_path / "system.json"
        main(['-s', '3', '-o', str(path), '--validate'])
        out = capsys.readouterr().out
        assert path.exists()
        assert "Validation: 0 errors" in out
        assert f"Wrote {path}" in out

    def test_spec_file_with_override(self, tmp_path, capsys):
        spec = tmp_path / "spec.json"
        spec.write_text(json.dumps({
            'seed': 5,
            'name': 'Kelvar',
            'overrides': [{'body_id': 'star-0', 'changes': {'name': 'Kelvar Prime'}}],
        }), encoding='utf-8')
        main(['--spec', str(spec)])
        out = capsys.readouterr().out
        assert "Kelvar Prime" in out

    def test_seed_flag_overrides_spec_seed(self, tmp_path, capsys):
        spec = tmp_path / "spec.json"
        spec.write_text(json.dumps({'seed': 5}), encoding='utf-8')
        main(['--spec', str(spec), '--seed', '6'])
        assert "(seed 6)" in capsys.readouterr().out

    def test_name_flag_overrides_spec_name(self, tmp_path, capsys):
        spec = tmp_path / "spec.json"
        spec.write_text(json.dumps({'seed': 5, 'name': 'Kelvar'}), encoding='utf-8')
        main(['--spec', str(spec), '--name', 'Orrin'])
        out = capsys.readouterr().out
        assert out.startswith("System Orrin (seed 5)")

    @pytest.mark.parametrize("override, message", [
        ({'changes': {'name': 'X'}}, "body_id"),
        ({'body_id': 'star-0', 'changes': {'mass_kg': 'heavy'}}, "mass_kg"),
        ({'body_id': 'star-0', 'changes': 7}, "changes"),
    ])
    def test_malformed_override_exits_cleanly(self, tmp_path, capsys, override, message):
        spec = tmp_path / "spec.json"
        spec.write_text(json.dumps({'seed': 3, 'overrides': [override]}), encoding='utf-8')
        with pytest.raises(SystemExit) as exc_info:
            main(['--spec', str(spec)])
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: ")
        assert message in err

    def test_requires_seed_or_spec(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2
        assert "--seed" in capsys.readouterr().err

    def test_missing_spec_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(['--spec', str(tmp_path / "absent.json")])
        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().err.lower()

    def test_negative_seed(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(['--seed', '-1'])
        assert exc_info.value.code == 1
        assert "seed" in capsys.readouterr().err

    def test_invalid_star_range(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(['--seed', '1', '--min-stars', '3', '--max-stars', '2'])
        assert exc_info.value.code == 1
        assert "max_stars" in capsys.readouterr().err
