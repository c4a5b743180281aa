from datetime import date
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from slot_composer import cli
from slot_composer.models import ReplayScript


@patch("slot_composer.cli.run.run")
@patch("slot_composer.cli.parse_arguments")
def test_main_calls_run(mock_args, mock_run):
    mock_args.return_value = MagicMock(script="actions.json", today="2026-10-19", json=True, verbose=True)

    cli.main()

    mock_run.assert_called_once_with("actions.json", today=date(2026, 10, 19), as_json=True)


@patch("slot_composer.cli.run.run")
@patch("slot_composer.cli.parse_arguments")
def test_main_defaults_today(mock_args, mock_run):
    mock_args.return_value = MagicMock(script="-", today=None, json=False, verbose=False)

    cli.main()

    mock_run.assert_called_once_with("-", today=None, as_json=False)


@patch("slot_composer.cli.run.run")
@patch("slot_composer.cli.parse_arguments")
def test_main_rejects_bad_today(mock_args, mock_run):
    mock_args.return_value = MagicMock(script="-", today="19.10.2026", json=False, verbose=False)

    with pytest.raises(SystemExit) as exc:
        cli.main()

    assert exc.value.code == 1
    mock_run.assert_not_called()


@patch("slot_composer.cli.run.run")
@patch("slot_composer.cli.parse_arguments")
def test_main_exits_on_invalid_script(mock_args, mock_run):
    mock_args.return_value = MagicMock(script="bad.json", today=None, json=False, verbose=False)
    try:
        ReplayScript.model_validate({"actions": [{"action": "toggle_date", "date": "not a date"}]})
    except ValidationError as e:
        mock_run.side_effect = e

    with pytest.raises(SystemExit) as exc:
        cli.main()

    assert exc.value.code == 1


@patch("slot_composer.cli.run.run")
@patch("slot_composer.cli.parse_arguments")
def test_main_exits_on_missing_file(mock_args, mock_run):
    mock_args.return_value = MagicMock(script="missing.json", today=None, json=False, verbose=False)
    mock_run.side_effect = FileNotFoundError("missing.json")

    with pytest.raises(SystemExit) as exc:
        cli.main()

    assert exc.value.code == 1
