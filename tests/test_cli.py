import json
import logging

from block_duel.cli import build_parser, main

RANDOM_SMALL = [
    "--seed", "4",
    "--width", "6",
    "--depth", "8",
    "--left-attacker", "random",
    "--left-defender", "random",
    "--right-attacker", "random",
    "--right-defender", "random",
]


def test_main_prints_the_outcome(capsys, caplog):
    with caplog.at_level(logging.INFO, logger="block_duel"):
        assert main(RANDOM_SMALL) == 0
    out = capsys.readouterr().out
    assert "Winner:" in out
    assert "left:" in out and "right:" in out
    assert any("wins" in record.getMessage() for record in caplog.records)


def test_main_json_output(capsys):
    assert main(RANDOM_SMALL + ["--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert {data["winner"], data["loser"]} == {"left", "right"}
    assert set(data["sessions"]) == {"left", "right"}
    assert data["sessions"][data["loser"]]["playing"] is False


def test_undecided_when_nobody_plays(capsys):
    argv = ["--max-seconds", "2"] + [f"--{side}-{role}=none" for side in ("left", "right") for role in ("attacker", "defender")]
    assert main(argv) == 0
    assert "Undecided" in capsys.readouterr().out


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.left_attacker == "ai"
    assert (args.width, args.depth) == (10, 16)
    assert args.max_seconds == 600.0
