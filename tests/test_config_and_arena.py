"""Tests for configuration, the arena and the CLI."""

import math

import numpy as np
import pytest
from typer.testing import CliRunner

from connect4mcts.cli import app
from connect4mcts.eval import Arena, engine_player, play_match, random_player
from connect4mcts.game import Connect4State
from connect4mcts.mcts import SearchEngine
from connect4mcts.utils import (
    ArenaConfig,
    Config,
    GameConfig,
    SearchConfig,
    SearchLogger,
    SearchMetrics,
    spawn_seeds,
)


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.search.iterations == 1000
        assert config.search.exploration == pytest.approx(math.sqrt(2))
        assert not config.search.truncate_win_ratio
        assert config.search.final_move == "last_path"
        assert (config.game.rows, config.game.cols, config.game.win_length) == (6, 7, 4)
        assert config.seed is None

    def test_yaml_round_trip(self, tmp_path):
        path = tmp_path / "config.yaml"
        config = Config(
            search=SearchConfig(iterations=250, truncate_win_ratio=True, final_move="most_visited"),
            game=GameConfig(rows=5, cols=6, win_length=4),
            arena=ArenaConfig(num_games=4, opponent="mcts"),
            seed=7,
        )
        config.save(str(path))
        loaded = Config.load(str(path))

        assert loaded == config

    def test_partial_yaml(self, tmp_path):
        path = tmp_path / "partial.yaml"
        path.write_text("search:\n  iterations: 42\n")
        loaded = Config.load(str(path))

        assert loaded.search.iterations == 42
        assert loaded.game == GameConfig()

    def test_validation(self):
        with pytest.raises(ValueError):
            SearchConfig(iterations=-1)
        with pytest.raises(ValueError):
            SearchConfig(final_move="best")
        with pytest.raises(ValueError):
            GameConfig(rows=3, cols=3, win_length=4)
        with pytest.raises(ValueError):
            ArenaConfig(opponent="human")

    def test_engine_from_config(self):
        engine = SearchEngine.from_config(
            SearchConfig(exploration=0.5, truncate_win_ratio=True, final_move="most_visited"),
            seed=3,
        )
        assert engine.exploration == 0.5
        assert engine.truncate_win_ratio
        assert engine.final_move == "most_visited"


class TestSeeds:
    def test_spawn_is_reproducible(self):
        assert spawn_seeds(5, 2) == spawn_seeds(5, 2)
        a, b = spawn_seeds(5, 2)
        assert a != b

    def test_spawn_without_seed(self):
        assert spawn_seeds(None, 3) == [None, None, None]


class TestSearchLogger:
    def test_writes_jsonl(self, tmp_path):
        logger = SearchLogger(log_dir=str(tmp_path), verbose=False)
        logger.log_search(SearchMetrics(
            move=3, iterations=10, elapsed_sec=0.5, expanded=11,
            total_iterations=10, root_visits=11,
        ))

        lines = logger.log_file.read_text().strip().splitlines()
        assert len(lines) == 1
        assert '"move": 3' in lines[0]
        assert len(logger.history) == 1

    def test_no_log_dir(self):
        logger = SearchLogger(log_dir=None, verbose=False)
        logger.log_search(SearchMetrics(
            move=0, iterations=0, elapsed_sec=0.0, expanded=1,
            total_iterations=0, root_visits=1,
        ))
        assert logger.log_file is None
        assert logger.history[0].iterations_per_sec == 0.0

    def test_messages_respect_verbose(self, capsys):
        SearchLogger(log_dir=None, verbose=True).log_warning("Game is already over")
        assert "Game is already over" in capsys.readouterr().out

        SearchLogger(log_dir=None, verbose=False).log_error("hidden")
        assert "hidden" not in capsys.readouterr().out


class TestArena:
    def test_random_match_completes(self):
        rng = np.random.default_rng(0)
        final, moves = play_match(random_player(rng), random_player(rng))

        assert final.game_over
        assert len(moves) == final.num_pieces

    def test_engine_player_needs_iterations(self):
        with pytest.raises(ValueError):
            engine_player(SearchEngine(), 0)

    def test_illegal_move_rejected(self):
        with pytest.raises(ValueError):
            play_match(lambda s: 0, lambda s: 0, Connect4State.from_moves([0] * 6))

    def test_counters_recorded(self):
        engine = SearchEngine(seed=0)
        arena = Arena(engine, iterations=20)
        result = arena.evaluate(random_player(np.random.default_rng(1)), num_games=2)

        assert result.total_games == 2
        assert result.wins + result.losses + result.draws == 2
        assert engine.games_played == 2
        assert engine.wins == result.wins
        assert len(result.game_lengths) == 2

    def test_beats_random_player(self):
        engine = SearchEngine(seed=0)
        arena = Arena(engine, iterations=200)
        result = arena.evaluate(random_player(np.random.default_rng(2)), num_games=4)

        assert result.wins >= 3

    def test_progress_callback(self):
        seen = []
        arena = Arena(
            SearchEngine(seed=0),
            iterations=10,
            start_factory=lambda: Connect4State(rows=4, cols=4, win_length=3),
        )
        arena.evaluate(
            random_player(np.random.default_rng(3)),
            num_games=3,
            progress_callback=lambda n, r: seen.append((n, r)),
        )

        assert [n for n, _ in seen] == [1, 2, 3]
        assert all(r in ("W", "L", "D") for _, r in seen)


class TestCli:
    def test_search_command(self):
        runner = CliRunner()
        result = runner.invoke(app, ["search", "--moves", "060626", "-n", "50", "--seed", "1", "--no-log"])

        assert result.exit_code == 0
        assert "Best move: column" in result.output

    def test_search_rejects_full_column(self):
        runner = CliRunner()
        result = runner.invoke(app, ["search", "--moves", "0000000", "--no-log"])
        assert result.exit_code == 1

    def test_search_rejects_zero_iterations(self):
        runner = CliRunner()
        result = runner.invoke(app, ["search", "-n", "0", "--no-log"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Need at least one search iteration" in result.output

    def test_play_rejects_zero_iterations(self):
        runner = CliRunner()
        result = runner.invoke(app, ["play", "-n", "0"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_play_command(self):
        runner = CliRunner()
        # Cycle through every column; full ones are rejected and reprompted
        moves = "".join(f"{col}\n" for col in range(7)) * 30
        result = runner.invoke(app, ["play", "--second", "-n", "5", "--seed", "0"], input=moves)

        assert result.exit_code == 0
        assert "Engine played column" in result.output
        assert "Expanded" in result.output

    def test_arena_command(self):
        runner = CliRunner()
        result = runner.invoke(
            app,
            ["arena", "-g", "2", "-n", "5", "-o", "mcts", "--opponent-iterations", "5", "--seed", "0"],
        )

        assert result.exit_code == 0
        assert "Score:" in result.output

    def test_arena_rejects_unknown_opponent(self):
        runner = CliRunner()
        result = runner.invoke(app, ["arena", "-g", "1", "-n", "5", "-o", "minimax"])

        assert result.exit_code == 1
        assert "opponent must be one of" in result.output

    def test_config_command_writes_yaml(self, tmp_path):
        runner = CliRunner()
        path = tmp_path / "out" / "config.yaml"
        result = runner.invoke(app, ["config", "--output", str(path)])

        assert result.exit_code == 0
        assert Config.load(str(path)) == Config()
