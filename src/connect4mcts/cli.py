"""
Command-line interface for Connect 4 MCTS.

Commands:
- search: Pick a move for a position
- play: Play against the engine in the terminal
- arena: Match the engine against a random player or another engine
- config: Show or write the default configuration
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="c4m",
    help="Connect 4 Monte Carlo Tree Search",
    no_args_is_help=True,
)

console = Console()


def _load_config(config_path: Optional[Path]):
    from .utils import Config

    if config_path and config_path.exists():
        return Config.load(str(config_path))
    return Config()


def _require_iterations(iterations: int, logger) -> None:
    """Exit with an error when no search iterations would run."""
    if iterations < 1:
        logger.log_error(f"Need at least one search iteration, got {iterations}")
        raise typer.Exit(code=1)


def _print_children(engine, state) -> None:
    """Print per-column statistics for the root's recorded children."""
    table = Table(title="Root children")
    table.add_column("Column", style="cyan")
    table.add_column("Visits", style="white")
    table.add_column("Win%", style="green")

    for move in state.legal_moves():
        child = state.clone()
        child.add_piece(move)
        record = engine.score_of(child)
        if record is None:
            table.add_row(str(move), "-", "-")
        else:
            table.add_row(str(move), str(record.visits), f"{record.win_ratio*100:.1f}%")

    console.print(table)


@app.command()
def search(
    moves: str = typer.Option("", "--moves", "-m", help="Moves played so far, e.g. '3344'"),
    iterations: Optional[int] = typer.Option(
        None, "--iterations", "-n", help="Search iterations (overrides config)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config YAML file"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
    log: bool = typer.Option(True, "--log/--no-log", help="Write a JSONL search log"),
) -> None:
    """Pick a move for the position reached by MOVES."""
    import time
    from .game import Connect4State, parse_moves
    from .mcts import SearchEngine
    from .utils import SearchLogger, SearchMetrics, print_board, print_stats

    config = _load_config(config_path)
    if seed is not None:
        config.seed = seed
    if iterations is None:
        iterations = config.search.iterations

    logger = SearchLogger(log_dir=config.log_dir if log else None)
    _require_iterations(iterations, logger)

    try:
        state = Connect4State.from_moves(
            parse_moves(moves),
            rows=config.game.rows,
            cols=config.game.cols,
            win_length=config.game.win_length,
        )
    except ValueError as e:
        logger.log_error(str(e))
        raise typer.Exit(code=1)

    print_board(state.render(), title="Red to move" if state.is_red else "Yellow to move")
    if state.game_over:
        logger.log_warning("Game is already over, nothing to search.")
        raise typer.Exit()

    engine = SearchEngine.from_config(config.search, seed=config.seed)
    logger.log_info(f"Searching {iterations} iterations...")

    start = time.perf_counter()
    move = engine.search(state, iterations)
    elapsed = time.perf_counter() - start

    chosen = state.clone()
    chosen.add_piece(move)
    record = engine.score_of(chosen)
    logger.log_search(SearchMetrics(
        move=move,
        iterations=iterations,
        elapsed_sec=elapsed,
        expanded=len(engine.node_scores),
        total_iterations=engine.total_iterations,
        root_visits=engine.score_of(state).visits,
        move_visits=record.visits if record else None,
        move_win_ratio=record.win_ratio if record else None,
    ))

    _print_children(engine, state)
    print_stats(engine.get_stats())
    logger.log_success(f"Best move: column {move}")


@app.command()
def play(
    iterations: Optional[int] = typer.Option(
        None, "--iterations", "-n", help="Search iterations per engine move"
    ),
    human_first: bool = typer.Option(True, "--first/--second", help="Human plays first"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config YAML file"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
) -> None:
    """Play against the engine in the terminal."""
    from .game import Connect4State
    from .mcts import SearchEngine
    from .utils import SearchLogger, print_stats

    config = _load_config(config_path)
    if seed is not None:
        config.seed = seed
    if iterations is None:
        iterations = config.search.iterations

    logger = SearchLogger(log_dir=None)
    _require_iterations(iterations, logger)

    engine = SearchEngine.from_config(config.search, seed=config.seed)
    state = Connect4State(
        rows=config.game.rows,
        cols=config.game.cols,
        win_length=config.game.win_length,
    )
    human_is_red = human_first
    last_col = state.cols - 1

    console.print("\n[bold]Connect 4[/]")
    console.print(f"You are {'R' if human_is_red else 'Y'}, engine is {'Y' if human_is_red else 'R'}")
    console.print(f"Enter column number (0-{last_col}) to play\n")

    while not state.game_over:
        console.print(state.render())

        if state.is_red == human_is_red:
            while True:
                try:
                    col = int(typer.prompt(f"Your move (0-{last_col})"))
                    if state.valid_move(col):
                        break
                    console.print("[red]Invalid move, try again[/]")
                except ValueError:
                    console.print(f"[red]Enter a number 0-{last_col}[/]")

            state.add_piece(col)
            console.print(f"You played column {col}\n")
        else:
            console.print("[cyan]Engine thinking...[/]")
            col = engine.search(state, iterations)
            state.add_piece(col)
            console.print(f"Engine played column {col}\n")

    console.print(state.render())
    if state.is_draw:
        logger.log_warning("Draw!")
        engine.record_game(False)
    elif state.red_win == human_is_red:
        logger.log_success("You win!")
        engine.record_game(False)
    else:
        logger.log_error("Engine wins!")
        engine.record_game(True)

    print_stats(engine.get_stats())


@app.command()
def arena(
    games: Optional[int] = typer.Option(None, "--games", "-g", help="Number of games"),
    opponent: Optional[str] = typer.Option(
        None, "--opponent", "-o", help="Opponent: 'random' or 'mcts'"
    ),
    iterations: Optional[int] = typer.Option(
        None, "--iterations", "-n", help="Search iterations per engine move"
    ),
    opponent_iterations: Optional[int] = typer.Option(
        None, "--opponent-iterations", help="Iterations for an 'mcts' opponent"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config YAML file"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
) -> None:
    """Match the engine against an opponent, alternating who starts."""
    import numpy as np
    from .game import Connect4State
    from .mcts import SearchEngine
    from .eval import Arena, engine_player, random_player
    from .utils import ArenaConfig, SearchLogger, create_progress, print_stats, spawn_seeds

    config = _load_config(config_path)
    logger = SearchLogger(log_dir=None)
    if seed is not None:
        config.seed = seed
    try:
        config.arena = ArenaConfig(
            num_games=games if games is not None else config.arena.num_games,
            opponent=opponent if opponent is not None else config.arena.opponent,
            opponent_iterations=(
                opponent_iterations
                if opponent_iterations is not None
                else config.arena.opponent_iterations
            ),
        )
    except ValueError as e:
        logger.log_error(str(e))
        raise typer.Exit(code=1)
    if iterations is None:
        iterations = config.search.iterations
    _require_iterations(iterations, logger)

    engine_seed, opponent_seed = spawn_seeds(config.seed, 2)
    engine = SearchEngine.from_config(config.search, seed=engine_seed)

    if config.arena.opponent == "mcts":
        rival = SearchEngine.from_config(config.search, seed=opponent_seed)
        opponent_fn = engine_player(rival, config.arena.opponent_iterations)
    else:
        opponent_fn = random_player(np.random.default_rng(opponent_seed))

    match = Arena(
        engine,
        iterations=iterations,
        start_factory=lambda: Connect4State(
            rows=config.game.rows,
            cols=config.game.cols,
            win_length=config.game.win_length,
        ),
    )

    num_games = config.arena.num_games
    logger.log_info(
        f"Playing {num_games} games vs {config.arena.opponent} "
        f"({iterations} iterations per move)..."
    )
    wins, losses, draws = 0, 0, 0
    with create_progress() as progress:
        task = progress.add_task("Arena [W:0 L:0 D:0]", total=num_games)

        def callback(n, result_str):
            nonlocal wins, losses, draws
            if result_str == "W":
                wins += 1
            elif result_str == "L":
                losses += 1
            else:
                draws += 1
            progress.update(
                task,
                advance=1,
                description=f"Arena [W:{wins} L:{losses} D:{draws}]",
            )

        result = match.evaluate(opponent_fn, num_games=num_games, progress_callback=callback)

    console.print(f"\n[bold]Results (engine perspective):[/]")
    console.print(f"  Wins:   {result.wins}")
    console.print(f"  Losses: {result.losses}")
    console.print(f"  Draws:  {result.draws}")
    console.print(f"  Score:  {result.score*100:.1f}%")
    console.print(f"  Avg length: {result.avg_game_length:.1f} moves")
    print_stats(engine.get_stats())


@app.command("config")
def show_config(
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the default config to this YAML file"
    ),
) -> None:
    """Show the default configuration, or write it to a file."""
    from .utils import get_default_config, print_config

    config = get_default_config()
    if output is None:
        print_config(config)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    config.save(str(output))
    console.print(f"[green]Saved default config to {output}[/]")


if __name__ == "__main__":
    app()
