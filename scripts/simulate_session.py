"""
Headless session simulation.

Plays one timed session against an asset directory with a scripted bot
that answers correctly with a given probability, advancing the timer
queue in simulated time, then prints the result.

Usage:
    python scripts/simulate_session.py data --stage ai --accuracy 0.8
"""

import argparse
import logging
import random
import sys
import tempfile
from pathlib import Path

# Add src to path so we can import tsumqma
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root / "src"))

from tsumqma.engine import GameConfig, GameController, SessionConfig, SessionPhase
from tsumqma.engine.question_types import MultiChoiceQuestion
from tsumqma.logging_utils import configure_logging
from tsumqma.storage import JsonProfileStore

logger = logging.getLogger("simulate")

STEP = 0.25


def _bot_answer(controller: GameController, accuracy: float, rng: random.Random) -> None:
    """Answer the current question, right with probability `accuracy`."""
    scheduler = controller.scheduler
    question = scheduler.current
    correct = sorted(question.spec.correct_indices)
    n_options = len(question.spec.options)

    if rng.random() < accuracy:
        picks = correct
    else:
        wrong = [i for i in range(n_options) if i not in correct]
        picks = [rng.choice(wrong)] if wrong else correct[:-1] or correct

    if isinstance(question, MultiChoiceQuestion):
        for index in picks:
            scheduler.select_option(index)
        scheduler.confirm()
    else:
        scheduler.select_option(picks[0])


def simulate(asset_root: Path, save_path: Path, stage: str, accuracy: float,
             think_time: float, seed: int) -> int:
    rng = random.Random(seed)
    config = GameConfig.for_directory(
        asset_root,
        save_path=save_path,
        session=SessionConfig(seed=seed),
    )
    controller = GameController(config, store=JsonProfileStore(save_path), rng=rng)
    if not controller.initialize():
        print("Failed to load game assets", file=sys.stderr)
        return 1

    if controller.needs_character_selection:
        controller.choose_character("fire")
    if controller.needs_player_name:
        controller.set_player_name("Bot")

    if not controller.select_stage(stage):
        print(f"Could not start stage {stage!r}", file=sys.stderr)
        return 1

    scheduler = controller.scheduler
    waited = 0.0
    while scheduler.phase is not SessionPhase.ENDED:
        controller.advance(STEP)
        if scheduler.is_playing and not scheduler.awaiting_advance:
            waited += STEP
            if waited >= think_time:
                _bot_answer(controller, accuracy, rng)
                waited = 0.0

    result = scheduler.result
    status = controller.status_snapshot()
    print(f"\n--- Session Result ({result.stage_id}) ---")
    print(f"Score:      {result.final_score}")
    print(f"Correct:    {result.session_correct_count}/{result.questions_answered}")
    print(f"Max combo:  {result.max_combo}")
    print(f"Exp gained: +{result.exp_gained}{' (level up!)' if result.leveled_up else ''}")
    print(f"Stage Lv:   {result.stage_level}   Aggregate Lv: {result.aggregate_level}")
    print(f"Accuracy:   {status.accuracy_percent}% over {status.total_answers} answers")
    unlocked = [e.item.name for e in status.equipment if e.unlocked]
    print(f"Equipment:  {', '.join(unlocked) or '-'}")
    if controller.needs_character_name:
        print("The egg has hatched!")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate a timed quiz session")
    parser.add_argument("assets", type=Path, help="Directory with stages.json and quizzes/")
    parser.add_argument("--stage", default="ai", help="Stage id to play")
    parser.add_argument("--accuracy", type=float, default=0.75, help="Chance of a correct answer")
    parser.add_argument("--think-time", type=float, default=2.0, help="Seconds per answer")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--save", type=Path, default=None,
                        help="Save file (default: a temporary file)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    if not 0.0 <= args.accuracy <= 1.0:
        parser.error("--accuracy must be between 0 and 1")
    configure_logging(args.verbose)

    if args.save is not None:
        return simulate(args.assets, args.save, args.stage, args.accuracy, args.think_time, args.seed)
    with tempfile.TemporaryDirectory() as tmp:
        return simulate(args.assets, Path(tmp) / "save.json", args.stage,
                        args.accuracy, args.think_time, args.seed)


if __name__ == "__main__":
    sys.exit(main())
