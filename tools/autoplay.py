#!/usr/bin/env python3
"""
Let the autopilot play a session headlessly, optionally recording a video.

Usage:
    uv run tools/autoplay.py --seed 7 --turns 300
    uv run tools/autoplay.py --seed 7 --output autoplay.mp4 --fps 10
"""

import argparse
import random
import sys
from pathlib import Path

# Add parent directory to path so we can import rogue
sys.path.insert(0, str(Path(__file__).parent.parent))

from rogue.autopilot import Autopilot
from rogue.event_system import Event, EventData
from rogue.recording import SessionRecorder
from rogue.renderer import draw_hud, render_frame
from rogue.session import Command, create_session


def log(message: str) -> None:
    """Log to stderr to avoid corrupting stdout."""
    print(message, file=sys.stderr)


def main():
    parser = argparse.ArgumentParser(description="Run the autopilot against a generated dungeon")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--turns", type=int, default=500, help="Maximum player commands to issue")
    parser.add_argument(
        "--ticks-every", type=int, default=2, help="Advance enemies after every N player commands"
    )
    parser.add_argument("--output", type=str, default=None, help="Optional video file to record")
    parser.add_argument("--fps", type=int, default=10)
    parser.add_argument("--debug-events", action="store_true", help="Log every event to stderr")
    args = parser.parse_args()

    if args.ticks_every < 1:
        log("Error: --ticks-every must be at least 1")
        sys.exit(1)

    if args.seed is not None:
        log(f"Using random seed: {args.seed}")
    rng = random.Random(args.seed)

    session = create_session(rng)
    session.event_bus.set_debug(args.debug_events)
    autopilot = Autopilot(rng)

    def on_item(event: EventData) -> None:
        log(f"Picked up {event.kwargs['item'].name} at ({event.kwargs['x']}, {event.kwargs['y']})")

    def on_kill(event: EventData) -> None:
        log(f"Killed {event.kwargs['enemy_id']}")

    session.event_bus.subscribe(Event.ITEM_PICKED_UP, on_item)
    session.event_bus.subscribe(Event.ENEMY_KILLED, on_kill)

    recorder = None
    if args.output:
        first_frame = draw_hud(render_frame(session), session)
        height, width = first_frame.shape[:2]
        recorder = SessionRecorder(args.output, width, height, fps=args.fps)
        recorder.start()
        recorder.write_frame(first_frame)

        def on_state_changed(_event: EventData) -> None:
            recorder.write_frame(draw_hud(render_frame(session), session))

        session.event_bus.subscribe(Event.STATE_CHANGED, on_state_changed)

    try:
        for turn in range(1, args.turns + 1):
            session.submit(autopilot.decide(session))
            if turn % args.ticks_every == 0:
                session.submit(Command.ADVANCE_ENEMIES)
            session.process_pending()

            if session.enemies_cleared:
                log(f"All enemies cleared after {turn} commands")
                break
            if session.player_defeated:
                log(f"Player defeated after {turn} commands")
                break
    finally:
        if recorder is not None:
            recorder.close()

    player = session.player
    print(
        f"turns={session.turn} ticks={session.ticks} hp={player.hp}/{player.max_hp} "
        f"attack={player.attack} enemies_left={len(session.enemies)}"
    )


if __name__ == "__main__":
    main()
