"""CLI interface with subcommand routing."""

import argparse
import asyncio
import json
import logging
import os
import sys

from line_rehearser.constants import DEFAULT_VOICE, SIMILARITY_THRESHOLD, VERSION
from line_rehearser.controller import RehearsalController
from line_rehearser.errors import InputClosed, PlaybackFailed, RecognitionUnavailable, RehearserError
from line_rehearser.extract import extract_file, resolve_kind, source_kind_for, extract_text
from line_rehearser.models import RehearsalSession, ScriptLine, SessionState, VoiceConfig
from line_rehearser.parser import parse_pasted, segment
from line_rehearser.ports import ConsoleRecognizer, ConsoleSynthesizer
from line_rehearser.roles import list_roles, role_line_counts
from line_rehearser.script import format_script
from line_rehearser.tts import EdgeSpeechSynthesizer
from line_rehearser.voices import VOICE_POOL, assign_voices, load_cast


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    raise SystemExit(1)


def _load_script(file_path: str, kind: str | None = None) -> list[ScriptLine]:
    """Structure a script file, or pasted lines from stdin when file is '-'."""
    if file_path == "-":
        return parse_pasted(sys.stdin.read())

    if not os.path.exists(file_path):
        _fail(f"File not found: {file_path}")

    if kind:
        doc_kind = resolve_kind(kind)
        with open(file_path, "rb") as f:
            text = extract_text(f.read(), doc_kind)
    else:
        text, doc_kind = extract_file(file_path)

    if not text.strip():
        _fail(f"File is empty: {file_path}")

    return segment(text, source_kind_for(doc_kind))


def _match_role(role: str, roles: list[str]) -> str:
    """Exact match first, then a unique case-insensitive one."""
    if role in roles:
        return role
    matches = [r for r in roles if r.lower() == role.strip().lower()]
    if len(matches) == 1:
        return matches[0]
    _fail(f"Role '{role}' not in script. Choose one of: {', '.join(roles)}")


def cmd_parse(args):
    """Print the structured script."""
    script = _load_script(args.file, args.kind)
    if args.json:
        data = [{"index": l.index, "character": l.character, "text": l.text} for l in script]
        print(json.dumps(data, indent=2))
        return
    print(format_script(script))
    print(f"\nParsed {len(script)} lines, {len(list_roles(script))} roles", file=sys.stderr)


def cmd_roles(args):
    """List the characters in a script."""
    script = _load_script(args.file, args.kind)
    counts = role_line_counts(script)
    print("Roles:")
    for role in list_roles(script):
        n = counts[role]
        print(f"  {role:<20} {n} line{'s' if n != 1 else ''}")


async def _take_turn(controller: RehearsalController, hide_lines: bool):
    line = controller.current_line
    if not controller.is_users_turn:
        await controller.play_next()
        return

    if controller.state is SessionState.IDLE:
        cue = "..." if hide_lines else line.text
        print(f"{line.character} (you): {cue}")

    result = await controller.begin_listening()
    if result.delivered:
        print(f"  ✓ {result.score:.0%} match")
    elif not result.cancelled:
        print(f"  Try again ({result.score:.0%} match). Expected: {line.text}")


async def _rehearse(controller: RehearsalController, session: RehearsalSession, hide_lines: bool = False):
    """Run the scene to the end, prompting for each of the user's lines.

    Playback and capture failures leave the cursor where it was, so the
    turn is simply taken again. Closed input ends the run.
    """
    controller.reset(session)
    while controller.state is not SessionState.COMPLETE:
        try:
            await _take_turn(controller, hide_lines)
        except PlaybackFailed as e:
            print(f"  {e}. Retrying.")
        except RecognitionUnavailable as e:
            if isinstance(e.__cause__, InputClosed):
                raise
            print(f"  {e}. Listening again.")


def cmd_run(args):
    """Rehearse a script, playing the chosen role."""
    if args.file == "-":
        _fail("run reads your lines from stdin, so the script must be a file")
    script = _load_script(args.file, args.kind)
    role = _match_role(args.role, list_roles(script))

    cast = load_cast(args.file)
    partners = [r for r in list_roles(script) if r != role]
    voices = assign_voices(
        partners, cast=cast, voice_id=args.voice,
        rate=args.rate, pitch=args.pitch, volume=args.volume,
    )

    def announce(session):
        if session.state is SessionState.SPEAKING:
            current = session.current_line
            print(f"{current.character}: {current.text}")

    if args.no_audio:
        synthesizer = ConsoleSynthesizer()
        on_change = None
    else:
        synthesizer = EdgeSpeechSynthesizer()
        on_change = announce

    controller = RehearsalController(
        synthesizer,
        ConsoleRecognizer(),
        voices=voices,
        default_voice=VoiceConfig(voice_id=args.voice or DEFAULT_VOICE),
        threshold=args.threshold,
        on_change=on_change,
    )
    session = RehearsalSession(script=script, user_role=role)

    print(f"Rehearsing as {role}: {len(script)} lines, {len(partners)} partner role(s)")
    print("Type each of your lines at the prompt.\n")
    try:
        asyncio.run(_rehearse(controller, session, hide_lines=args.hide_lines))
    except KeyboardInterrupt:
        print(f"\nStopped at line {session.cursor + 1} of {len(script)}.")
        return

    retries = sum(n - 1 for n in session.attempts.values())
    print(f"\nScene complete. {retries} retr{'y' if retries == 1 else 'ies'}.")


def cmd_voices(args):
    """List available voices."""
    filter_str = args.filter.lower() if args.filter else None
    voices = VOICE_POOL
    if filter_str:
        voices = [v for v in voices if filter_str in v.lower()]
    if not voices:
        print("No matching voices found.")
        return
    print("Available voices:")
    for v in voices:
        print(f"  {v}")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="rehearse",
        description="Line Rehearser: structure a script and run lines with a synthetic scene partner",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_file_args(sub):
        sub.add_argument("file", help="Script file (PDF, DOCX or TXT), or '-' for pasted lines on stdin")
        sub.add_argument("--kind", help="Override the document kind (pdf, docx, plain)")

    # parse
    parse_parser = subparsers.add_parser("parse", help="Show the structured script")
    add_file_args(parse_parser)
    parse_parser.add_argument("--json", action="store_true", help="Print lines as JSON")
    parse_parser.set_defaults(func=cmd_parse)

    # roles
    roles_parser = subparsers.add_parser("roles", help="List the characters in a script")
    add_file_args(roles_parser)
    roles_parser.set_defaults(func=cmd_roles)

    # run
    run_parser = subparsers.add_parser("run", help="Rehearse a role")
    add_file_args(run_parser)
    run_parser.add_argument("-r", "--role", required=True, help="The character you are playing")
    run_parser.add_argument("--voice", help="Partner voice id (see 'voices')")
    run_parser.add_argument("--rate", type=float, help="Speech speed multiplier, e.g. 0.8")
    run_parser.add_argument("--pitch", type=float, help="Pitch multiplier")
    run_parser.add_argument("--volume", type=float, help="Volume multiplier, e.g. 0.8")
    run_parser.add_argument("--threshold", type=float, default=SIMILARITY_THRESHOLD,
                            help="Similarity needed to accept a line (default %(default)s)")
    run_parser.add_argument("--no-audio", action="store_true", help="Print partner lines instead of speaking them")
    run_parser.add_argument("--hide-lines", action="store_true", help="Don't show your own lines as prompts")
    run_parser.set_defaults(func=cmd_run)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List available voices")
    voices_parser.add_argument("--filter", help="Filter voices by substring")
    voices_parser.set_defaults(func=cmd_voices)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except RehearserError as e:
        _fail(str(e))
