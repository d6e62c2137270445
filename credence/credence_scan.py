# credence_scan.py
import argparse
import json
import sys

from .engine import CredibilityEngine, build_persistence, configure_logging
from .errors import CredenceError
from .models import FeedbackEvent
from .persistence import create_weight_persistence

def build_parser():
    p = argparse.ArgumentParser(description="Credence credibility scan")
    p.add_argument("--weights", default=None, help="JSON weight file (defaults to CREDENCE_WEIGHTS_PATH)")
    p.add_argument("--log-level", default=None, help="Logging level (defaults to CREDENCE_LOG_LEVEL)")
    sub = p.add_subparsers(dest="command")

    a = sub.add_parser("analyze", help="Score text (or stdin)")
    a.add_argument("--source", default=None, help="Source URL (optional)")
    a.add_argument("text", nargs="*", help="Text to scan (or stdin)")

    f = sub.add_parser("feedback", help="Apply a reviewer correction to the weights")
    f.add_argument("--original", type=float, required=True, help="Score the engine gave")
    f.add_argument("--user", type=float, required=True, help="Score the reviewer gave")
    f.add_argument("--reason", action="append", default=[], help="Reason tag (repeatable)")

    sub.add_parser("reset", help="Restore default weights")
    sub.add_parser("weights", help="Print the current weight profile")
    return p

COMMANDS = ("analyze", "feedback", "reset", "weights")
VALUE_OPTIONS = ("--weights", "--log-level")

def with_default_command(argv):
    """Insert "analyze" before bare text so `credence-scan "some text"` works."""
    argv = list(argv)
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in VALUE_OPTIONS:
            i += 2
            continue
        if arg.startswith("--source"):
            argv.insert(i, "analyze")
            break
        if arg.startswith("-"):
            i += 1
            continue
        if arg not in COMMANDS:
            argv.insert(i, "analyze")
        break
    return argv

def _profile_dict(profile):
    return {name.value: weight for name, weight in profile.items()}

def run(args, engine):
    if args.command == "feedback":
        event = FeedbackEvent.create(args.original, args.user, args.reason)
        return {"weights": _profile_dict(engine.record_feedback(event)), "stats": engine.feedback_stats()}
    if args.command == "reset":
        engine.reset_weights()
        return {"weights": _profile_dict(engine.weights())}
    if args.command == "weights":
        return {"weights": _profile_dict(engine.weights())}

    text = " ".join(args.text) if args.text else sys.stdin.read()
    return engine.analyze_text(text, url=args.source).to_dict()

def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(with_default_command(argv))
    if args.command is None:
        args.command = "analyze"
        args.source, args.text = None, []
    configure_logging(args.log_level)

    if args.weights:
        persistence = create_weight_persistence("json", path=args.weights)
    else:
        persistence = build_persistence()
    engine = CredibilityEngine(persistence=persistence)
    try:
        result = run(args, engine)
    except CredenceError as e:
        print(json_dump({"error": str(e)}), file=sys.stderr)
        return 2
    finally:
        engine.shutdown()
    print(json_dump(result))
    return 0

def json_dump(obj):
    return json.dumps(obj, indent=2, sort_keys=True, ensure_ascii=False)

if __name__ == "__main__":
    sys.exit(main())
