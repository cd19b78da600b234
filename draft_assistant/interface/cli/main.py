"""CLI for the draft assistant.

Commands:
    draft-assistant draft --question "How do I reset my password?"
    draft-assistant serve --port 3000
"""

import argparse
import json
from collections.abc import Sequence
from pathlib import Path

from draft_assistant.config.composition import build_draft_use_case
from draft_assistant.config.log_setup import configure_logging
from draft_assistant.config.settings import AppSettings
from draft_assistant.domain.errors import DomainError
from draft_assistant.domain.models import SUPPORTED_MODEL_IDS, ConversationMessage, DraftRequest
from draft_assistant.domain.services.prompting import fill_placeholders


def load_history(path: str | None) -> tuple[ConversationMessage, ...]:
    """Read a JSON array of {"role", "content"} objects."""
    if not path:
        return ()
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise DomainError("history file must contain a JSON array")
    return tuple(ConversationMessage(role=m.get("role"), content=m.get("content")) for m in raw)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="draft-assistant")
    sub = parser.add_subparsers(dest="command", required=True)

    draft = sub.add_parser("draft", help="Draft a reply in-process")
    draft.add_argument("--question", required=True)
    draft.add_argument("--model-id", choices=SUPPORTED_MODEL_IDS, default=None)
    draft.add_argument("--session-id", default=None)
    draft.add_argument("--history-file", default=None, help="JSON array of earlier turns")
    draft.add_argument("--customer-name", default=None, help="Fill {{CUSTOMER_NAME}} for display")
    draft.add_argument("--rep-name", default=None, help="Fill {{CS_REP_NAME}} for display")

    serve = sub.add_parser("serve", help="Run the HTTP gateway")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    return parser


def run_draft(args: argparse.Namespace) -> int:
    try:
        history = load_history(args.history_file)
    except (OSError, ValueError, AttributeError, DomainError) as ex:
        print(f"\n[ERROR] Could not read history file: {ex}")
        return 2

    uc = build_draft_use_case()
    req = DraftRequest(
        question=args.question,
        session_id=args.session_id,
        model_id=args.model_id,
        conversation_history=history,
    )
    result = uc.execute(req)

    if result.ok and result.value is not None:
        text = fill_placeholders(result.value.response_text, args.customer_name, args.rep_name)
        print("\n" + "=" * 80)
        print("DRAFT:")
        print("=" * 80)
        print(text)
        print("\n" + "=" * 80)
        print("CITATION:")
        print("=" * 80)
        print(result.value.citation or "(none)")
        return 0

    err = result.error
    print(f"\n[ERROR] {type(err).__name__}: {err}")
    return 1


def run_serve(args: argparse.Namespace, settings: AppSettings) -> int:
    import uvicorn

    uvicorn.run(
        "draft_assistant.interface.http.api:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = AppSettings()
    configure_logging(settings.log_level)

    if args.command == "serve":
        return run_serve(args, settings)
    return run_draft(args)


if __name__ == "__main__":
    raise SystemExit(main())
