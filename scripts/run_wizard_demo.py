#!/usr/bin/env python3
"""
Walk the concierge wizard end to end and print each stage to the terminal.
Shows the questions, the progress value, the submission and the redirect countdown.

Usage (from repo root):
  python scripts/run_wizard_demo.py --dry-run
  python scripts/run_wizard_demo.py --base-url http://127.0.0.1:8000
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx

from src.concierge.session import ConciergeSession
from src.concierge.validation import lead_field_errors
from src.concierge.wizard import Advance, SetAnswer, SetLeadField, Start, prompt_hint
from src.integrations.clients.real_http.lead_api import LeadApiClient
from src.utils.config_loader import load_landing_config


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


def _dry_run_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        print_stage("DRY RUN: POST /api/lead body", json.loads(request.content))
        return httpx.Response(200, json={"ok": True})

    return httpx.MockTransport(handler)


async def main():
    parser = argparse.ArgumentParser(description="Run the lead wizard in the terminal")
    parser.add_argument("--base-url", default="http://127.0.0.1:8000", help="Lead API base URL")
    parser.add_argument("--dry-run", action="store_true", help="Do not call the API, accept every submission")
    parser.add_argument("--name", default="Jane Doe")
    parser.add_argument("--email", default="jane@example.com")
    parser.add_argument("--phone", default="08012345678")
    args = parser.parse_args()

    setup_logging()
    config = load_landing_config()
    client = LeadApiClient(args.base_url, transport=_dry_run_transport() if args.dry_run else None)

    session = ConciergeSession(
        config=config,
        client=client,
        alert=lambda msg: print_stage("ALERT", msg),
        navigate=lambda url: print_stage("NAVIGATE", url),
        on_tick=lambda remaining: print(f"  Redirecting to website in {remaining}s..."),
    )

    print_stage("HERO", {"headline": config.offer.headline, "sub": config.offer.sub, "progress": session.progress})
    session.dispatch(Start())

    while True:
        question = session.machine.current_question(session.state)
        if question is None:
            break
        print_stage(
            f"QUESTION {session.state.step}/{session.machine.question_count} {prompt_hint(question)}",
            {"label": question.label, "options": list(question.options), "progress": session.progress},
        )
        if question.required:
            session.dispatch(SetAnswer(question.id, question.options[0]))
        session.dispatch(Advance())

    for field, value in (("name", args.name), ("email", args.email), ("phone", args.phone)):
        session.dispatch(SetLeadField(field, value))
    print_stage(
        "CONTACT FORM",
        {
            "lead": session.state.lead.to_dict(),
            "field_errors": lead_field_errors(session.state.lead),
            "answers": session.state.answers_snapshot(),
            "progress": session.progress,
        },
    )

    ok = await session.submit()
    if not ok:
        print_stage("SUBMISSION FAILED", {"error": session.state.last_error})
        return

    print_stage(config.offer.thank_you_title, config.offer.thank_you_body)
    while session.redirect_timer.active:
        await asyncio.sleep(0.2)
    session.close()

    print("\n" + "=" * 60)
    print("  Demo complete.")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
