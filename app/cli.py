"""
Terminal front-end for ContentCraft.

Usage:
    contentcraft plans
    contentcraft generate --email me@example.com --password secret --topic "space travel" --style blog --length short
    contentcraft subscribe --email me@example.com --password secret --plan pro --origin http://localhost:5173
"""

import argparse
import asyncio
import getpass
import sys
from typing import Optional

from app.config import get_settings
from app.dependencies import (
    build_gemini_service,
    build_identity_provider,
    build_payment_provider,
    build_quota_tracker,
)
from app.models.generation import ContentLength, ContentStyle, GenerationRequest
from app.models.identity import SessionIdentity
from app.models.plan import build_plan_catalog
from app.services.auth.session import AuthEvent, AuthSession
from app.services.billing.checkout_issuer import CheckoutSessionIssuer
from app.services.billing.plan_selection import PlanSelectionService
from app.services.gating import GatingCoordinator
from app.services.generation_service import GenerationService
from app.utils.exceptions import ContentCraftException
from app.utils.logger import configure_logging


def _print_auth_change(event: AuthEvent, identity: Optional[SessionIdentity]) -> None:
    who = identity.email if identity else "nobody"
    print(f"[auth] {event.value}: {who}", file=sys.stderr)


def _new_session(settings) -> AuthSession:
    session = AuthSession(build_identity_provider(settings))
    session.on_auth_state_change(_print_auth_change)
    return session


async def _sign_in(session: AuthSession, args) -> None:
    if not args.email:
        return
    password = args.password or getpass.getpass("Password: ")
    if args.signup:
        await session.sign_up(args.email, password)
    if session.identity is None:
        await session.sign_in(args.email, password)


async def _close(session: AuthSession, sign_out: bool = False) -> None:
    try:
        if sign_out and session.identity is not None:
            await session.sign_out()
    finally:
        await session.provider.aclose()


def cmd_plans(args, settings) -> int:
    catalog = build_plan_catalog(settings.stripe_pro_price_id, settings.stripe_enterprise_price_id)
    for plan in catalog:
        marker = " (most popular)" if plan.popular else ""
        print(f"{plan.id:<12} {plan.name:<18} {plan.display_price:>8}{marker}")
        for feature in plan.features:
            print(f"    - {feature}")
    return 0


async def cmd_generate(args, settings) -> int:
    quota = build_quota_tracker(settings)
    service = GenerationService(GatingCoordinator(quota.ceiling), quota, build_gemini_service(settings))
    request = GenerationRequest(
        topic=args.topic,
        style=ContentStyle(args.style),
        length=ContentLength(args.length),
    )
    session = _new_session(settings)
    try:
        await _sign_in(session, args)
        for _ in range(args.count):
            outcome = await service.generate(request, session.identity)
            if not outcome.result.ok:
                print(f"Error: {outcome.result.error}", file=sys.stderr)
                return 1
            print(outcome.result.text)
            usage = outcome.usage()
            print(f"\nGenerated {usage['used']}/{usage['limit']} articles this month", file=sys.stderr)
    finally:
        await _close(session, sign_out=True)
    return 0


async def cmd_subscribe(args, settings) -> int:
    catalog = build_plan_catalog(settings.stripe_pro_price_id, settings.stripe_enterprise_price_id)
    origin = args.origin or settings.public_app_url or "http://localhost:8000"
    session = _new_session(settings)
    try:
        await _sign_in(session, args)
        issuer = CheckoutSessionIssuer(session.provider, build_payment_provider(settings))
        token = session.identity.access_token if session.identity else None
        selection = await PlanSelectionService(catalog, issuer).select(args.plan, token, origin)
    finally:
        await _close(session)
    print(selection.message)
    if selection.checkout_url:
        print(selection.checkout_url)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contentcraft", description="AI content generation")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("plans", help="List available plans")

    def add_credentials(p):
        p.add_argument("--email", help="Account email")
        p.add_argument("--password", help="Account password (prompted if omitted)")
        p.add_argument("--signup", action="store_true", help="Create the account first")

    gen = sub.add_parser("generate", help="Generate content")
    add_credentials(gen)
    gen.add_argument("--topic", required=True)
    gen.add_argument("--style", choices=[style.value for style in ContentStyle], default=ContentStyle.ARTICLE.value)
    gen.add_argument("--length", choices=[length.value for length in ContentLength], default=ContentLength.MEDIUM.value)
    gen.add_argument("--count", type=int, default=1, help="How many pieces to generate")

    subscribe = sub.add_parser("subscribe", help="Select a plan")
    add_credentials(subscribe)
    subscribe.add_argument("--plan", required=True, help="Plan ID (basic, pro, enterprise)")
    subscribe.add_argument("--origin", help="Base URL checkout returns to")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(debug=args.debug)

    try:
        if args.command == "plans":
            return cmd_plans(args, settings)
        if args.command == "generate":
            return asyncio.run(cmd_generate(args, settings))
        if args.command == "subscribe":
            return asyncio.run(cmd_subscribe(args, settings))
    except ContentCraftException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())
