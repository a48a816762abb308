import sys
import asyncio
import argparse
from pathlib import Path

import llm_utils
import generation_service
from config import Config, STORE_PATH
from constants import IMAGE_STYLES, VOICES, find_niche
from export_utils import export_package
from scene_images import generate_scene_images
from session_store import AccountService, AuthError, JsonStore, StoreError
from shorts_types import Niche, Step, User
from wizard import PaywallRequired, ShortProject, next_step

# ------------- CONFIG -------------

OUTPUT_DIR = Path("shorts_output")


def safe_dir_name(name: str) -> str:
    safe = "".join(c if c.isalnum() or c in (" ", "-", "_") else "" for c in name)
    return safe.strip().replace(" ", "_").lower() or "short"


def resolve_user(accounts: AccountService, args) -> User:
    """Restore the saved session, or log in / sign up with the given credentials."""
    if args.email:
        if args.signup:
            return accounts.sign_up(args.email, args.password or "", args.password or "")
        if args.password is None:
            return accounts.social_log_in(args.email)
        return accounts.log_in(args.email, args.password)
    user = accounts.current_user()
    if user is None:
        raise AuthError("Not logged in. Pass --email (and --password, --signup for a new account).")
    return user


async def run_wizard(
    niche: Niche,
    accounts: AccountService,
    user: User,
    style: str = Config.default_style,
    voice_name: str = Config.default_voice,
    with_images: bool = True,
    with_voice: bool = True,
) -> ShortProject:
    """
    Walk the wizard from niche selection to download.

    Raises PaywallRequired before any generation when the user is out of credits.
    Script and batch image failures propagate; voice-over is skipped when with_voice is False.
    """
    project = ShortProject(niche=niche)
    step = next_step(Step.NICHE_SELECTION, user)

    while step is not Step.DOWNLOAD:
        if step is Step.SCRIPT_GENERATION:
            print(f"\n[SCRIPT] Generating script for niche '{niche.name}' ({llm_utils.get_text_model_display()})...")
            project.update_script(await generation_service.generate_script(niche.name), accounts, user)
        elif step is Step.IMAGE_GENERATOR and with_images:
            print(f"\n[IMAGES] Generating scene images ({style})...")
            project.images = await generate_scene_images(project.script, style, project.images)
        elif step is Step.VOICE_GENERATOR and with_voice:
            print(f"\n[VOICE] Generating voice-over ({voice_name})...")
            project.voice = await generation_service.generate_voice(project.script, voice_name)
        step = next_step(step, user)

    return project


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate YouTube Shorts assets (script, scene images, voice-over) with AI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # First run: create a mock account (3 free credits)
  python build_short.py Motivation --email me@example.com --password secret --signup

  # Later runs reuse the saved session
  python build_short.py "Tech Facts" --style Neon --voice Charon

  # Script and voice only (skip images)
  python build_short.py motivation --no-images

  # Unlock unlimited generations
  python build_short.py motivation --upgrade
        """
    )

    parser.add_argument("niche", nargs="?", help="Niche id or name (e.g. motivation, 'Tech Facts') or any topic")
    parser.add_argument("output", nargs="?", help="Output directory (default: shorts_output/<niche>)")

    # Session
    parser.add_argument("--email", help="Log in with this email (no --password: mock social log-in for password-less accounts)")
    parser.add_argument("--password", help="Account password")
    parser.add_argument("--signup", action="store_true", help="Create a new account with --email/--password")
    parser.add_argument("--logout", action="store_true", help="Clear the saved session and exit")
    parser.add_argument("--upgrade", action="store_true", help="Upgrade the account to premium (unlimited credits)")

    # Generation
    parser.add_argument("--style", default=Config.default_style, choices=IMAGE_STYLES,
                        help=f"Image style (default: {Config.default_style})")
    parser.add_argument("--voice", default=Config.default_voice, choices=sorted(VOICES),
                        help=f"Narration voice (default: {Config.default_voice})")
    parser.add_argument("--no-images", action="store_true", help="Skip scene image generation")
    parser.add_argument("--no-voice", action="store_true", help="Skip voice-over generation")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    accounts = AccountService(JsonStore(STORE_PATH))

    try:
        if args.logout:
            accounts.log_out()
            return 0
        user = resolve_user(accounts, args)
        if args.upgrade:
            user = accounts.upgrade(user)
    except (AuthError, StoreError) as e:
        print(f"ERROR: {e}")
        return 1

    if not args.niche:
        print(f"Logged in as {user.email} ({'premium' if user.is_premium else f'{user.credits} credit(s)'})")
        return 0

    niche = find_niche(args.niche)
    out_dir = Path(args.output) if args.output else OUTPUT_DIR / safe_dir_name(niche.id)

    try:
        project = asyncio.run(run_wizard(
            niche,
            accounts,
            user,
            style=args.style,
            voice_name=args.voice,
            with_images=not args.no_images,
            with_voice=not args.no_voice,
        ))
    except PaywallRequired as e:
        print(f"ERROR: {e} Run with --upgrade.")
        return 1
    except Exception as e:
        print(f"\n[ERROR] {e}")
        return 1

    try:
        written = export_package(project.script, project.images, project.voice, out_dir)
    except Exception as e:
        print(f"\n[ERROR] Export failed: {e}")
        return 1

    print("\n" + "=" * 60)
    print("SUCCESS!")
    print("=" * 60)
    print(f"   Script: ~{project.script.estimated_duration}s, keywords: {', '.join(project.script.keywords)}")
    print(f"   Scenes: {len(project.images)}")
    if project.voice is not None:
        print(f"   Voice-over: {project.voice.voice_name}, {project.voice.duration:.1f}s")
    print(f"   Files: {len(written)} in {out_dir}")
    if not user.is_premium:
        print(f"   Credits left: {user.credits}")
    return 0


# ------------- ENTRY POINT -------------

if __name__ == "__main__":
    sys.exit(main())
