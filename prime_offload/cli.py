import argparse
import json
import logging
import shlex
import sys
from typing import Dict, List, Optional

from rich.console import Console
from rich.table import Table

from prime_offload.errors import ErrorCategory, PrimeOffloadError
from prime_offload.models import BinaryConfig, Renderer
from prime_offload.offload import resolve_offload
from prime_offload.policy import evaluate_prime
from prime_offload.settings import SettingsError, SettingsManager
from prime_offload.sysfs import get_system_cards

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

EXIT_CODES = {
    ErrorCategory.AMBIGUOUS_TOPOLOGY: 3,
    ErrorCategory.UNKNOWN_DEVICE_ID: 4,
    ErrorCategory.INVALID_INDEX: 5,
}


def parse_env_pairs(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Turn repeated KEY=VALUE arguments into a dict."""
    env: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got '{pair}'")
        env[key] = value
    return env


class PrimeOffloadCLI:
    def __init__(self, drm_path: str):
        self.drm_path = drm_path

    def _print_error(self, message: str):
        err_console.print(f"[red]Error:[/red] {message}")

    def _config_from_args(self, args: argparse.Namespace) -> BinaryConfig:
        return BinaryConfig(
            env=parse_env_pairs(getattr(args, "env", None)),
            renderer=args.renderer,
            dxvk=args.dxvk,
            forced_gpu=getattr(args, "gpu", ""),
        )

    def list_cards(self, args: argparse.Namespace) -> int:
        cards, _ = get_system_cards(self.drm_path)

        if args.json:
            console.print_json(json.dumps([card.to_dict() for card in cards]))
            return 0

        if not cards:
            console.print(f"[yellow]No cards found under {self.drm_path}[/yellow]")
            return 0

        table = Table(title="GPUs")
        table.add_column("Index", justify="right")
        table.add_column("ID", style="cyan")
        table.add_column("eDP")
        table.add_column("Driver")
        table.add_column("Path", style="dim")
        for position, card in enumerate(cards):
            table.add_row(
                str(position),
                card.id,
                "✓" if card.edp else "",
                card.driver,
                card.path,
            )
        console.print(table)
        return 0

    def env(self, args: argparse.Namespace) -> int:
        try:
            config = self._config_from_args(args)
        except ValueError as e:
            self._print_error(str(e))
            return 1

        result = resolve_offload(config, self.drm_path)
        for event in result.events:
            logger.log(event.level, event.message)

        if args.json:
            console.print_json(json.dumps(result.config.env))
            return 0

        for key, value in sorted(result.config.env.items()):
            print(f"export {key}={shlex.quote(value)}")
        return 0

    def check(self, args: argparse.Namespace) -> int:
        config = self._config_from_args(args)
        cards, _ = get_system_cards(self.drm_path)
        decision = evaluate_prime(cards, config)
        if decision.allowed:
            console.print(f"[green]✓ PRIME offload is available.[/green] {decision.reason}")
        else:
            console.print(f"[yellow]PRIME offload skipped.[/yellow] {decision.reason}")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prime-offload",
        description="Pick the GPU an application renders on (PRIME render offload)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show diagnostics")
    parser.add_argument("--drm-path", help="DRM class directory to probe")
    subparsers = parser.add_subparsers(dest="command")

    renderers = [r.value for r in Renderer]

    list_parser = subparsers.add_parser("list", help="List detected GPUs")
    list_parser.add_argument("--json", action="store_true", help="Output JSON")

    env_parser = subparsers.add_parser("env", help="Print the offload environment")
    env_parser.add_argument(
        "--gpu",
        default="prime-discrete",
        help='"integrated", "prime-discrete", a vid:nid or a card index',
    )
    env_parser.add_argument("--renderer", default=Renderer.VULKAN.value, choices=renderers)
    env_parser.add_argument("--dxvk", action="store_true", help="DXVK translation layer is in use")
    env_parser.add_argument(
        "--env", action="append", metavar="KEY=VALUE", help="Variable already set by the launcher"
    )
    env_parser.add_argument("--json", action="store_true", help="Output JSON")

    check_parser = subparsers.add_parser("check", help="Check whether PRIME offload is safe")
    check_parser.add_argument("--renderer", default=Renderer.VULKAN.value, choices=renderers)
    check_parser.add_argument("--dxvk", action="store_true", help="DXVK translation layer is in use")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        settings = SettingsManager().load()
    except SettingsError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return 1

    level = logging.DEBUG if args.verbose else settings.log_level_value
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    cli = PrimeOffloadCLI(args.drm_path or settings.drm_path)
    commands = {
        "list": cli.list_cards,
        "env": cli.env,
        "check": cli.check,
    }

    try:
        return commands[args.command](args)
    except PrimeOffloadError as e:
        cli._print_error(str(e))
        return EXIT_CODES.get(e.category, 1)


if __name__ == "__main__":
    sys.exit(main())
