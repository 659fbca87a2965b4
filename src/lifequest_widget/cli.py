#!/usr/bin/env python3
"""
LifeQuest widget CLI - drive the widget core from the command line.

Renders widgets into a directory, simulates taps and routes deep links,
using the same controller a real widget host would call into.
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from .config.loader import ConfigLoader
from .controller import ACTION_APPWIDGET_UPDATE, WidgetController
from .hosts.directory import DirectoryHost

logger = logging.getLogger(__name__)


class WidgetCLI:
    """Main CLI handler for LifeQuest widget commands."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        state_path: Optional[str] = None,
        output_dir: Optional[str] = None,
    ) -> None:
        self.config_loader = ConfigLoader()
        self.config = self.config_loader.load_or_default(config_path)

        if state_path:
            self.config["state"]["path"] = state_path
        if output_dir:
            self.config["host"]["output_dir"] = output_dir

        self.host = DirectoryHost(self.config["host"]["output_dir"], self.config["widget"]["ids"])

    def make_controller(self, launch_uri: Optional[str] = None) -> WidgetController:
        return WidgetController(self.host, config=self.config, launch_uri=launch_uri)

    def update(self, widget_ids: Optional[List[int]] = None) -> int:
        """Render widgets from the state file."""
        controller = self.make_controller()
        if not widget_ids:
            widget_ids = self.host.get_widget_ids()

        updated = controller.on_receive(ACTION_APPWIDGET_UPDATE, widget_ids)
        failed = [widget_id for widget_id in widget_ids if widget_id not in updated]
        if failed:
            print(f"Failed to update widgets: {', '.join(map(str, failed))}")
            return 1

        print(f"Widgets written to {self.host.output_dir}")
        return 0

    def show(self) -> int:
        """Print the derived render model as YAML."""
        model = self.make_controller().build_model()
        print(yaml.safe_dump(model.to_dict(), allow_unicode=True, sort_keys=False), end="")
        return 0

    def tap(self, widget_id: int) -> int:
        """Tap a widget: deliver the refresh trigger, then run the update path."""
        controller = self.make_controller()
        trigger = controller.on_tap(widget_id)
        if trigger is None:
            print("Failed to deliver refresh trigger")
            return 1

        print(f"Delivered {trigger.uri}")
        controller.on_receive(ACTION_APPWIDGET_UPDATE)
        return 0

    def link(self, uri: str, cold_start: bool = False) -> int:
        """Route a URI and report what the application would receive."""
        if cold_start:
            controller = self.make_controller(launch_uri=uri)
            initial = controller.handle_method_call("getInitialLink")
            print(f"getInitialLink -> {initial if initial else 'no link'}")
            return 0

        controller = self.make_controller()
        received = []
        controller.channel.set_listener(lambda method, args: received.append((method, args)))
        controller.on_new_link(uri)

        if not received:
            print(f"Ignored (scheme is not {controller.router.scheme!r})")
            return 0

        for method, args in received:
            print(f"{method}: {args}")
        return 0

    def validate(self, config_path: str) -> int:
        """Validate a configuration file."""
        try:
            self.config_loader.load(config_path)
        except (FileNotFoundError, ValueError, PermissionError) as e:
            print(f"✗ Configuration is invalid: {e}")
            return 1

        print(f"✓ Configuration is valid: {config_path}")
        return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="lifequest-widget",
        description="LifeQuest home-screen widget core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lifequest-widget update                          # Render all widgets
  lifequest-widget show --state state.yaml         # Print the render model
  lifequest-widget tap 1                           # Tap widget 1
  lifequest-widget link lifequest://quest/42       # Deliver a live link
  lifequest-widget link lifequest://x --cold-start # Launch with a link
  lifequest-widget validate config.yaml            # Validate a configuration
""",
    )
    parser.add_argument("-c", "--config", help="Path to YAML configuration file")
    parser.add_argument("--state", help="Path to the persisted state file")
    parser.add_argument("--output", help="Directory widgets are written to")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    update_parser = subparsers.add_parser("update", help="Render widgets from the state file")
    update_parser.add_argument("ids", nargs="*", type=int, help="Widget ids (default: all)")

    subparsers.add_parser("show", help="Print the derived render model")

    tap_parser = subparsers.add_parser("tap", help="Simulate a tap on a widget")
    tap_parser.add_argument("id", type=int, nargs="?", default=1, help="Widget id (default: 1)")

    link_parser = subparsers.add_parser("link", help="Route a deep link")
    link_parser.add_argument("uri", help="URI to deliver")
    link_parser.add_argument(
        "--cold-start", action="store_true", help="Deliver as the launching link"
    )

    validate_parser = subparsers.add_parser("validate", help="Validate a configuration")
    validate_parser.add_argument("path", help="Configuration file to validate")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        cli = WidgetCLI(args.config, args.state, args.output)
    except (FileNotFoundError, ValueError, PermissionError) as e:
        logger.error(f"Failed to load config: {e}")
        return 1

    if args.command == "update":
        return cli.update(args.ids)
    elif args.command == "show":
        return cli.show()
    elif args.command == "tap":
        return cli.tap(args.id)
    elif args.command == "link":
        return cli.link(args.uri, cold_start=args.cold_start)
    elif args.command == "validate":
        return cli.validate(args.path)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
