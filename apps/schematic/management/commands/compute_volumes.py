from __future__ import annotations

import json
from typing import Any, Dict

from django.core.management.base import BaseCommand, CommandError

from apps.schematic.services.options import parse_options
from apps.schematic.services.units import round_volume
from apps.schematic.services.volume_engine import compute_volumes


class Command(BaseCommand):
    help = "Compute well volumes from a JSON file holding {segments, options}"

    def add_arguments(self, parser) -> None:  # type: ignore[override]
        parser.add_argument("path", help="Path to a well JSON file ({\"segments\": [...], \"options\": {...}})")
        parser.add_argument("--plug-depth", type=float, default=None, help="POI depth in m (enables the plug split)")
        parser.add_argument("--json", action="store_true", help="Print the full result as JSON")

    def handle(self, *args: Any, **options: Any) -> None:  # type: ignore[override]
        path: str = options["path"]
        try:
            with open(path, "r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except OSError as e:
            raise CommandError(f"Cannot read {path}: {e}")
        except json.JSONDecodeError as e:
            raise CommandError(f"{path} is not valid JSON: {e}")

        if not isinstance(payload, dict) or not isinstance(payload.get("segments"), list):
            raise CommandError("Expected an object with a 'segments' list")

        engine_options: Dict[str, Any] = dict(payload.get("options") or {})
        if options.get("plug_depth") is not None:
            engine_options["plug_enabled"] = True
            engine_options["plug_depth_val"] = options["plug_depth"]

        result = compute_volumes(payload["segments"], engine_options)

        if options["json"]:
            self.stdout.write(json.dumps(result.to_dict(), indent=2))
            return

        self.stdout.write(f"{'segment':<20}{'length m':>12}{'volume m3':>14}{'m3/m':>12}")
        for entry in result.per_casing_volumes:
            if not entry.use:
                continue
            label = entry.role if not entry.index else f"{entry.role}[{entry.index}]"
            if entry.excluded:
                label += " (excl.)"
            self.stdout.write(
                f"{label:<20}{entry.included_length:>12.1f}"
                f"{round_volume(entry.volume):>14}{entry.per_meter_m3:>12.5f}"
            )
        self.stdout.write(self.style.SUCCESS(f"Total volume: {round_volume(result.total_volume)} m3"))

        if parse_options(engine_options).plug_active:
            self.stdout.write(
                f"Above POI {result.plug_depth_val} m: {round_volume(result.plug_above_volume)} m3, "
                f"below: {round_volume(result.plug_below_volume)} m3"
            )
        for warning in result.warnings:
            self.stdout.write(self.style.WARNING(f"{warning['code']}: {warning['message']}"))
