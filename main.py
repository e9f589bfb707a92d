"""Simple entrypoint to run one scan check locally."""

import json

from evaluation.scenarios import SCENARIOS
from match_app.app import ScanMatchApp


def main() -> None:
    app = ScanMatchApp()
    scenario = next(s for s in SCENARIOS if s.name == "wear_now_and_worth_trying")
    response = app.check({"scanned_item": scenario.scanned_item, "wardrobe": scenario.wardrobe_items})
    print(json.dumps({key: response[key] for key in ("status", "scan_id", "evaluated", "debug_tier")}, indent=2))
    print(response["decision"]["explanation"])


if __name__ == "__main__":
    main()
