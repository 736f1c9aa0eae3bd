"""Example: score events through the service layer, without Flask.

Controllers are thin; every rule lives in the services wired by the container.
"""

import importlib

from config import get_settings_module

from src.scoring_ledger.scoring_ledger.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    service = container.scoring_service

    # Week 3: homework graded 80%, then re-graded down to 0% (auto penalty suppressed on regression).
    print(service.calculate_score(1, "homework", 3, {"percentage": 80}).to_dict())
    print(service.calculate_score(1, "homework", 3, {"percentage": 0, "previousPercentage": 80}).to_dict())

    # Undo an absence; any homework/quiz points of the week are reversed with it.
    print(service.calculate_score(1, "attendance", 3, {"previousStatus": "attend", "reverseOnly": True}).to_dict())

    last = service.last_history(1, "homework", 3)
    print(last.to_dict() if last else None)


if __name__ == "__main__":
    main()
