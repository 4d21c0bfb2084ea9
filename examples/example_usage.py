"""Example: drive the service layer directly, without Flask.

Controllers are a thin layer; the rules live in the services.
"""

import importlib
from datetime import timedelta

from config import get_settings_module

from src.hostel_mess.hostel_mess.container import CoreSettings, build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, core=CoreSettings.from_module(settings))
    today = container.clock.today()

    for meal in container.meal_plan_service.effective_menu(1, today):
        print(meal.as_dict())

    issued = container.token_service.issue(1, with_qr=False)
    print("token expires in", issued.expires_in_seconds, "s")

    stats = container.stats_service.stats(1, today - timedelta(days=6), today)
    print(stats.as_dict())


if __name__ == "__main__":
    main()
